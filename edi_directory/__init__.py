"""
Lookup access to EDI standards directories: UN/EDIFACT (UN/TDID and ISO9735)
and SAP IDoc definitions stored as semicolon-delimited files.
"""
from .directory import Directory
from .errors import (
    ConfigurationError,
    DirectoryError,
    DirectoryFileNotFoundError,
    InvalidIdentifierError,
    InvalidParameterError,
    LookupNotFoundError,
    UnsupportedStandardError,
)
from .identifiers import EntityKind, EntityRef, classify
from .path_resolver import SyntaxStandard, find_path, resolve_prefix_ext
from .records import DataElementProperties, Entry, NamedList, ParseDiagnostic, ParseReport
from .registry import (
    DirectoryRegistry,
    caching_off,
    caching_on,
    create,
    default_registry,
    flush_cache,
    is_caching,
)

__version__ = "0.9.3"

__all__ = [
    "ConfigurationError",
    "DataElementProperties",
    "Directory",
    "DirectoryError",
    "DirectoryFileNotFoundError",
    "DirectoryRegistry",
    "EntityKind",
    "EntityRef",
    "Entry",
    "InvalidIdentifierError",
    "InvalidParameterError",
    "LookupNotFoundError",
    "NamedList",
    "ParseDiagnostic",
    "ParseReport",
    "SyntaxStandard",
    "UnsupportedStandardError",
    "caching_off",
    "caching_on",
    "classify",
    "create",
    "default_registry",
    "find_path",
    "flush_cache",
    "is_caching",
    "resolve_prefix_ext",
]
