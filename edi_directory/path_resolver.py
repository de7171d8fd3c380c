"""
Path resolution for directory files.

Derives the filename prefix and extension of the four CSV files (ED, CD, SD, MD)
from the syntax standard and the directory parameters, then locates the first
readable file along the search path.
"""
import os
import re
from enum import Enum
from typing import Any, List, Mapping, Tuple, Union

from .errors import (
    DirectoryFileNotFoundError,
    InvalidParameterError,
    UnsupportedStandardError,
)


class SyntaxStandard(str, Enum):
    """Syntax standards with a path resolution rule."""
    EDIFACT = "E"
    IDOC = "I"

    @classmethod
    def parse(cls, std: Union[str, "SyntaxStandard"]) -> "SyntaxStandard":
        try:
            return cls(std)
        except ValueError:
            raise UnsupportedStandardError(f"Unsupported syntax standard: {std}") from None


FILE_TYPES = ("ED", "CD", "SD", "MD")

# ISO9735 syntax version -> file extension
_SYNTAX_VERSIONS = {1: "10000", 2: "20000", 3: "30000", 4: "40000"}

# SAP control record types -> file extension
_SAP_CONTROL_TYPES = {"40": "04000"}

_EXTENSION_RE = re.compile(r"/(.*/)([^/]+)")


def _syntax_version(value: Any) -> Any:
    if isinstance(value, str) and value.strip().isdigit():
        return int(value)
    return value


def _idoc_prefix_ext(params: Mapping[str, Any]) -> Tuple[str, str]:
    prefix = "/sap"
    idoctype = params.get("IDOCTYPE")
    saptype = params.get("SAPTYPE")

    if idoctype is not None:
        if saptype is None:
            raise InvalidParameterError(f"SAPTYPE required for IDOCTYPE {idoctype}")
        prefix += f"/idocs{saptype}/{idoctype}/"
        extension = params.get("EXTENSION")
        if isinstance(extension, str) and extension:
            m = _EXTENSION_RE.search(extension)
            if m:
                return prefix + m.group(1) + "ED", m.group(2) + ".csv"
            return prefix + "ED", extension + ".csv"
        return prefix + "ED", ".csv"

    ext = _SAP_CONTROL_TYPES.get(saptype)
    if ext is None:
        raise UnsupportedStandardError(f"Unsupported SAP Type: {saptype}")
    return prefix + "/controls/SD", ext + ".csv"


def _edifact_prefix_ext(params: Mapping[str, Any]) -> Tuple[str, str]:
    prefix = "/edifact"
    d0002 = params.get("d0002")

    if d0002 is not None:  # ISO9735 requested
        version = _syntax_version(d0002)
        ext = _SYNTAX_VERSIONS.get(version) if isinstance(version, int) else None
        if ext is None:
            raise InvalidParameterError(f"Invalid syntax version: {d0002}")
        # Any setting of d0076 implies syntax version 4-1
        if version == 4 and params.get("d0076") is not None:
            ext = "40100"
        return prefix + "/iso9735/SD", ext + ".csv"

    # UN/TDID requested
    d0052, d0054 = params.get("d0052"), params.get("d0054")
    if d0052 is None or d0054 is None:
        raise InvalidParameterError(
            "UN/TDID lookup needs d0052 (version) and d0054 (release)"
        )
    prefix += "/untdid/ID" if params.get("is_iedi") else "/untdid/ED"
    return prefix, (str(d0052) + str(d0054)).lower() + ".csv"


def resolve_prefix_ext(std: Union[str, SyntaxStandard], params: Mapping[str, Any]) -> Tuple[str, str]:
    """
    Derive the path fragments of the directory files from the parameters.

    Args:
        std: Syntax standard key, 'E' (UN/EDIFACT) or 'I' (SAP IDoc)
        params: Directory parameters (d0002, d0052, ... or IDOCTYPE, SAPTYPE, EXTENSION)

    Returns:
        (prefix, extension) shared by the ED, CD, SD and MD files
    """
    standard = SyntaxStandard.parse(std)
    if standard is SyntaxStandard.IDOC:
        return _idoc_prefix_ext(params)
    return _edifact_prefix_ext(params)


def data_element_prefix(prefix: str) -> str:
    """There is no IDED file: interactive EDI shares the batch data elements."""
    return re.sub(r"ID$", "ED", prefix)


def split_search_path(search_path: str) -> List[str]:
    """Search path entries; trailing empty entries are dropped."""
    entries = search_path.split(os.pathsep)
    while entries and entries[-1] == "":
        entries.pop()
    return entries


def find_path(prefix: str, ext: str, selector: str, search_path: str) -> str:
    """
    Return the first readable file for the selector along the search path.

    Search path entries are prepended to the relative filename as-is.

    Raises:
        DirectoryFileNotFoundError: no entry holds a readable file
    """
    filename = f"{prefix}{selector}.{ext}"
    for datadir in split_search_path(search_path):
        path = datadir + filename
        if os.path.isfile(path) and os.access(path, os.R_OK):
            return path
    raise DirectoryFileNotFoundError(filename, search_path)
