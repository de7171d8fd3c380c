"""
Exception classes raised by the directory lookup layer.
"""


class DirectoryError(Exception):
    """Base class for all EDI directory errors."""


class UnsupportedStandardError(DirectoryError):
    """Unknown syntax standard or unsupported SAP type."""


class InvalidParameterError(DirectoryError, ValueError):
    """A directory parameter has a value no path rule accepts."""


class ConfigurationError(DirectoryError):
    """Settings are missing or malformed (e.g. no search path)."""


class DirectoryFileNotFoundError(DirectoryError):
    """No readable directory file was found on the search path."""

    def __init__(self, filename: str, search_path: str):
        self.filename = filename
        self.search_path = search_path
        super().__init__(
            f"No readable file '.{filename}' found below any dir on '{search_path}'"
        )


class InvalidIdentifierError(DirectoryError, ValueError):
    """An identifier matches none of the known entity shapes."""


class LookupNotFoundError(DirectoryError, LookupError):
    """The identifier is well-formed but its code is not in the directory."""
