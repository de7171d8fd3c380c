"""
Directory registry with caching.

Parsing the CSV files of a directory is costly and a Directory can become quite
memory-consuming, so directories are cached after creation: an interchange with
several messages of the same type builds its directory only once.
"""
import threading
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from .config import Settings, get_search_path, load_settings
from .directory import Directory
from .logger import get_logger
from .path_resolver import SyntaxStandard, resolve_prefix_ext

CacheKey = Tuple[Tuple[str, str], ...]

# Defaults for UN/EDIFACT parameters; caller values win
EDIFACT_DEFAULTS: Dict[str, Any] = {"d0051": "", "d0057": "", "is_iedi": False}


def normalize_params(std: Union[str, SyntaxStandard], params: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """
    Complete the parameter set of a directory request.

    UN/TDID and ISO9735 parameters (std 'E'):
        d0002, d0076           syntax version, release of syntax version 4
        d0065                  message type, e.g. "ORDERS"
        d0052, d0054           message version and release, e.g. "D", "96A"
        d0051, d0057           controlling agency, association code (default "")
        is_iedi                interactive EDI flag (default False)
    SAP IDoc parameters (std 'I'):
        IDOCTYPE, SAPTYPE, EXTENSION (see EDI_DC fields)

    Raises:
        UnsupportedStandardError: std is neither 'E' nor 'I'
    """
    standard = SyntaxStandard.parse(std)
    if standard is SyntaxStandard.EDIFACT:
        return {**EDIFACT_DEFAULTS, **(params or {})}
    return dict(params or {})


def cache_key(params: Mapping[str, Any]) -> CacheKey:
    return tuple(sorted((str(k), repr(v)) for k, v in params.items()))


class DirectoryRegistry:
    """
    Creates directories and caches them per normalized parameter set.

    All cache operations are serialized by one lock. A directory is built at
    most once per key while caching is enabled.
    """

    def __init__(self, search_path: Optional[str] = None, settings: Optional[Settings] = None,
                 caching: Optional[bool] = None):
        self.search_path = search_path
        self.settings = settings
        self.logger = get_logger()
        self._lock = threading.Lock()
        self._cache: Dict[CacheKey, Directory] = {}
        if caching is None and settings is not None:
            caching = settings.caching
        # None: taken from edi_directory.yaml on first use
        self._caching = caching
        self.builds = 0

    def _current_settings(self) -> Settings:
        return self.settings if self.settings is not None else load_settings()

    def _caching_flag(self) -> bool:
        if self._caching is None:
            self._caching = self._current_settings().caching
        return self._caching

    def _build(self, standard: SyntaxStandard, params: Dict[str, Any], prefix: str, ext: str) -> Directory:
        settings = self._current_settings()
        search_path = self.search_path or get_search_path(settings)
        directory = Directory.from_files(standard, params, prefix, ext, search_path, encoding=settings.encoding)
        self.builds += 1
        return directory

    def create(self, std: Union[str, SyntaxStandard], params: Optional[Mapping[str, Any]] = None) -> Directory:
        """
        Create (and cache) a directory. Returns the cached instance when present.

        Args:
            std: Syntax standard key, 'E' (EDIFACT) or 'I' (SAP IDoc)
            params: Parameters that uniquely identify the directory,
                    see normalize_params()

        Raises:
            UnsupportedStandardError, InvalidParameterError: before any
                configuration or file access
        """
        standard = SyntaxStandard.parse(std)
        par = normalize_params(standard, params)
        prefix, ext = resolve_prefix_ext(standard, par)

        with self._lock:
            if not self._caching_flag():
                return self._build(standard, par, prefix, ext)

            key = cache_key(par)
            directory = self._cache.get(key)
            if directory is not None:
                self.logger.debug(f"Directory cache hit: {directory!r}")
                return directory

            directory = self._build(standard, par, prefix, ext)
            self._cache[key] = directory
            return directory

    def enable_caching(self) -> None:
        """Turn on caching (default), saving time but costing memory."""
        with self._lock:
            self._caching = True

    def disable_caching(self) -> None:
        """Turn off caching, saving memory but costing time. Cached entries stay until flush()."""
        with self._lock:
            self._caching = False

    @property
    def caching_enabled(self) -> bool:
        with self._lock:
            return self._caching_flag()

    def flush(self) -> None:
        """Release all cached directories."""
        with self._lock:
            count = len(self._cache)
            self._cache = {}
        self.logger.debug(f"Flushed {count} cached directories")

    def __len__(self) -> int:
        with self._lock:
            return len(self._cache)

    def __contains__(self, params: Mapping[str, Any]) -> bool:
        with self._lock:
            return cache_key(params) in self._cache


_default_registry = DirectoryRegistry()


def default_registry() -> DirectoryRegistry:
    return _default_registry


def create(std: Union[str, SyntaxStandard], params: Optional[Mapping[str, Any]] = None) -> Directory:
    """Create a directory through the default registry."""
    return _default_registry.create(std, params)


def caching_on() -> None:
    _default_registry.enable_caching()


def caching_off() -> None:
    _default_registry.disable_caching()


def is_caching() -> bool:
    return _default_registry.caching_enabled


def flush_cache() -> None:
    _default_registry.flush()
