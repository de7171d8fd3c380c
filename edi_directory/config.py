"""
Configuration for directory lookups.

Settings come from an optional YAML file; the search path may be overridden
by the EDI_NDB_PATH environment variable (a .env file in the working directory
is honoured).
"""
import os
from pathlib import Path
from typing import Any, Dict, Literal, Optional, Union

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, ValidationError

from .errors import ConfigurationError

SEARCH_PATH_ENV = "EDI_NDB_PATH"
DEFAULT_CONFIG_FILE = "edi_directory.yaml"


class Settings(BaseModel):
    """Validated settings of the directory layer."""
    model_config = ConfigDict(extra="forbid")

    ndb_path: Optional[str] = None
    caching: bool = True
    encoding: str = "utf-8"
    log_dir: str = "logs"
    log_retention_days: int = 10
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"


def load_settings(config_path: Optional[Union[str, Path]] = None) -> Settings:
    """
    Load settings from YAML file and environment.

    Args:
        config_path: YAML file; when omitted, edi_directory.yaml in the
                     working directory is used if it exists

    Raises:
        ConfigurationError: explicit file missing, or invalid content
    """
    load_dotenv(Path.cwd() / ".env")

    data: Dict[str, Any] = {}
    if config_path is not None:
        config_file = Path(config_path)
        if not config_file.exists():
            raise ConfigurationError(f"Configuration file not found: {config_path}")
    else:
        config_file = Path(DEFAULT_CONFIG_FILE)

    if config_file.exists():
        with open(config_file, 'r', encoding='utf-8') as f:
            try:
                data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ConfigurationError(f"Invalid YAML in {config_file}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigurationError(f"Expected a mapping in {config_file}")

    env_path = os.getenv(SEARCH_PATH_ENV)
    if env_path:
        data["ndb_path"] = env_path

    try:
        return Settings(**data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e


def get_search_path(settings: Optional[Settings] = None) -> str:
    """
    Current search path: EDI_NDB_PATH if set, else the configured ndb_path.

    The environment is re-read on every call. Without settings, they are
    loaded from edi_directory.yaml and .env in the working directory.
    """
    if settings is None:
        settings = load_settings()
    search_path = os.getenv(SEARCH_PATH_ENV) or settings.ndb_path
    if not search_path:
        raise ConfigurationError(
            f"No directory search path: set {SEARCH_PATH_ENV} or 'ndb_path' in {DEFAULT_CONFIG_FILE}"
        )
    return search_path
