"""Store configuration.

Configuration is read from a YAML file (``jobstore.yaml`` by default) and then
overridden by environment variables:

- ``JOBSTORE_BASE_DIR``: base directory for all objects
- ``JOBSTORE_BOOTSTRAP``: create the configured directories on startup
"""

import os
from pathlib import Path
from typing import Dict, Optional, Union

import platformdirs
import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from .constants import CONFIG_FILE, DEFAULT_DIRECTORIES, ENV_BASE_DIR, ENV_BOOTSTRAP
from .errors import ConfigError


def default_base_directory() -> Path:
    """Platform-appropriate data directory, e.g. ~/.local/share/jobstore."""
    return Path(platformdirs.user_data_dir("jobstore", "jobstore"))


class StoreConfig(BaseModel):
    """Configuration for a storage adapter."""

    provider: str = "fs"
    base_directory: Path = Field(default_factory=default_base_directory)
    directories: Dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_DIRECTORIES))
    bootstrap: bool = False

    @field_validator("base_directory", mode="before")
    @classmethod
    def validate_base_directory(cls, v):
        """Reject empty values, which would root the store at the working directory."""
        if v is None or not str(v).strip():
            raise ConfigError("base_directory required for filesystem storage")
        return v

    @field_validator("directories")
    @classmethod
    def validate_directories(cls, v: Dict[str, str]) -> Dict[str, str]:
        """Directory entries must be relative."""
        for name, rel in v.items():
            if not rel or rel.startswith(("/", "\\")) or ".." in rel.replace("\\", "/").split("/"):
                raise ValueError(f"directory '{name}' must be a relative path inside the base directory: {rel!r}")
        return v


def _env_flag(value: str) -> bool:
    return value.strip().lower() in ("true", "1", "yes")


def load_store_config(path: Optional[Union[str, Path]] = None) -> StoreConfig:
    """Load configuration from YAML, then apply environment overrides.

    Args:
        path: Config file. Defaults to ``jobstore.yaml`` in the working
            directory; a missing file yields the defaults.

    Raises:
        ConfigError: If the file is not valid YAML or fails validation
    """
    cfg_path = Path(path) if path else Path.cwd() / CONFIG_FILE

    data = {}
    if cfg_path.exists():
        try:
            data = yaml.safe_load(cfg_path.read_text()) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {cfg_path}: {e}")
        if not isinstance(data, dict):
            raise ConfigError(f"Expected a mapping in {cfg_path}, got {type(data).__name__}")
        # Allow the settings to live under a top-level "storage" key
        data = data.get("storage", data)
        if not isinstance(data, dict):
            raise ConfigError(f"Expected a mapping under 'storage' in {cfg_path}, got {type(data).__name__}")

    if ENV_BASE_DIR in os.environ:
        data["base_directory"] = os.environ[ENV_BASE_DIR]
    if ENV_BOOTSTRAP in os.environ:
        data["bootstrap"] = _env_flag(os.environ[ENV_BOOTSTRAP])

    try:
        return StoreConfig(**data)
    except ValidationError as e:
        raise ConfigError(f"Invalid store configuration: {e}")
