"""Factory for creating storage adapters."""

from ..config import StoreConfig
from ..errors import ConfigError
from .base import BlobAdapter
from .fs import FilesystemAdapter


def validate_fs_config(config: StoreConfig) -> None:
    """
    Early validation of filesystem configuration.

    Raises:
        ConfigError: If the base directory is unusable
    """
    base = config.base_directory
    if base.exists() and not base.is_dir():
        raise ConfigError(f"base_directory is not a directory: {base}")


def make_adapter(config: StoreConfig) -> BlobAdapter:
    """
    Create a storage adapter based on configuration.

    Args:
        config: Store configuration

    Returns:
        Adapter instance (bootstrapped when ``config.bootstrap`` is set)

    Raises:
        ConfigError: If configuration is invalid
        NotImplementedError: If provider is not supported
    """
    if config.provider == "fs":
        validate_fs_config(config)
        return FilesystemAdapter.from_config(config)

    raise NotImplementedError(f"Provider {config.provider} not supported")
