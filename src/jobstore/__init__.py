"""Filesystem-backed blob storage for job results and execution artifacts."""

from .config import StoreConfig, load_store_config
from .constants import STORE_VERSION
from .errors import ConfigError, SerializationError, StoreError, UnsafePathError
from .models import ObjectInfo, ObjectRef
from .storage import BlobAdapter, FilesystemAdapter, make_adapter

__version__ = STORE_VERSION

__all__ = [
    "BlobAdapter",
    "ConfigError",
    "FilesystemAdapter",
    "ObjectInfo",
    "ObjectRef",
    "SerializationError",
    "StoreConfig",
    "StoreError",
    "UnsafePathError",
    "load_store_config",
    "make_adapter",
]
