"""Storage adapters."""

from .base import BlobAdapter
from .factory import make_adapter
from .fs import FilesystemAdapter

__all__ = ["BlobAdapter", "FilesystemAdapter", "make_adapter"]
