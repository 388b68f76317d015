"""Base protocol for blob storage adapters."""

from typing import Any, BinaryIO, List, Optional, Protocol, Union

from ..models import ObjectInfo, ObjectRef

PathLike = Union[str, ObjectRef]


class BlobAdapter(Protocol):
    """
    Protocol for blob storage adapters.

    Object paths are relative to the adapter's root. All returned paths are
    relative too. I/O errors from the backing store propagate to the caller.
    """

    def put(self, path: str, data: Any) -> ObjectRef:
        """
        Store a JSON-serializable value.

        Args:
            path: Object path
            data: Value to serialize

        Returns:
            ObjectRef with the root-relative path
        """
        ...

    def get(self, path: PathLike) -> Any:
        """
        Load and deserialize a value stored with ``put``.

        Raises:
            FileNotFoundError: If the object does not exist
        """
        ...

    def put_stream(self, path: str, stream: BinaryIO) -> ObjectRef:
        """Store the bytes read from ``stream``."""
        ...

    def get_stream(self, path: PathLike) -> BinaryIO:
        """Open the object for binary reading. The caller closes it."""
        ...

    def seek(self, path: PathLike, start: int = 0, end: Optional[int] = None) -> bytes:
        """Read the byte range ``[start, end)`` of an object."""
        ...

    def list(self, path: str) -> List[ObjectRef]:
        """Recursively list objects under ``path``."""
        ...

    def list_prefixes(self, path: str) -> List[str]:
        """List the immediate sub-prefixes of ``path``."""
        ...

    def delete(self, path: PathLike) -> None:
        """Delete an object or everything under a prefix."""
        ...

    def exists(self, path: PathLike) -> bool:
        """Check if an object exists."""
        ...

    def get_metadata(self, path: PathLike) -> ObjectInfo:
        """Return size and modification time of an object."""
        ...
