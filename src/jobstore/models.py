"""Data models returned by storage adapters."""

from datetime import datetime

from pydantic import BaseModel, field_validator


class ObjectRef(BaseModel):
    """Reference to a stored object.

    ``path`` is always relative to the adapter's base directory and uses
    forward slashes, so a reference can be handed to another process that
    mounts the same tree somewhere else.
    """
    path: str

    @field_validator("path")
    @classmethod
    def validate_path(cls, v: str) -> str:
        """Normalize separators."""
        return v.replace("\\", "/")

    def __str__(self) -> str:
        return self.path


class ObjectInfo(BaseModel):
    """Size and modification time of a stored object."""
    path: str
    size: int            # bytes
    modified: datetime   # UTC
