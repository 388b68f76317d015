"""Custom exceptions for jobstore.

Filesystem errors (``OSError`` and subclasses such as ``FileNotFoundError``)
are not wrapped; they propagate to the caller unchanged. The types below cover
the failures jobstore detects itself.
"""


class StoreError(RuntimeError):
    """Base class for all jobstore errors."""
    pass


class UnsafePathError(StoreError, ValueError):
    """Object path is empty, absolute, or escapes the base directory."""

    def __init__(self, path: str, reason: str = "escapes base directory"):
        self.path = path
        self.reason = reason
        super().__init__(f"Unsafe object path {path!r}: {reason}")


class SerializationError(StoreError):
    """Stored content could not be encoded or decoded as JSON."""

    def __init__(self, path: str, cause: Exception):
        self.path = path
        self.cause = cause
        super().__init__(f"Cannot (de)serialize object at {path}: {cause}")


class ConfigError(StoreError):
    """Invalid store configuration."""
    pass
