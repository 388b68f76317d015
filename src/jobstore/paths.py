"""Path arithmetic for object paths.

Object paths are relative, slash-separated strings such as
``jobs-results/2024-05-01/<job_id>/<task_id>``. Everything here is pure path
manipulation; nothing touches the filesystem except ``Path.resolve``.
"""

from datetime import datetime, timezone
from pathlib import Path, PurePosixPath
from typing import Optional, Tuple, Union

from .constants import DATE_FORMAT
from .errors import UnsafePathError


def split_path(path: str) -> Tuple[str, str]:
    """Split an object path into its directory and file name.

    Examples:
        "results/2024-05-01/abc" -> ("results/2024-05-01", "abc")
        "abc" -> ("", "abc")
    """
    parts = [p for p in path.replace("\\", "/").split("/") if p]
    if not parts:
        raise UnsafePathError(path, "empty path")
    return "/".join(parts[:-1]), parts[-1]


def safe_target(root: Path, rel_path: str) -> Path:
    """Validate an object path and resolve it inside ``root``.

    Args:
        root: Base directory
        rel_path: Object path relative to root

    Returns:
        Resolved absolute path

    Raises:
        UnsafePathError: If the path is empty, absolute, names root itself,
            or escapes root
    """
    if not rel_path or not rel_path.strip():
        raise UnsafePathError(rel_path, "empty path")

    # Both separators are accepted regardless of host platform
    normalized = rel_path.replace("\\", "/")
    if (normalized.startswith("/") or
            Path(normalized).is_absolute() or
            ".." in normalized.split("/")):
        raise UnsafePathError(rel_path, "absolute path or parent traversal")

    target = (root / normalized).resolve()
    root_resolved = root.resolve()
    if target == root_resolved:
        raise UnsafePathError(rel_path, "refers to the base directory")
    try:
        target.relative_to(root_resolved)
    except ValueError:
        raise UnsafePathError(rel_path)

    return target


def relative_to_base(root: Path, path: Union[str, Path]) -> str:
    """Express ``path`` relative to ``root`` as a POSIX string.

    Both paths must already be resolved the same way (see ``safe_target``).
    """
    return Path(path).relative_to(root).as_posix()


def format_date(when: Optional[datetime] = None) -> str:
    """Format the date segment of the job-system layout (UTC today by default)."""
    when = when or datetime.now(timezone.utc)
    return when.strftime(DATE_FORMAT)


def build_path(directory: str, *parts: Union[str, object], date: Optional[datetime] = None) -> str:
    """Build ``<directory>/<YYYY-MM-DD>/<parts...>``.

    Non-string parts (e.g. ``uuid.UUID``) are converted with ``str``.
    """
    return str(PurePosixPath(directory, format_date(date), *(str(p) for p in parts)))
