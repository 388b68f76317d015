"""Utility functions for jobstore."""

import contextlib
import logging
import os
import tempfile
import time
from pathlib import Path
from typing import Iterator

from .constants import TEMP_PREFIX


@contextlib.contextmanager
def timed(logger: logging.Logger, component: str, operation: str) -> Iterator[None]:
    """Log how long the wrapped block took, in milliseconds.

    Emits one DEBUG record per call, including when the block raises.
    The structured fields are attached as ``extra`` so handlers that render
    record attributes (JSON formatters, etc.) can pick them up.
    """
    start = time.monotonic()
    try:
        yield
    finally:
        diff = int((time.monotonic() - start) * 1000)
        logger.debug(
            "Execution of %s takes %d ms", operation, diff,
            extra={"component": component, "operation": operation, "time": diff},
        )


def _current_umask() -> int:
    mask = os.umask(0)
    os.umask(mask)
    return mask


@contextlib.contextmanager
def atomic_target(path: Path) -> Iterator[Path]:
    """Yield a temp path next to ``path``; rename it into place on success.

    The parent directory is created first. On any exception the temp file is
    removed and the exception re-raised, so ``path`` is either the old content
    or the complete new content.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    with tempfile.NamedTemporaryFile(
        prefix=f"{TEMP_PREFIX}{path.name}-",
        dir=str(path.parent),
        delete=False,
    ) as tmp:
        tmppath = Path(tmp.name)

    try:
        yield tmppath
        # NamedTemporaryFile is owner-only; stored objects follow the umask
        os.chmod(tmppath, 0o666 & ~_current_umask())
        os.replace(str(tmppath), str(path))
    except BaseException:
        with contextlib.suppress(OSError):
            tmppath.unlink()
        raise


def humanize_size(size: float) -> str:
    """Convert bytes to human-readable format."""
    for unit in ["B", "KB", "MB", "GB"]:
        if size < 1024.:
            return f"{size:.1f} {unit}"
        size /= 1024
    return f"{size:.1f} TB"
