"""Filesystem blob storage adapter.

Objects live under a base directory; an object path such as
``jobs-results/2024-05-01/<job_id>/<task_id>`` maps to the file of the same
relative name. Each operation is a single delegation to the host filesystem,
wrapped with timing instrumentation. Filesystem errors propagate unchanged.
"""

import json
import logging
import os
import shutil
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, BinaryIO, Dict, Iterator, List, Optional, Union

from pydantic import BaseModel

from ..config import StoreConfig
from ..constants import DEFAULT_DIRECTORIES, TEMP_PREFIX
from ..errors import ConfigError, SerializationError
from ..models import ObjectInfo, ObjectRef
from ..paths import build_path, relative_to_base, safe_target, split_path
from ..utils import atomic_target, timed
from .base import PathLike

logger = logging.getLogger(__name__)

COMPONENT = "FilesystemAdapter"


class FilesystemAdapter:
    """
    Blob storage adapter over a local directory tree.

    Attributes:
        base_directory: Resolved root of the tree; every object path is
            relative to it
        directories: Logical directory name -> relative directory
    """

    def __init__(
        self,
        base_directory: Union[str, Path],
        directories: Optional[Dict[str, str]] = None,
        bootstrap: bool = False,
    ):
        """
        Initialize the adapter.

        Args:
            base_directory: Root of the object tree (created if missing)
            directories: Logical directories used by the job system
            bootstrap: Create every configured directory now
        """
        self.base_directory = Path(base_directory).expanduser()
        self.base_directory.mkdir(parents=True, exist_ok=True)
        self.base_directory = self.base_directory.resolve()
        self.directories = dict(directories if directories is not None else DEFAULT_DIRECTORIES)

        if bootstrap:
            self.bootstrap()

    @classmethod
    def from_config(cls, config: StoreConfig) -> "FilesystemAdapter":
        """Create an adapter from a StoreConfig."""
        return cls(config.base_directory, config.directories, bootstrap=config.bootstrap)

    def bootstrap(self) -> None:
        """Ensure every configured directory exists (idempotent)."""
        with timed(logger, COMPONENT, "bootstrap"):
            for rel in self.directories.values():
                safe_target(self.base_directory, rel).mkdir(parents=True, exist_ok=True)
        logger.info("Bootstrapped %d directories under %s", len(self.directories), self.base_directory)

    def path_for(self, directory: str, *parts: Any, date: Optional[datetime] = None) -> str:
        """
        Build an object path in the job-system layout.

        ``adapter.path_for("results", job_id, task_id)`` gives
        ``jobs-results/<YYYY-MM-DD>/<job_id>/<task_id>``.

        Raises:
            ConfigError: If ``directory`` is not a configured logical name
        """
        if directory not in self.directories:
            raise ConfigError(
                f"Unknown directory '{directory}'. Known: {', '.join(sorted(self.directories))}"
            )
        return build_path(self.directories[directory], *parts, date=date)

    # ---- Objects -------------------------------------------------------------

    def put(self, path: str, data: Any) -> ObjectRef:
        """
        Serialize ``data`` as JSON and write it to ``path``.

        The directory part of the path is created as needed. The file is
        written to a temp sibling and renamed into place.

        Returns:
            ObjectRef with the base-relative path

        Raises:
            SerializationError: If ``data`` is not JSON-serializable
        """
        with timed(logger, COMPONENT, "put"):
            target = self._target(path)
            payload = self._encode(path, data)
            with atomic_target(target) as tmp:
                tmp.write_bytes(payload)
            return ObjectRef(path=relative_to_base(self.base_directory, target))

    def get(self, path: PathLike) -> Any:
        """
        Read and deserialize the JSON value stored at ``path``.

        Raises:
            FileNotFoundError: If the object does not exist
            SerializationError: If the content is not valid JSON
        """
        with timed(logger, COMPONENT, "get"):
            key = self._key(path)
            raw = self._target(key).read_bytes()
            try:
                return json.loads(raw.decode("utf-8"))
            except (UnicodeDecodeError, json.JSONDecodeError) as e:
                raise SerializationError(key, e)

    def put_stream(self, path: str, stream: BinaryIO) -> ObjectRef:
        """
        Copy a readable binary stream into ``path``.

        If reading the source fails, the partial temp file is removed and the
        error propagates; an existing object at ``path`` is left untouched.
        """
        with timed(logger, COMPONENT, "put_stream"):
            target = self._target(path)
            with atomic_target(target) as tmp:
                with open(tmp, "wb") as f:
                    shutil.copyfileobj(stream, f)
            return ObjectRef(path=relative_to_base(self.base_directory, target))

    def get_stream(self, path: PathLike) -> BinaryIO:
        """Open the object for binary reading. The caller closes the stream."""
        with timed(logger, COMPONENT, "get_stream"):
            return open(self._target(self._key(path)), "rb")

    def seek(self, path: PathLike, start: int = 0, end: Optional[int] = None) -> bytes:
        """
        Read the byte range ``[start, end)`` of an object.

        Args:
            path: Object path
            start: First byte. Negative (with ``end=None``) reads the last
                ``-start`` bytes.
            end: One past the last byte; None reads to end of file

        Returns:
            The bytes in range, clamped to the file size

        Raises:
            ValueError: If the range is malformed
            FileNotFoundError: If the object does not exist
        """
        if end is not None and (end < 0 or start < 0):
            raise ValueError(f"Invalid byte range: start={start}, end={end}")
        if end is not None and start > end:
            raise ValueError(f"Invalid byte range: start {start} is after end {end}")

        with timed(logger, COMPONENT, "seek"):
            fd = os.open(self._target(self._key(path)), os.O_RDONLY)
            try:
                size = os.fstat(fd).st_size
                if start < 0:
                    start = max(size + start, 0)
                stop = size if end is None else min(end, size)
                start = min(start, size)

                chunks = []
                remaining = stop - start
                os.lseek(fd, start, os.SEEK_SET)
                while remaining > 0:
                    chunk = os.read(fd, remaining)
                    if not chunk:
                        break
                    chunks.append(chunk)
                    remaining -= len(chunk)
                return b"".join(chunks)
            finally:
                os.close(fd)

    # ---- Listing -------------------------------------------------------------

    def list(self, path: str = "") -> List[ObjectRef]:
        """
        Recursively list every object under the directory ``path``.

        An empty path lists the whole tree. Files of in-flight writes are
        skipped.

        Raises:
            FileNotFoundError: If the directory does not exist
        """
        with timed(logger, COMPONENT, "list"):
            root = self._directory(path)
            return [
                ObjectRef(path=relative_to_base(self.base_directory, p))
                for p in sorted(self._walk(root))
            ]

    def list_prefixes(self, path: str = "") -> List[str]:
        """
        List the immediate sub-directories of ``path``.

        Raises:
            FileNotFoundError: If the directory does not exist
        """
        with timed(logger, COMPONENT, "list_prefixes"):
            root = self._directory(path)
            with os.scandir(root) as entries:
                dirs = [e.path for e in entries if e.is_dir(follow_symlinks=False)]
            return sorted(relative_to_base(self.base_directory, d) for d in dirs)

    # ---- Removal and inspection -----------------------------------------------

    def delete(self, path: PathLike) -> None:
        """Delete an object or a whole directory tree. Missing paths are ignored."""
        with timed(logger, COMPONENT, "delete"):
            target = self._target(self._key(path))
            if target.is_dir():
                shutil.rmtree(target)
            elif target.exists():
                target.unlink()
            else:
                logger.debug("Nothing to delete at %s", target)

    def exists(self, path: PathLike) -> bool:
        """Check if an object (or directory) exists."""
        with timed(logger, COMPONENT, "exists"):
            return self._target(self._key(path)).exists()

    def get_metadata(self, path: PathLike) -> ObjectInfo:
        """
        Return size and modification time of an object.

        Raises:
            FileNotFoundError: If the object does not exist
        """
        with timed(logger, COMPONENT, "get_metadata"):
            target = self._target(self._key(path))
            st = target.stat()
            return ObjectInfo(
                path=relative_to_base(self.base_directory, target),
                size=st.st_size,
                modified=datetime.fromtimestamp(st.st_mtime, tz=timezone.utc),
            )

    # ---- Helpers ---------------------------------------------------------------

    def _key(self, path: PathLike) -> str:
        return path.path if isinstance(path, ObjectRef) else str(path)

    def _target(self, path: str) -> Path:
        # Validates the file name part as well
        split_path(path)
        return safe_target(self.base_directory, path)

    def _directory(self, path: str) -> Path:
        if not path or path.strip() in ("", ".", "/"):
            return self.base_directory
        return safe_target(self.base_directory, path)

    def _walk(self, directory: Path) -> Iterator[str]:
        with os.scandir(directory) as entries:
            for entry in entries:
                if entry.is_dir(follow_symlinks=False):
                    yield from self._walk(Path(entry.path))
                elif not entry.name.startswith(TEMP_PREFIX):
                    yield entry.path

    def _encode(self, path: str, data: Any) -> bytes:
        if isinstance(data, BaseModel):
            data = data.model_dump(mode="json")
        try:
            return json.dumps(data).encode("utf-8")
        except (TypeError, ValueError) as e:
            raise SerializationError(path, e)
