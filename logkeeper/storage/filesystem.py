"""
Filesystem-backed log store.

Serves both the local log directory and a remote directory (mounted share,
synced bucket folder). Archives are bzip2-compressed tarballs holding the
single raw log under its own name.
"""

from __future__ import annotations

import os
import tarfile
import tempfile
from pathlib import Path

from loguru import logger

from logkeeper.errors import (
    CompressionError,
    NotFoundError,
    ReadFailureError,
    WriteFailureError,
)
from logkeeper.retention.policy import ARCHIVE_SUFFIX
from logkeeper.storage.base import LogStore
from logkeeper.utils.dates import has_date

RAW_LOG_SUFFIX = ".log"


class FilesystemLogStore(LogStore):
    """
    Log store rooted at a directory.

    Only the top level of the directory is listed.
    """

    store_name = "filesystem"

    def __init__(self, root: Path | str, prefix: str = ""):
        """
        Initialize the store.

        Args:
            root: Base directory
            prefix: Optional sub-folder inside root, e.g. "proj1-prod", so
                several environments can share one remote directory
        """
        self.root = Path(root).expanduser()
        self.prefix = (prefix or "").strip("/")
        self.base_dir = self.root / self.prefix if self.prefix else self.root

    def _path(self, name: str) -> Path:
        if not name or Path(name).name != name:
            raise ValueError(f"Invalid log name: {name!r}")
        return self.base_dir / name

    def _list(self) -> list[str]:
        if not self.base_dir.is_dir():
            logger.debug(f"Store directory does not exist: {self.base_dir}")
            return []
        return sorted(item.name for item in self.base_dir.iterdir() if item.is_file())

    def list_raw_logs(self) -> list[str]:
        return [
            name
            for name in self._list()
            if name.endswith(RAW_LOG_SUFFIX) and has_date(name)
        ]

    def list_archived_logs(self) -> list[str]:
        return [name for name in self._list() if name.endswith(ARCHIVE_SUFFIX)]

    def fetch(self, name: str) -> bytes:
        path = self._path(name)
        try:
            return path.read_bytes()
        except FileNotFoundError as e:
            raise NotFoundError(f"{name} not found in {self.base_dir}") from e
        except OSError as e:
            raise ReadFailureError(f"Could not read {name} from {self.base_dir}: {e}") from e

    def store(self, name: str, content: bytes) -> None:
        path = self._path(name)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            # Write to a temp file first so a failed write never leaves a partial archive
            fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{name}.")
            try:
                with os.fdopen(fd, "wb") as f:
                    f.write(content)
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise WriteFailureError(f"Could not write {name} to {self.base_dir}: {e}") from e

        logger.debug(f"Stored {name} ({len(content)} bytes) in {self.base_dir}")

    def delete(self, name: str) -> None:
        path = self._path(name)
        try:
            path.unlink()
        except FileNotFoundError as e:
            raise NotFoundError(f"{name} not found in {self.base_dir}") from e
        except OSError as e:
            raise WriteFailureError(f"Could not delete {name} from {self.base_dir}: {e}") from e

        logger.debug(f"Removed {path}")

    def compress(self, source_name: str, archive_name: str) -> None:
        source = self._path(source_name)
        target = self._path(archive_name)

        if not source.is_file():
            raise NotFoundError(f"{source_name} not found in {self.base_dir}")

        try:
            with tarfile.open(target, "w:bz2") as tar:
                tar.add(source, arcname=source_name)
        except (OSError, tarfile.TarError) as e:
            target.unlink(missing_ok=True)
            raise CompressionError(f"Could not compress {source_name} into {archive_name}: {e}") from e

        logger.debug(f"Compressed {source} into {target}")

    def __repr__(self) -> str:
        return f"FilesystemLogStore({self.base_dir})"
