"""Log stores used by the retention engine."""

from logkeeper.storage.base import LogStore
from logkeeper.storage.filesystem import FilesystemLogStore

__all__ = [
    "LogStore",
    "FilesystemLogStore",
]
