"""
Abstract log store interface.

The retention engine only talks to stores through this interface, so local
disks, mounted shares and test doubles are interchangeable.
"""

from abc import ABC, abstractmethod


class LogStore(ABC):
    """
    Base class for log stores.

    Subclasses must implement listing, fetch, store, delete and compress.
    """

    store_name = "base"

    @abstractmethod
    def list_raw_logs(self) -> list[str]:
        """
        List uncompressed, dated log files.

        Returns:
            File names, oldest first
        """
        pass

    @abstractmethod
    def list_archived_logs(self) -> list[str]:
        """
        List compressed archives.

        Returns:
            Archive names, oldest first
        """
        pass

    @abstractmethod
    def fetch(self, name: str) -> bytes:
        """
        Read a file's bytes.

        Raises:
            NotFoundError: If the file does not exist
            ReadFailureError: If the file exists but could not be read
        """
        pass

    @abstractmethod
    def store(self, name: str, content: bytes) -> None:
        """
        Write (or overwrite) a file.

        Raises:
            WriteFailureError: If the bytes could not be persisted
        """
        pass

    @abstractmethod
    def delete(self, name: str) -> None:
        """
        Remove a file.

        Raises:
            NotFoundError: If the file does not exist
            WriteFailureError: If the file exists but could not be removed
        """
        pass

    @abstractmethod
    def compress(self, source_name: str, archive_name: str) -> None:
        """
        Compress a raw log into an archive in the same store.

        Raises:
            NotFoundError: If the source does not exist
            CompressionError: If the archive could not be created
        """
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.store_name})"
