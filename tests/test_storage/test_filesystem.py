"""
Tests for the filesystem log store.

Tests cover:
- Listing raw logs and archives
- fetch/store/delete round trips and NotFound errors
- bz2 tarball compression
- Remote path prefixes
"""

import tarfile
from pathlib import Path
from unittest.mock import patch

import pytest

from logkeeper.errors import (
    CompressionError,
    NotFoundError,
    ReadFailureError,
    WriteFailureError,
)
from logkeeper.storage.filesystem import FilesystemLogStore


@pytest.fixture
def log_dir(tmp_path):
    """Directory with two dated raw logs, an archive and some noise."""
    directory = tmp_path / "logs"
    directory.mkdir()
    (directory / "laravel-2024-02-01.log").write_text("first day\n")
    (directory / "laravel-2024-02-02.log").write_text("second day\n")
    (directory / "laravel-2024-01-01.log.tar.bz2").write_bytes(b"archived")
    (directory / "laravel.log").write_text("no date\n")
    (directory / "notes.txt").write_text("not a log\n")
    (directory / "nested").mkdir()
    (directory / "nested" / "laravel-2024-02-03.log").write_text("ignored\n")
    return directory


class TestListing:
    """Tests for list_raw_logs and list_archived_logs."""

    def test_raw_logs_need_date_and_suffix(self, log_dir):
        store = FilesystemLogStore(log_dir)

        assert store.list_raw_logs() == [
            "laravel-2024-02-01.log",
            "laravel-2024-02-02.log",
        ]

    def test_archives(self, log_dir):
        store = FilesystemLogStore(log_dir)

        assert store.list_archived_logs() == ["laravel-2024-01-01.log.tar.bz2"]

    def test_missing_directory_lists_nothing(self, tmp_path):
        store = FilesystemLogStore(tmp_path / "does-not-exist")

        assert store.list_raw_logs() == []
        assert store.list_archived_logs() == []


class TestReadWriteDelete:
    """Tests for fetch, store and delete."""

    def test_store_then_fetch(self, tmp_path):
        store = FilesystemLogStore(tmp_path / "remote")

        store.store("laravel-2024-02-01.log.tar.bz2", b"payload")

        assert store.fetch("laravel-2024-02-01.log.tar.bz2") == b"payload"

    def test_store_overwrites(self, log_dir):
        store = FilesystemLogStore(log_dir)

        store.store("laravel-2024-01-01.log.tar.bz2", b"new")

        assert (log_dir / "laravel-2024-01-01.log.tar.bz2").read_bytes() == b"new"

    def test_store_leaves_no_temp_files(self, tmp_path):
        store = FilesystemLogStore(tmp_path)

        store.store("laravel-2024-02-01.log.tar.bz2", b"payload")

        assert [p.name for p in tmp_path.iterdir()] == ["laravel-2024-02-01.log.tar.bz2"]

    def test_fetch_missing_raises(self, log_dir):
        store = FilesystemLogStore(log_dir)

        with pytest.raises(NotFoundError):
            store.fetch("laravel-1999-01-01.log")

    def test_delete(self, log_dir):
        store = FilesystemLogStore(log_dir)

        store.delete("laravel-2024-02-01.log")

        assert not (log_dir / "laravel-2024-02-01.log").exists()

    def test_delete_missing_raises(self, log_dir):
        store = FilesystemLogStore(log_dir)

        with pytest.raises(NotFoundError):
            store.delete("laravel-1999-01-01.log")

    def test_delete_permission_error_is_write_failure(self, log_dir):
        """OS errors other than a missing file surface as WriteFailureError."""
        store = FilesystemLogStore(log_dir)

        with patch.object(Path, "unlink", side_effect=PermissionError("Permission denied")):
            with pytest.raises(WriteFailureError, match="Permission denied"):
                store.delete("laravel-2024-02-01.log")

    def test_unreadable_entry_is_read_failure(self, log_dir):
        """Reading a directory surfaces as ReadFailureError, not a raw OSError."""
        store = FilesystemLogStore(log_dir)

        with pytest.raises(ReadFailureError):
            store.fetch("nested")

    def test_write_failure(self, tmp_path):
        """OS errors during write surface as WriteFailureError."""
        store = FilesystemLogStore(tmp_path)

        with patch("logkeeper.storage.filesystem.os.replace", side_effect=OSError("disk full")):
            with pytest.raises(WriteFailureError, match="disk full"):
                store.store("laravel-2024-02-01.log.tar.bz2", b"payload")

        assert list(tmp_path.iterdir()) == []

    def test_rejects_path_traversal(self, tmp_path):
        store = FilesystemLogStore(tmp_path / "logs")

        with pytest.raises(ValueError):
            store.fetch("../secret.log")


class TestCompress:
    """Tests for compress."""

    def test_creates_bz2_tarball(self, log_dir):
        store = FilesystemLogStore(log_dir)

        store.compress("laravel-2024-02-01.log", "laravel-2024-02-01.log.tar.bz2")

        archive = log_dir / "laravel-2024-02-01.log.tar.bz2"
        with tarfile.open(archive, "r:bz2") as tar:
            assert tar.getnames() == ["laravel-2024-02-01.log"]
            member = tar.extractfile("laravel-2024-02-01.log")
            assert member.read() == b"first day\n"

    def test_source_is_kept(self, log_dir):
        store = FilesystemLogStore(log_dir)

        store.compress("laravel-2024-02-01.log", "laravel-2024-02-01.log.tar.bz2")

        assert (log_dir / "laravel-2024-02-01.log").exists()
        assert "laravel-2024-02-01.log.tar.bz2" in store.list_archived_logs()

    def test_missing_source_raises(self, log_dir):
        store = FilesystemLogStore(log_dir)

        with pytest.raises(NotFoundError):
            store.compress("laravel-1999-01-01.log", "laravel-1999-01-01.log.tar.bz2")

    def test_tar_failure_raises_compression_error(self, log_dir):
        store = FilesystemLogStore(log_dir)

        with patch("logkeeper.storage.filesystem.tarfile.open", side_effect=OSError("broken")):
            with pytest.raises(CompressionError):
                store.compress("laravel-2024-02-01.log", "laravel-2024-02-01.log.tar.bz2")


class TestPrefix:
    """Tests for the remote path prefix."""

    def test_prefix_is_a_sub_folder(self, tmp_path):
        store = FilesystemLogStore(tmp_path, prefix="/proj1-prod/")

        store.store("laravel-2024-02-01.log.tar.bz2", b"payload")

        assert store.prefix == "proj1-prod"
        assert (tmp_path / "proj1-prod" / "laravel-2024-02-01.log.tar.bz2").exists()

    def test_environments_do_not_see_each_other(self, tmp_path):
        prod = FilesystemLogStore(tmp_path, prefix="proj1-prod")
        integ = FilesystemLogStore(tmp_path, prefix="proj1-integ")

        prod.store("laravel-2024-02-01.log.tar.bz2", b"payload")

        assert integ.list_archived_logs() == []
        assert prod.list_archived_logs() == ["laravel-2024-02-01.log.tar.bz2"]
