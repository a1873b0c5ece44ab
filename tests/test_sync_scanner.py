"""Tests for the local directory scanner."""

import hashlib
import os
import sys
from pathlib import Path
from unittest.mock import patch

import pytest
from conftest import OLDER, write_file

from blobsync.exceptions import LocalScanError
from blobsync.sync.scanner import DirectoryScanner, LocalFile


class TestLocalFile:
    """Tests for LocalFile."""

    def test_from_path(self, local_root):
        path = write_file(local_root, "sub/file.txt", b"hello", OLDER)

        local_file = LocalFile.from_path(path, local_root)

        assert local_file.path == path
        assert local_file.relative_path == "sub/file.txt"
        assert local_file.size == 5
        assert local_file.mtime == OLDER

    def test_checksum_is_md5_of_content(self, local_root):
        path = write_file(local_root, "file.txt", b"hello", OLDER)

        local_file = LocalFile.from_path(path, local_root)

        assert local_file.checksum() == hashlib.md5(b"hello").digest()

    def test_checksum_is_computed_once(self, local_root):
        path = write_file(local_root, "file.txt", b"hello", OLDER)
        local_file = LocalFile.from_path(path, local_root)

        with patch(
            "blobsync.sync.scanner.file_md5", return_value=b"0" * 16
        ) as mock_md5:
            local_file.checksum()
            local_file.checksum()

        mock_md5.assert_called_once_with(path)

    def test_checksum_of_removed_file_raises(self, local_root):
        path = write_file(local_root, "file.txt", b"hello", OLDER)
        local_file = LocalFile.from_path(path, local_root)
        path.unlink()

        with pytest.raises(LocalScanError) as exc_info:
            local_file.checksum()

        assert exc_info.value.path == path

    def test_from_path_reuses_given_stat(self, local_root):
        path = write_file(local_root, "a.txt", b"abc", OLDER)
        file_stat = path.stat()

        with patch.object(Path, "stat", side_effect=AssertionError("stat again")):
            local_file = LocalFile.from_path(path, local_root, file_stat)

        assert local_file.size == 3
        assert local_file.mtime == OLDER


class TestDirectoryScanner:
    """Tests for DirectoryScanner.iter_local."""

    def test_empty_directory(self, local_root):
        assert list(DirectoryScanner().iter_local(local_root)) == []

    def test_nested_files_use_forward_slashes(self, local_root):
        write_file(local_root, "a.txt", b"a", OLDER)
        write_file(local_root, "b/c/d.txt", b"d", OLDER)

        paths = [f.relative_path for f in DirectoryScanner().iter_local(local_root)]

        assert paths == ["a.txt", "b/c/d.txt"]

    def test_directories_are_not_reported(self, local_root):
        (local_root / "empty_dir").mkdir()
        (local_root / "dir_with_file").mkdir()
        write_file(local_root, "dir_with_file/x.txt", b"x", OLDER)

        paths = [f.relative_path for f in DirectoryScanner().iter_local(local_root)]

        assert paths == ["dir_with_file/x.txt"]

    def test_walk_is_depth_first_in_name_order(self, local_root):
        write_file(local_root, "b.txt", b"b", OLDER)
        write_file(local_root, "a/z.txt", b"z", OLDER)
        write_file(local_root, "c/a.txt", b"a", OLDER)

        paths = [f.relative_path for f in DirectoryScanner().iter_local(local_root)]

        assert paths == ["a/z.txt", "b.txt", "c/a.txt"]

    def test_walk_is_lazy(self, local_root):
        write_file(local_root, "a.txt", b"a", OLDER)

        files = DirectoryScanner().iter_local(local_root)

        assert not isinstance(files, list)
        assert next(files).relative_path == "a.txt"

    def test_missing_root_raises(self, tmp_path):
        missing = tmp_path / "missing"

        with pytest.raises(LocalScanError) as exc_info:
            list(DirectoryScanner().iter_local(missing))

        assert exc_info.value.path == missing

    def test_unreadable_subdirectory_aborts_walk(self, local_root):
        write_file(local_root, "a.txt", b"a", OLDER)
        write_file(local_root, "locked/secret.txt", b"s", OLDER)
        real_iterdir = Path.iterdir

        def failing_iterdir(self):
            if self.name == "locked":
                raise PermissionError(13, "Permission denied", str(self))
            return real_iterdir(self)

        with patch.object(Path, "iterdir", failing_iterdir):
            with pytest.raises(LocalScanError, match="Cannot list directory"):
                list(DirectoryScanner().iter_local(local_root))

    def test_broken_symlink_aborts_walk(self, local_root):
        os.symlink(local_root / "nowhere", local_root / "dangling")

        with pytest.raises(LocalScanError, match="Cannot stat"):
            list(DirectoryScanner().iter_local(local_root))

    def test_symlinked_directory_is_skipped(self, local_root, tmp_path):
        outside = tmp_path / "outside"
        write_file(outside, "o.txt", b"o", OLDER)
        os.symlink(outside, local_root / "linked")
        write_file(local_root, "a.txt", b"a", OLDER)

        paths = [f.relative_path for f in DirectoryScanner().iter_local(local_root)]

        assert paths == ["a.txt"]

    @pytest.mark.skipif(
        sys.platform != "linux", reason="needs a filesystem accepting raw bytes"
    )
    def test_undecodable_file_name_aborts_walk(self, local_root):
        write_file(local_root, "a.txt", b"a", OLDER)
        raw_path = os.path.join(os.fsencode(local_root), b"bad\xff.txt")
        with open(raw_path, "wb") as f:
            f.write(b"x")

        with pytest.raises(LocalScanError, match="Cannot map") as exc_info:
            list(DirectoryScanner().iter_local(local_root))

        assert exc_info.value.path == local_root / os.fsdecode(b"bad\xff.txt")
        # The message is printable as plain UTF-8
        str(exc_info.value).encode("utf-8")
