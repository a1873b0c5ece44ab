"""Local directory scanning for sync operations."""

import logging
import os
import stat
from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from ..exceptions import LocalScanError
from ..utils import file_md5

logger = logging.getLogger(__name__)


@dataclass
class LocalFile:
    """Represents a local file with metadata."""

    path: Path
    """Absolute path to the file"""

    relative_path: str
    """Relative path (using forward slashes for cross-platform compatibility)"""

    size: int
    """File size in bytes"""

    mtime: float
    """Last modification time (Unix timestamp)"""

    _checksum: Optional[bytes] = field(default=None, repr=False, compare=False)

    @classmethod
    def from_path(
        cls,
        file_path: Path,
        base_path: Path,
        file_stat: Optional[os.stat_result] = None,
    ) -> "LocalFile":
        """Create LocalFile from a path.

        Args:
            file_path: Absolute path to the file
            base_path: Base path for calculating relative paths
            file_stat: Stat result already taken for ``file_path``, if any

        Returns:
            LocalFile instance

        Raises:
            LocalScanError: If the relative path is not valid UTF-8 and so
                cannot be used as an object key
        """
        if file_stat is None:
            file_stat = file_path.stat()
        # Use as_posix() so keys match remote object names on every platform
        relative_path = file_path.relative_to(base_path).as_posix()
        try:
            relative_path.encode("utf-8")
        except UnicodeEncodeError as e:
            raise LocalScanError(
                f"Cannot map {file_path!r} to an object key: {e}", path=file_path
            ) from e
        return cls(
            path=file_path,
            relative_path=relative_path,
            size=file_stat.st_size,
            mtime=file_stat.st_mtime,
        )

    def checksum(self) -> bytes:
        """MD5 digest of the file content, computed on first use.

        Raises:
            LocalScanError: If the file cannot be read
        """
        if self._checksum is None:
            try:
                self._checksum = file_md5(self.path)
            except OSError as e:
                raise LocalScanError(
                    f"Cannot hash {self.path}: {e}", path=self.path
                ) from e
        return self._checksum


class DirectoryScanner:
    """Walks a local directory tree and yields its regular files.

    Unreadable entries abort the walk instead of being skipped: a partial
    view of the tree would turn every missing file into a remote delete.

    Examples:
        >>> scanner = DirectoryScanner()
        >>> for f in scanner.iter_local(Path("/sync/folder")):
        ...     print(f.relative_path)
    """

    def iter_local(self, root: Path) -> Iterator[LocalFile]:
        """Recursively enumerate regular files below ``root``.

        Entries are visited depth-first in name order. Directories are
        descended into but never reported; symlinked directories and
        special files are skipped.

        Args:
            root: Directory to scan

        Yields:
            LocalFile for each regular file

        Raises:
            LocalScanError: On the first entry that cannot be read, or
                whose relative path is not valid UTF-8
        """
        yield from self._walk(root, root)

    def _walk(self, directory: Path, base_path: Path) -> Iterator[LocalFile]:
        try:
            entries = sorted(directory.iterdir(), key=lambda p: p.name)
        except OSError as e:
            raise LocalScanError(
                f"Cannot list directory {directory}: {e}", path=directory
            ) from e

        for item in entries:
            try:
                item_stat = item.stat()
                is_link = item.is_symlink()
            except OSError as e:
                raise LocalScanError(f"Cannot stat {item}: {e}", path=item) from e

            if stat.S_ISDIR(item_stat.st_mode):
                if is_link:
                    logger.debug("Skipping symlinked directory: %s", item)
                    continue
                yield from self._walk(item, base_path)
            elif stat.S_ISREG(item_stat.st_mode):
                yield LocalFile.from_path(item, base_path, item_stat)
            else:
                logger.debug("Skipping special file: %s", item)
