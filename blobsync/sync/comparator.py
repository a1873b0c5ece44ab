"""Reconciliation of a local tree against a remote object index."""

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

from ..models import RemoteObjectRecord
from ..utils import format_checksum, format_timestamp
from .scanner import DirectoryScanner, LocalFile

logger = logging.getLogger(__name__)

REASON_MISSING_AT_REMOTE = "Missing at remote"
REASON_NO_LONGER_LOCAL = "No longer present locally"


class SyncAction(str, Enum):
    """Actions that can be taken during sync."""

    UPLOAD = "upload"
    """Upload local file to remote"""

    DELETE = "delete"
    """Delete remote object"""


@dataclass(frozen=True)
class SyncOperation:
    """One pending change to the remote container."""

    action: SyncAction
    """Action to take"""

    path: str
    """Key of the object, identical to the file's relative path"""

    reason: str
    """Human-readable reason for this operation"""


class Reconciler:
    """Decides which uploads and deletes make the remote match the local tree.

    For every local file:

    - no remote object with the same key: upload
    - local mtime not after the remote ``last_modified``: unchanged
    - local mtime after it: compare MD5 digests, upload only if they differ

    Remote keys never matched by a local file are deleted. Keys are
    compared case-sensitively. Uploads come out in walk order, followed by
    deletes sorted by key.
    """

    def __init__(self, scanner: Optional[DirectoryScanner] = None):
        """Initialize reconciler.

        Args:
            scanner: Directory scanner used to walk the local root
        """
        self.scanner = scanner or DirectoryScanner()

    def reconcile(
        self,
        remote_index: Mapping[str, RemoteObjectRecord],
        local_root: Path,
    ) -> list[SyncOperation]:
        """Compute the operation list for ``local_root`` against ``remote_index``.

        Args:
            remote_index: Mapping of object key to remote record (not modified)
            local_root: Root of the local tree

        Returns:
            Ordered list of SyncOperation objects

        Raises:
            LocalScanError: If the walk or a checksum read fails; no
                operations are returned in that case
        """
        return self.reconcile_files(remote_index, self.scanner.iter_local(local_root))

    def reconcile_files(
        self,
        remote_index: Mapping[str, RemoteObjectRecord],
        local_files: Iterable[LocalFile],
    ) -> list[SyncOperation]:
        """Compute the operation list from an already enumerated local view."""
        uploads: list[SyncOperation] = []
        matched_keys: set[str] = set()
        checksummed = 0

        # Phase 1: walk local files, recording every remote key they match
        for local_file in local_files:
            key = local_file.relative_path
            remote = remote_index.get(key)
            if remote is None:
                uploads.append(
                    SyncOperation(SyncAction.UPLOAD, key, REASON_MISSING_AT_REMOTE)
                )
                continue

            matched_keys.add(key)
            # Equal timestamps count as unchanged
            if not local_file.mtime > remote.mtime:
                continue

            checksummed += 1
            local_md5 = local_file.checksum()
            if remote.content_md5 is None or local_md5 != bytes(remote.content_md5):
                uploads.append(
                    SyncOperation(
                        SyncAction.UPLOAD,
                        key,
                        self._mismatch_reason(local_file, local_md5, remote),
                    )
                )
            else:
                logger.debug("%s: newer timestamp but identical content", key)

        # Phase 2: whatever the walk did not match exists only remotely
        deletes = [
            SyncOperation(SyncAction.DELETE, key, REASON_NO_LONGER_LOCAL)
            for key in sorted(set(remote_index) - matched_keys)
        ]

        logger.debug(
            "Reconciled %d matched key(s), %d checksum(s) computed: "
            "%d upload(s), %d delete(s)",
            len(matched_keys),
            checksummed,
            len(uploads),
            len(deletes),
        )
        return uploads + deletes

    @staticmethod
    def _mismatch_reason(
        local_file: LocalFile, local_md5: bytes, remote: RemoteObjectRecord
    ) -> str:
        return (
            f"Hash mismatch {format_checksum(local_md5)} vs "
            f"{format_checksum(remote.content_md5)}, and "
            f"{format_timestamp(local_file.mtime)} > "
            f"{format_timestamp(remote.last_modified)}"
        )
