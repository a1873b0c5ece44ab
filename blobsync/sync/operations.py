"""Store calls for individual sync operations."""

import hashlib
import logging
from pathlib import Path

from ..content_type import resolve_content_type
from ..store import RemoteStore
from .comparator import SyncOperation

logger = logging.getLogger(__name__)


class SyncOperations:
    """Applies single upload and delete operations against a remote store."""

    def __init__(self, store: RemoteStore):
        """Initialize sync operations.

        Args:
            store: Remote store to write to
        """
        self.store = store

    def upload(self, local_root: Path, operation: SyncOperation) -> int:
        """Upload a local file whole, overwriting the remote object.

        The stored object gets the resolved content type and the MD5 of
        the bytes that were actually read.

        Args:
            local_root: Root of the local tree
            operation: Upload operation (its path is relative to local_root)

        Returns:
            Number of bytes uploaded

        Raises:
            OSError: If the local file cannot be read
            RemoteStoreError: If the store rejects the upload
        """
        full_path = local_root / operation.path
        content = full_path.read_bytes()
        content_type = resolve_content_type(full_path)
        content_md5 = hashlib.md5(content).digest()

        logger.debug(
            "Uploading %s (%d bytes, %s)", operation.path, len(content), content_type
        )
        self.store.put_object(
            operation.path,
            content,
            content_type=content_type,
            content_md5=content_md5,
        )
        return len(content)

    def delete(self, operation: SyncOperation) -> None:
        """Delete a remote object.

        Raises:
            RemoteStoreError: If the store rejects the delete
        """
        logger.debug("Deleting %s", operation.path)
        self.store.delete_object(operation.path)
