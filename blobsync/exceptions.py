"""Exceptions raised by blobsync."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .sync.comparator import SyncOperation


class BlobSyncError(Exception):
    """Base exception for all blobsync errors."""


class ConfigLoadError(BlobSyncError):
    """Account configuration is unreadable or malformed."""


class RemoteStoreError(BlobSyncError):
    """A call against the remote object store failed."""

    def __init__(self, message: str, key: str | None = None):
        super().__init__(message)
        self.key = key


class RemoteConnectError(BlobSyncError):
    """Credentials are invalid or the container is unreachable."""


class RemoteListingError(BlobSyncError):
    """Listing the remote container failed.

    Partial listings are never returned; ``page`` is the 1-based page
    number whose fetch failed.
    """

    def __init__(self, message: str, page: int | None = None):
        super().__init__(message)
        self.page = page


class LocalScanError(BlobSyncError):
    """Walking or reading the local tree failed."""

    def __init__(self, message: str, path: Path | None = None):
        super().__init__(message)
        self.path = path


class OperationError(BlobSyncError):
    """An individual upload or delete failed during execution."""

    def __init__(self, message: str, operation: SyncOperation | None = None):
        super().__init__(message)
        self.operation = operation
