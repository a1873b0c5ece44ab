"""blobsync - mirror a local directory tree into a remote blob container."""

from .config import AccountCredentials, load_account_config
from .exceptions import (
    BlobSyncError,
    ConfigLoadError,
    LocalScanError,
    OperationError,
    RemoteConnectError,
    RemoteListingError,
    RemoteStoreError,
)
from .models import ListingPage, RemoteObjectRecord
from .store import RemoteStore

__version__ = "0.1.0"

__all__ = [
    "AccountCredentials",
    "load_account_config",
    "BlobSyncError",
    "ConfigLoadError",
    "LocalScanError",
    "OperationError",
    "RemoteConnectError",
    "RemoteListingError",
    "RemoteStoreError",
    "ListingPage",
    "RemoteObjectRecord",
    "RemoteStore",
]
