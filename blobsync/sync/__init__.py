"""Sync engine for blobsync - reconcile a local tree with a remote container."""

from .comparator import Reconciler, SyncAction, SyncOperation
from .engine import SyncEngine, SyncExecutor
from .index import fetch_remote_index
from .operations import SyncOperations
from .reporter import OperationReporter, format_operation
from .scanner import DirectoryScanner, LocalFile

__all__ = [
    "SyncEngine",
    "SyncExecutor",
    "SyncOperations",
    "Reconciler",
    "SyncAction",
    "SyncOperation",
    "OperationReporter",
    "format_operation",
    "DirectoryScanner",
    "LocalFile",
    "fetch_remote_index",
]
