"""Core sync engine: executes reconciled operations against a remote store."""

import logging
import time
from collections.abc import Iterator, Sequence
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from pathlib import Path
from typing import Optional

from rich.progress import Progress, SpinnerColumn, TextColumn

from ..exceptions import OperationError, RemoteStoreError
from ..output import OutputFormatter
from ..store import RemoteStore
from .comparator import Reconciler, SyncAction, SyncOperation
from .index import fetch_remote_index
from .operations import SyncOperations
from .reporter import OperationReporter, operation_to_dict
from .scanner import DirectoryScanner

logger = logging.getLogger(__name__)


def _create_empty_stats() -> dict:
    return {"uploads": 0, "deletes": 0, "bytes_uploaded": 0}


class SyncExecutor:
    """Applies an operation list to the remote store, stopping at the first failure.

    Operations already applied before a failure stay applied. One line is
    written to the output per completed operation, even in quiet mode, and
    completed operations are kept in ``applied``.
    """

    def __init__(
        self,
        store: RemoteStore,
        output: OutputFormatter,
        max_workers: int = 1,
    ):
        """Initialize executor.

        Args:
            store: Remote store to apply operations to
            output: Output formatter receiving one line per completed operation
            max_workers: Number of parallel workers (default: 1 for sequential)
        """
        if max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        self.output = output
        self.max_workers = max_workers
        self.operations = SyncOperations(store)
        self.applied: list[SyncOperation] = []

    def apply(self, operations: Sequence[SyncOperation], local_root: Path) -> dict:
        """Apply operations in order.

        With more than one worker, all uploads run first and deletes only
        start once every upload has finished.

        Args:
            operations: Operations from the reconciler
            local_root: Root of the local tree

        Returns:
            Dictionary with counts of applied uploads and deletes

        Raises:
            OperationError: For the first operation that fails
        """
        stats = _create_empty_stats()
        self.applied = []

        if self.max_workers == 1:
            for operation in operations:
                uploaded = self._apply_single(operation, local_root)
                self._record(operation, uploaded, stats)
            return stats

        uploads = [op for op in operations if op.action == SyncAction.UPLOAD]
        deletes = [op for op in operations if op.action == SyncAction.DELETE]
        self._apply_parallel(uploads, local_root, stats)
        self._apply_parallel(deletes, local_root, stats)
        return stats

    def _apply_single(self, operation: SyncOperation, local_root: Path) -> int:
        """Apply one operation, returning the number of bytes uploaded."""
        action_start = time.time()
        try:
            if operation.action == SyncAction.UPLOAD:
                uploaded = self.operations.upload(local_root, operation)
            else:
                self.operations.delete(operation)
                uploaded = 0
        except (OSError, RemoteStoreError) as e:
            raise OperationError(
                f"{operation.action.value.capitalize()} of {operation.path} failed: {e}",
                operation=operation,
            ) from e

        logger.debug(
            "%s of %s took %.2fs",
            operation.action.value,
            operation.path,
            time.time() - action_start,
        )
        return uploaded

    def _apply_parallel(
        self,
        operations: Sequence[SyncOperation],
        local_root: Path,
        stats: dict,
    ) -> None:
        """Apply operations with a bounded thread pool.

        At most ``max_workers`` operations are in flight. After the first
        failure nothing new is submitted; running operations may finish.
        Results are recorded on the calling thread so log lines never
        interleave.
        """
        if not operations:
            return

        logger.debug(
            "Executing %d operation(s) with %d workers",
            len(operations),
            self.max_workers,
        )
        pending: Iterator[SyncOperation] = iter(operations)
        in_flight: dict[Future, SyncOperation] = {}
        failure: Optional[OperationError] = None

        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:

            def submit_next() -> bool:
                operation = next(pending, None)
                if operation is None:
                    return False
                future = executor.submit(self._apply_single, operation, local_root)
                in_flight[future] = operation
                return True

            while len(in_flight) < self.max_workers and submit_next():
                pass

            while in_flight:
                done, _ = wait(in_flight, return_when=FIRST_COMPLETED)
                for future in done:
                    operation = in_flight.pop(future)
                    try:
                        uploaded = future.result()
                    except OperationError as e:
                        if failure is None:
                            failure = e
                        else:
                            logger.debug("Additional failure: %s", e)
                        continue
                    self._record(operation, uploaded, stats)

                if failure is None:
                    while len(in_flight) < self.max_workers and submit_next():
                        pass

        if failure is not None:
            raise failure

    def _record(self, operation: SyncOperation, uploaded: int, stats: dict) -> None:
        if operation.action == SyncAction.UPLOAD:
            stats["uploads"] += 1
            stats["bytes_uploaded"] += uploaded
            message = f"Uploaded {operation.path}"
        else:
            stats["deletes"] += 1
            message = f"Deleted {operation.path}"
        logger.info(message)
        self.applied.append(operation)
        self.output.result(message)


class SyncEngine:
    """Core sync engine that orchestrates one reconciliation run."""

    def __init__(
        self,
        store: RemoteStore,
        output: Optional[OutputFormatter] = None,
        scanner: Optional[DirectoryScanner] = None,
    ):
        """Initialize sync engine.

        Args:
            store: Remote store holding the container to synchronize
            output: Output formatter for displaying progress/status
            scanner: Directory scanner for the local tree
        """
        self.store = store
        self.output = output or OutputFormatter()
        self.reconciler = Reconciler(scanner)
        self.reporter = OperationReporter(self.output)

    def plan(self, local_root: Path) -> list[SyncOperation]:
        """List the remote container and reconcile it against ``local_root``.

        No operation is applied here; the remote listing and local walk
        both complete before the list is returned.

        Raises:
            RemoteListingError: If listing the container fails
            LocalScanError: If walking the local tree fails
        """
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=self.output.console,
            transient=True,
            disable=self.output.quiet or self.output.json_output,
        ) as progress:
            task = progress.add_task("Listing remote container...", total=None)
            list_start = time.time()
            remote_index = fetch_remote_index(self.store)
            progress.update(
                task, description=f"Found {len(remote_index)} remote object(s)"
            )
            logger.debug(
                "Remote listing took %.2fs for %d objects",
                time.time() - list_start,
                len(remote_index),
            )

            task = progress.add_task("Scanning local directory...", total=None)
            operations = self.reconciler.reconcile(remote_index, local_root)
            progress.update(task, description=f"Planned {len(operations)} operation(s)")

        return operations

    def sync(
        self,
        local_root: Path,
        dry_run: bool = False,
        max_workers: int = 1,
    ) -> dict:
        """Synchronize the remote container with ``local_root``.

        Args:
            local_root: Local directory whose content the container should mirror
            dry_run: If True, only print the operations without applying them
            max_workers: Number of parallel workers for uploads/deletes

        Returns:
            Dictionary with sync statistics

        Examples:
            >>> engine = SyncEngine(store)
            >>> stats = engine.sync(Path("/site"), dry_run=True)
            >>> print(f"Would upload {stats['uploads']} files")
        """
        if not local_root.exists():
            raise ValueError(f"Local directory does not exist: {local_root}")
        if not local_root.is_dir():
            raise ValueError(f"Local path is not a directory: {local_root}")

        operations = self.plan(local_root)
        stats = self._categorize_operations(operations)
        self._display_sync_plan(stats, dry_run)

        if dry_run:
            self.reporter.report(operations, local_root)
            stats["applied"] = []
        else:
            executor = SyncExecutor(self.store, self.output, max_workers=max_workers)
            stats.update(executor.apply(operations, local_root))
            stats["applied"] = [operation_to_dict(op) for op in executor.applied]

        stats["dry_run"] = dry_run
        self._display_summary(stats, dry_run)
        return stats

    def _categorize_operations(self, operations: Sequence[SyncOperation]) -> dict:
        stats = _create_empty_stats()
        for operation in operations:
            if operation.action == SyncAction.UPLOAD:
                stats["uploads"] += 1
            else:
                stats["deletes"] += 1
        return stats

    def _display_sync_plan(self, stats: dict, dry_run: bool) -> None:
        if dry_run:
            self.output.info("Dry run: No changes will be made")
        self.output.info("Sync plan:")
        self.output.info(f"  ↑ Upload: {stats['uploads']} file(s)")
        self.output.info(f"  ✗ Delete remote: {stats['deletes']} file(s)")
        self.output.print("")

    def _display_summary(self, stats: dict, dry_run: bool) -> None:
        self.output.print("")
        if dry_run:
            self.output.success("Dry run complete!")
        else:
            self.output.success("Sync complete!")

        total_actions = stats["uploads"] + stats["deletes"]
        if total_actions == 0:
            self.output.info("No changes needed - everything is in sync!")
            return

        self.output.info(f"Total actions: {total_actions}")
        if stats["uploads"] > 0:
            verb = "To upload" if dry_run else "Uploaded"
            self.output.info(f"  {verb}: {stats['uploads']}")
            if not dry_run:
                self.output.info(
                    f"  Transferred: {self.output.format_size(stats['bytes_uploaded'])}"
                )
        if stats["deletes"] > 0:
            verb = "To delete" if dry_run else "Deleted"
            self.output.info(f"  {verb}: {stats['deletes']}")
