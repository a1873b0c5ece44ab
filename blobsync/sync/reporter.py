"""Rendering of operation lists for dry runs and audit output."""

from collections.abc import Sequence
from pathlib import PurePath

from ..output import OutputFormatter
from .comparator import SyncAction, SyncOperation


def format_operation(operation: SyncOperation, local_root: PurePath) -> str:
    """Render one operation as a single human-readable line.

    Examples:
        >>> op = SyncOperation(SyncAction.DELETE, "old.txt", "No longer present locally")
        >>> format_operation(op, PurePath("/data"))
        'Delete (No longer present locally) old.txt'
    """
    if operation.action == SyncAction.UPLOAD:
        full_path = (local_root / operation.path).as_posix()
        return f"Upload ({operation.reason}) {full_path} as {operation.path}"
    return f"Delete ({operation.reason}) {operation.path}"


def operation_to_dict(operation: SyncOperation) -> dict[str, str]:
    return {
        "action": operation.action.value,
        "path": operation.path,
        "reason": operation.reason,
    }


class OperationReporter:
    """Prints an operation list without touching the store or the filesystem."""

    def __init__(self, output: OutputFormatter):
        self.output = output

    def report(self, operations: Sequence[SyncOperation], local_root: PurePath) -> None:
        """Print every operation in the order the executor would apply them.

        Args:
            operations: Operations from the reconciler
            local_root: Local root the upload paths are relative to
        """
        if self.output.json_output:
            self.output.output_json([operation_to_dict(op) for op in operations])
            return

        for operation in operations:
            self.output.result(format_operation(operation, local_root))
