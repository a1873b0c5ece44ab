"""Output formatting for the command line."""

import json
from typing import Any, Optional

from rich.console import Console
from rich.table import Table

from .utils import format_size


class OutputFormatter:
    """Writes user-facing messages, respecting quiet and JSON modes.

    Status messages go to stdout, errors and warnings to stderr. In JSON
    mode only ``output_json`` and errors are written.
    """

    def __init__(
        self,
        json_output: bool = False,
        quiet: bool = False,
        console: Optional[Console] = None,
        err_console: Optional[Console] = None,
    ):
        """Initialize output formatter.

        Args:
            json_output: Emit machine-readable JSON instead of text
            quiet: Suppress non-essential output
            console: Console for regular output (defaults to stdout)
            err_console: Console for errors and warnings (defaults to stderr)
        """
        self.json_output = json_output
        self.quiet = quiet
        self.console = console or Console(highlight=False, soft_wrap=True, emoji=False)
        self.err_console = err_console or Console(
            stderr=True, highlight=False, soft_wrap=True, emoji=False
        )

    def _show_status(self) -> bool:
        return not self.quiet and not self.json_output

    def print(self, message: str = "") -> None:
        """Print a plain line."""
        if self._show_status():
            self.console.print(message, markup=False)

    def result(self, message: str) -> None:
        """Print essential result output, shown even in quiet mode."""
        if not self.json_output:
            self.console.print(message, markup=False)

    def info(self, message: str) -> None:
        """Print an informational message."""
        if self._show_status():
            self.console.print(message, markup=False)

    def success(self, message: str) -> None:
        """Print a success message."""
        if self._show_status():
            self.console.print(message, style="green", markup=False)

    def warning(self, message: str) -> None:
        """Print a warning message."""
        if not self.quiet:
            self.err_console.print(message, style="yellow", markup=False)

    def error(self, message: str) -> None:
        """Print an error message. Errors are never suppressed."""
        self.err_console.print(f"Error: {message}", style="bold red", markup=False)

    def output_json(self, data: Any) -> None:
        """Write data as indented JSON to stdout."""
        self.console.print_json(json.dumps(data, default=str))

    def format_size(self, size_bytes: int) -> str:
        return format_size(size_bytes)

    def print_summary(self, title: str, rows: list[tuple[str, str]]) -> None:
        """Print a two-column summary table.

        Args:
            title: Table title
            rows: (label, value) pairs
        """
        if not self._show_status():
            return
        table = Table(title=title, show_header=False)
        table.add_column("Field", style="bold")
        table.add_column("Value")
        for label, value in rows:
            table.add_row(label, value)
        self.console.print(table)
