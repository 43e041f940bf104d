"""Rich console formatting utilities.

Provides consistent formatting for CLI output using Rich.
"""

import sys

from rich.console import Console
from rich.table import Table

from fsops.core.theme import get_theme
from fsops.filesystem.models import OpResult


def _detect_color_system() -> str | None:
    """Detect the best color system for the current terminal.

    Returns "truecolor" for interactive terminals to enable full hex color support,
    None otherwise to let Rich auto-detect.
    """
    if sys.stdout.isatty():
        return "truecolor"
    return None


# Shared console instances (theme loaded once at import)
console = Console(theme=get_theme(), color_system=_detect_color_system())
err_console = Console(theme=get_theme(), stderr=True, color_system=_detect_color_system())


def create_entry_table(title: str = "Matched Files") -> Table:
    """Create a pre-configured table for displaying scan entries.

    Args:
        title: Table title.

    Returns:
        Rich Table with Key, Path and Size columns.
    """
    table = Table(
        title=title,
        show_header=True,
        header_style="header",
        border_style="border",
        row_styles=["", "on grey7"],
    )
    table.add_column("Key", no_wrap=True)
    table.add_column("Path", style="path", overflow="fold")
    table.add_column("Size", style="info", justify="right")
    return table


def format_size(size_bytes: int | None) -> str:
    """Format byte count as human-readable string."""
    if size_bytes is None or size_bytes == 0:
        return "0 B"
    size = float(size_bytes)
    for unit in ("B", "KB", "MB", "GB"):
        if size < 1024:
            return f"{size:.0f} {unit}" if unit == "B" else f"{size:.1f} {unit}"
        size /= 1024
    return f"{size:.1f} TB"


def print_result_error(result: OpResult) -> None:
    """Print a failed operation result, including the failing entry."""
    print_error(result.error or f"Operation failed: {result.path}")
    if result.failed_path and result.failed_path != result.path:
        err_console.print(f"[muted]  at {result.failed_path}[/]")
    if result.cause:
        err_console.print(f"[muted]  cause: {result.cause}[/]")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[info]{message}[/]")


def print_error(message: str) -> None:
    """Print an error message."""
    err_console.print(f"[error]Error:[/] {message}")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[success]{message}[/]")
