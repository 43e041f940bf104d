"""Scan command implementation.

Lists files beneath a directory, filtered by name mask, exclusions,
depth and dotfile policy.
"""

import json
import os
import re
from pathlib import Path
from typing import Annotated

import typer

from fsops.cli.types import OutputFormat, get_options
from fsops.filesystem.models import DirEntry, ScanKey
from fsops.filesystem.walker import scan_directory
from fsops.utils.formatting import (
    console,
    create_entry_table,
    format_size,
    print_error,
    print_info,
)


def scan(
    ctx: typer.Context,
    directory: Annotated[Path, typer.Argument(help="Directory to scan.")],
    mask: Annotated[
        str,
        typer.Option("--mask", "-m", help="Regular expression matched against file names."),
    ] = ".",
    exclude: Annotated[
        list[str] | None,
        typer.Option("--exclude", "-x", help="Name to skip entirely (repeatable)."),
    ] = None,
    depth: Annotated[
        int | None,
        typer.Option(
            "--depth",
            "-d",
            min=0,
            help="Subdirectory levels to descend into (default: unlimited).",
        ),
    ] = None,
    min_depth: Annotated[
        int,
        typer.Option("--min-depth", min=0, help="Skip matches shallower than this depth."),
    ] = 0,
    key: Annotated[
        ScanKey,
        typer.Option(
            "--key",
            "-k",
            help="Key results by full-path, base-name or stem.",
            case_sensitive=False,
        ),
    ] = ScanKey.FULL_PATH,
    dotfiles: Annotated[
        bool,
        typer.Option("--dotfiles", "-a", help="Include names starting with '.'."),
    ] = False,
    output_format: Annotated[
        OutputFormat,
        typer.Option("--format", "-f", help="Output format.", case_sensitive=False),
    ] = OutputFormat.TABLE,
) -> None:
    """Scan a directory tree for files matching a pattern."""
    if not directory.is_dir():
        print_error(f"Not a directory: {directory}")
        raise typer.Exit(code=1)

    options = get_options(ctx)
    excluded = [".", "..", *options.get_option("scan_exclude", []), *(exclude or [])]

    try:
        entries = scan_directory(
            directory,
            mask,
            exclude_names=excluded,
            depth_limit=True if depth is None else depth,
            key=key,
            min_depth=min_depth,
            include_dotfiles=dotfiles,
        )
    except re.error as e:
        print_error(f"Invalid mask {mask!r}: {e}")
        raise typer.Exit(code=1) from e

    if output_format == OutputFormat.JSON:
        _print_json(entries)
        return

    if not entries:
        print_info("No matching files found.")
        return

    _print_table(entries)
    console.print(f"\n[muted]Found {len(entries)} matching file(s)[/]")


def _print_table(entries: dict[str, DirEntry]) -> None:
    """Display entries as a Rich table."""
    table = create_entry_table()
    for entry_key, entry in entries.items():
        style = "symlink" if os.path.islink(entry.full_path) else None
        table.add_row(
            entry_key, entry.full_path, format_size(_size(entry.full_path)), style=style
        )
    console.print(table)


def _print_json(entries: dict[str, DirEntry]) -> None:
    """Display entries as JSON."""
    data = {
        entry_key: {
            "full_path": entry.full_path,
            "base_name": entry.base_name,
            "stem": entry.stem,
        }
        for entry_key, entry in entries.items()
    }
    console.print_json(json.dumps(data))


def _size(path: str) -> int | None:
    try:
        return os.path.getsize(path)
    except OSError:
        return None
