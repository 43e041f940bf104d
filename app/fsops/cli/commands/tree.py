"""Directory tree commands.

Provides commands to copy, move, delete, back up and hash
directory trees.
"""

import os
from pathlib import Path
from typing import Annotated

import typer

from fsops.cli.types import get_options, get_registry
from fsops.filesystem.backup import prepare_backup_dir
from fsops.filesystem.files import dir_md5
from fsops.filesystem.models import OpResult, OverwritePolicy
from fsops.filesystem.sync import copy_dir, move_dir
from fsops.filesystem.transfer import delete_tree
from fsops.utils.formatting import (
    console,
    print_error,
    print_info,
    print_result_error,
    print_success,
)

app = typer.Typer(
    help="Copy, move, delete and hash directory trees.",
    invoke_without_command=True,
    no_args_is_help=True,
)


@app.command()
def copy(
    ctx: typer.Context,
    src: Annotated[Path, typer.Argument(help="Source file or directory.")],
    dst: Annotated[Path, typer.Argument(help="Destination path.")],
    policy: Annotated[
        OverwritePolicy | None,
        typer.Option(
            "--policy",
            "-p",
            help="What to do if the destination exists: abort, overwrite or merge.",
            case_sensitive=False,
        ),
    ] = None,
) -> None:
    """Copy a directory tree, preserving mtimes, symlinks and execute bits."""
    options = get_options(ctx)
    default = options.get_option("default_policy", OverwritePolicy.ABORT)
    effective = policy or OverwritePolicy(default)

    result = copy_dir(src, dst, effective)
    _finish(result, f"Copied {src} to {dst}")


@app.command()
def move(
    src: Annotated[Path, typer.Argument(help="Source file or directory.")],
    dst: Annotated[Path, typer.Argument(help="Destination path.")],
    overwrite: Annotated[
        bool,
        typer.Option("--overwrite", help="Replace an existing destination."),
    ] = False,
) -> None:
    """Move a directory tree, falling back to copy+delete across devices."""
    result = move_dir(src, dst, overwrite=overwrite)
    _finish(result, f"Moved {src} to {dst}")


@app.command()
def delete(
    path: Annotated[Path, typer.Argument(help="File or directory to delete.")],
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Delete read-only entries too."),
    ] = False,
    follow_symlinks: Annotated[
        bool,
        typer.Option(
            "--follow-symlinks",
            help="Delete the target of a symlink instead of the link.",
        ),
    ] = False,
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Skip confirmation prompt."),
    ] = False,
) -> None:
    """Recursively delete a file or directory tree."""
    if not path.exists() and not path.is_symlink():
        print_info(f"Nothing to delete: {path}")
        return

    if not yes:
        confirmed = typer.confirm(f"Delete {path} and everything below it?", default=False)
        if not confirmed:
            print_info("Aborted.")
            raise typer.Exit(code=0)

    result = delete_tree(path, force=force, follow_symlinks=follow_symlinks)
    _finish(result, f"Deleted {path}")


@app.command()
def backup(
    ctx: typer.Context,
    src: Annotated[Path, typer.Argument(help="File or directory to back up.")],
    subdir: Annotated[
        str | None,
        typer.Option("--subdir", "-s", help="Subdirectory inside the backup location."),
    ] = None,
) -> None:
    """Back up a directory tree into the backup location.

    The tree is staged in a temporary directory first and moved into
    place once the copy is complete.
    """
    options = get_options(ctx)
    registry = get_registry(ctx)

    prepared = prepare_backup_dir(subdir, options=options)
    if not prepared.success:
        print_result_error(prepared)
        raise typer.Exit(code=1)

    name = os.path.basename(os.path.normpath(os.path.abspath(src)))
    try:
        staging = registry.tempdir()
    except OSError as e:
        print_error(f"Cannot create temporary directory: {e}")
        raise typer.Exit(code=1) from e
    staged = os.path.join(staging, name)

    result = copy_dir(src, staged, OverwritePolicy.ABORT)
    if result.success:
        result = move_dir(staged, os.path.join(prepared.path, name))
    _finish(result, f"Backed up {src} to {result.path}")


@app.command(name="hash")
def hash_tree(
    directory: Annotated[Path, typer.Argument(help="Directory to hash.")],
) -> None:
    """Print an aggregate md5 of all files in a directory tree."""
    if not directory.is_dir():
        print_error(f"Not a directory: {directory}")
        raise typer.Exit(code=1)

    console.print(dir_md5(directory), highlight=False)


def _finish(result: OpResult, message: str) -> None:
    """Report a command result and exit non-zero on failure."""
    if not result.success:
        print_result_error(result)
        raise typer.Exit(code=1)
    print_success(message)
