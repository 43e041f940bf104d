"""Main CLI application entry point.

Defines the Typer application and global options.
"""

import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.logging import RichHandler

from fsops import __version__
from fsops.cli.commands import config, scan, tree
from fsops.core.config import ConfigError, Options, load_config_or_default
from fsops.filesystem.tempfiles import TempRegistry
from fsops.utils.formatting import err_console, print_error

# Create main Typer app
app = typer.Typer(
    name="fsops",
    help="Copy, move, delete and scan directory trees.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"fsops version {__version__}")
        raise typer.Exit()


def configure_logging(verbose: bool, quiet: bool) -> None:
    """Route fsops log records to stderr through Rich."""
    level = logging.DEBUG if verbose else logging.ERROR if quiet else logging.WARNING
    logger = logging.getLogger("fsops")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.addHandler(RichHandler(console=err_console, show_time=False, show_path=False))
    logger.setLevel(level)
    logger.propagate = False


@app.callback()
def main(
    ctx: typer.Context,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose output.",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Suppress non-essential output.",
        ),
    ] = False,
    config_path: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to config file.",
        ),
    ] = None,
    tmp_dir: Annotated[
        Path | None,
        typer.Option(
            "--tmp",
            help="Directory for temporary files.",
        ),
    ] = None,
) -> None:
    """fsops - Copy, move, delete and scan directory trees.

    Temporary files created during a command are removed when it exits.
    """
    configure_logging(verbose, quiet)

    try:
        settings = load_config_or_default(config_path)
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    options = Options(settings, tmp_dir=tmp_dir)
    registry = TempRegistry(options)
    ctx.call_on_close(registry.cleanup_all)

    # Store shared state in context for subcommands
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    ctx.obj["options"] = options
    ctx.obj["registry"] = registry


# Register commands
app.add_typer(tree.app, name="tree")
app.add_typer(config.app, name="config")
app.command(name="scan")(scan.scan)


if __name__ == "__main__":
    app()
