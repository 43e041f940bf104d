"""Configuration commands.

Provides commands to show the effective configuration and to write
a default config file.
"""

import json
from typing import Annotated

import typer

from fsops.core.config import ConfigError, FsopsConfig, load_config_or_default, save_config
from fsops.core.paths import get_config_path
from fsops.utils.formatting import console, print_error, print_info, print_success

app = typer.Typer(
    help="Show or initialize the fsops configuration.",
    invoke_without_command=True,
    no_args_is_help=True,
)


@app.command()
def show(ctx: typer.Context) -> None:
    """Show the effective configuration as JSON."""
    obj = ctx.find_root().obj or {}
    path = obj.get("config_path") or get_config_path()

    try:
        config = load_config_or_default(path)
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    print_info(f"Config file: {path}")
    console.print_json(json.dumps(config.model_dump(mode="json")))


@app.command()
def init(
    ctx: typer.Context,
    force: Annotated[
        bool,
        typer.Option("--force", help="Overwrite an existing config file."),
    ] = False,
) -> None:
    """Write a config file with default settings."""
    obj = ctx.find_root().obj or {}
    path = obj.get("config_path") or get_config_path()

    if path.exists() and not force:
        print_error(f"Config already exists: {path} (use --force to overwrite)")
        raise typer.Exit(code=1)

    try:
        saved = save_config(FsopsConfig(), path)
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    print_success(f"Wrote default config to {saved}")
