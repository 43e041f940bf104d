"""Shared types and utilities for CLI commands.

This module provides helpers used across multiple CLI command modules
to reach the per-invocation state set up by the root callback.
"""

from enum import Enum

import typer

from fsops.core.config import Options
from fsops.filesystem.tempfiles import TempRegistry


class OutputFormat(str, Enum):
    """Output format options."""

    TABLE = "table"
    JSON = "json"


def get_options(ctx: typer.Context) -> Options:
    """Return the Options created by the root callback.

    Falls back to defaults when a command is invoked without the root
    callback (e.g. from tests calling a sub-app directly).
    """
    obj = ctx.find_root().obj or {}
    options = obj.get("options")
    return options if isinstance(options, Options) else Options()


def get_registry(ctx: typer.Context) -> TempRegistry:
    """Return the TempRegistry owned by this invocation."""
    root = ctx.find_root()
    root.ensure_object(dict)
    registry = root.obj.get("registry")
    if not isinstance(registry, TempRegistry):
        registry = TempRegistry(get_options(ctx))
        root.call_on_close(registry.cleanup_all)
        root.obj["registry"] = registry
    return registry
