"""CLI commands for fsops.

This package contains all subcommand implementations.
"""

from fsops.cli.commands import config, scan, tree

__all__ = ["config", "scan", "tree"]
