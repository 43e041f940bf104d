"""XDG-compliant path management for fsops.

XDG defaults:
- Config: ~/.config/fsops/
- State: ~/.local/state/fsops/ (backups live here)
"""

import os
from pathlib import Path

# Application identifier for directory naming
APP_NAME = "fsops"


def _get_xdg_dir(env_var: str, default_subdir: str) -> Path:
    """Get XDG directory respecting environment variable override.

    Args:
        env_var: XDG environment variable name (e.g., "XDG_CONFIG_HOME").
        default_subdir: Default subdirectory under home (e.g., ".config").

    Returns:
        Path to the application-specific directory.
    """
    base = os.environ.get(env_var)
    if base:
        return Path(base) / APP_NAME
    return Path.home() / default_subdir / APP_NAME


def get_config_dir() -> Path:
    """Get the configuration directory path.

    Returns:
        Path to ~/.config/fsops/ (or XDG_CONFIG_HOME/fsops/).
    """
    return _get_xdg_dir("XDG_CONFIG_HOME", ".config")


def get_state_dir() -> Path:
    """Get the state directory path.

    Returns:
        Path to ~/.local/state/fsops/ (or XDG_STATE_HOME/fsops/).
    """
    return _get_xdg_dir("XDG_STATE_HOME", ".local/state")


def get_config_path() -> Path:
    """Get the default config file path."""
    return get_config_dir() / "config.toml"


def get_backup_dir() -> Path:
    """Get the default backup directory path.

    Each backup run creates a timestamped subdirectory within this
    location unless a ``backup_location`` is configured.
    """
    return get_state_dir() / "backups"
