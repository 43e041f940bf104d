"""Configuration model, file I/O and option lookup.

Configuration is stored in ~/.config/fsops/config.toml and validated
with Pydantic. At runtime an Options object layers command-line
overrides on top of the file so that operations can look up policy
inputs (temp location, backup location, protected root) by name.
"""

import logging
import os
import tomllib
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Annotated, Any

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from fsops.core.paths import get_config_path
from fsops.filesystem.models import OverwritePolicy

logger = logging.getLogger(__name__)


class FsopsConfig(BaseModel):
    """Persistent settings for fsops.

    Attributes:
        tmp_dir: Base directory for temporary files (None = system default).
        backup_location: Directory for backups (None = state dir).
        protected_root: Directory that backups must never be placed in.
        default_policy: Overwrite policy used by ``tree copy`` when none is given.
        scan_exclude: Names skipped by ``scan`` in addition to ``.`` and ``..``.
    """

    model_config = ConfigDict(extra="forbid")

    tmp_dir: Annotated[
        Path | None,
        Field(description="Base directory for temporary files"),
    ] = None
    backup_location: Annotated[
        Path | None,
        Field(description="Directory for backups"),
    ] = None
    protected_root: Annotated[
        Path | None,
        Field(description="Backups may not be stored inside this directory"),
    ] = None
    default_policy: Annotated[
        OverwritePolicy,
        Field(description="Overwrite policy for copies"),
    ] = OverwritePolicy.ABORT
    scan_exclude: Annotated[
        list[str],
        Field(description="Names excluded from scans"),
    ] = Field(default_factory=lambda: ["CVS"])


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigNotFoundError(ConfigError):
    """Raised when the config file is not found."""


class ConfigParseError(ConfigError):
    """Raised when the config file cannot be parsed."""


class ConfigValidationError(ConfigError):
    """Raised when the config content does not match the schema."""


def load_config(path: Path | None = None) -> FsopsConfig:
    """Load configuration from a TOML file.

    Args:
        path: Path to the config file. If None, uses the default config path.

    Returns:
        Validated FsopsConfig object.

    Raises:
        ConfigNotFoundError: If the config file doesn't exist.
        ConfigParseError: If the TOML syntax is invalid.
        ConfigValidationError: If the content doesn't match the schema.
    """
    config_path = path or get_config_path()

    if not config_path.exists():
        raise ConfigNotFoundError(f"Config not found: {config_path}")

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigParseError(f"Invalid TOML syntax: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read config: {e}") from e

    try:
        return FsopsConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigValidationError(f"Invalid config content: {e}") from e


def load_config_or_default(path: Path | None = None) -> FsopsConfig:
    """Load configuration, falling back to defaults if the file is missing.

    Raises:
        ConfigParseError: If the TOML syntax is invalid.
        ConfigValidationError: If the content doesn't match the schema.
    """
    try:
        return load_config(path)
    except ConfigNotFoundError:
        logger.debug("No config file at %s, using defaults", path or get_config_path())
        return FsopsConfig()


def save_config(config: FsopsConfig, path: Path | None = None) -> Path:
    """Save configuration to a TOML file.

    The file is written to a temporary file in the same directory and
    moved into place with os.replace().

    Returns:
        Path where the config was saved.

    Raises:
        ConfigError: If the file cannot be written.
    """
    config_path = path or get_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)

    # TOML has no null; unset values are simply omitted
    data = {k: v for k, v in config.model_dump(mode="json").items() if v is not None}

    tmp_path: Path | None = None
    try:
        with NamedTemporaryFile(
            mode="wb",
            dir=config_path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            tomli_w.dump(data, f)
        os.replace(str(tmp_path), str(config_path))
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise ConfigError(f"Failed to write config: {e}") from e

    return config_path


class Options:
    """Option lookup with command-line overrides layered over the config.

    Attributes:
        config: Settings loaded from the config file.
    """

    def __init__(self, config: FsopsConfig | None = None, **overrides: Any) -> None:
        self.config = config or FsopsConfig()
        self._overrides = {k: v for k, v in overrides.items() if v is not None}

    def get_option(self, name: str, default: Any = None) -> Any:
        """Return an option value.

        Lookup order is command-line override, config file, then ``default``.
        Names may use dashes or underscores.
        """
        key = name.replace("-", "_")
        if key in self._overrides:
            return self._overrides[key]
        value = getattr(self.config, key, None)
        if value is None:
            return default
        return value
