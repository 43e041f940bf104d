"""Console color theme.

The bundled ``data/theme.toml`` supplies every color. A ``theme.toml``
in the fsops config directory may override any subset of them under
its ``[colors]`` table. Problems with the user file are logged and the
bundled colors are used instead.
"""

import logging
import re
import tomllib
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Annotated

from pydantic import BaseModel, BeforeValidator, ConfigDict, ValidationError
from rich.theme import Theme

from fsops.core.paths import get_config_dir

logger = logging.getLogger(__name__)

_HEX_COLOR = re.compile(r"#(?:[0-9a-fA-F]{3}){1,2}")


def _hex_color(value: object) -> str:
    if not isinstance(value, str) or not _HEX_COLOR.fullmatch(value.strip()):
        msg = f"expected a #RGB or #RRGGBB color, got {value!r}"
        raise ValueError(msg)
    return value.strip()


HexColor = Annotated[str, BeforeValidator(_hex_color)]


class ThemeColors(BaseModel):
    """Colors for each kind of console output."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    header: HexColor = "#69B9A1"
    border: HexColor = "#29526d"
    muted: HexColor = "#b2bec3"
    info: HexColor = "#0ec1c8"
    success: HexColor = "#03b971"
    error: HexColor = "#f53263"
    path: HexColor = "#69B9A1"
    symlink: HexColor = "#d44ebc"


def get_user_theme_path() -> Path:
    """Return the path of the optional user theme file."""
    return get_config_dir() / "theme.toml"


def read_colors(path: Path) -> dict[str, object]:
    """Read the ``[colors]`` table of a theme file.

    A missing file yields an empty table. An unreadable or malformed
    file is logged and also yields an empty table.
    """
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except FileNotFoundError:
        return {}
    except (OSError, tomllib.TOMLDecodeError) as e:
        logger.warning("Ignoring theme file %s: %s", path, e)
        return {}

    colors = data.get("colors", {})
    if not isinstance(colors, dict):
        logger.warning("Ignoring theme file %s: [colors] is not a table", path)
        return {}
    return colors


def load_theme(user_path: Path | None = None) -> ThemeColors:
    """Merge the user theme file over the bundled colors.

    Args:
        user_path: Theme file to overlay. Defaults to get_user_theme_path().

    Returns:
        Validated colors. If the merged colors are invalid, the bundled
        colors alone are returned.
    """
    bundled = read_colors(Path(str(resources.files("fsops.data").joinpath("theme.toml"))))
    overrides = read_colors(user_path or get_user_theme_path())
    if overrides:
        logger.debug("Applying %d theme override(s)", len(overrides))

    try:
        return ThemeColors(**{**bundled, **overrides})
    except ValidationError as e:
        logger.warning("Invalid theme colors, using the bundled theme: %s", e)
        return ThemeColors(**bundled)


def build_rich_theme(colors: ThemeColors) -> Theme:
    """Map theme colors onto the Rich style names used by the CLI."""
    return Theme(
        {
            "header": f"bold {colors.header}",
            "border": colors.border,
            "muted": colors.muted,
            "info": colors.info,
            "success": colors.success,
            "error": f"bold {colors.error}",
            "path": colors.path,
            "symlink": f"italic {colors.symlink}",
        }
    )


@lru_cache(maxsize=1)
def get_theme() -> Theme:
    """Return the Rich theme for the shared consoles, loading it once."""
    return build_rich_theme(load_theme())
