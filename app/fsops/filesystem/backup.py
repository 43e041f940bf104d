"""Backup directory preparation.

Resolves where backups go, refuses locations nested inside the
protected root, and creates the directory.
"""

from __future__ import annotations

import logging
import os
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from fsops.core.paths import get_backup_dir
from fsops.filesystem.errors import fail
from fsops.filesystem.models import ErrorKind, OpResult
from fsops.filesystem.transfer import make_dir
from fsops.utils.pathops import is_nested_directory

if TYPE_CHECKING:
    from fsops.core.config import Options

logger = logging.getLogger(__name__)


def default_backup_location() -> str:
    """Return a fresh timestamped directory under the state backup dir."""
    timestamp = datetime.now(UTC).strftime("%Y%m%dT%H%M%SZ")
    return os.fspath(get_backup_dir() / timestamp)


def prepare_backup_dir(subdir: str | None = None, *, options: Options) -> OpResult:
    """Create the backup directory for this run.

    The location comes from the ``backup_location`` option, falling back
    to a timestamped directory under ~/.local/state/fsops/backups/.
    Backups may never be stored inside the ``protected_root`` option.

    Args:
        subdir: Optional subdirectory to create inside the backup dir.
        options: Option lookup for ``backup_location`` and ``protected_root``.

    Returns:
        OpResult whose ``path`` is the prepared directory on success.
        Fails with BACKUP_PATH_INSIDE_ROOT or the make_dir failure kinds.
    """
    configured = options.get_option("backup_location")
    backup_dir = os.fspath(configured) if configured else default_backup_location()

    protected_root = options.get_option("protected_root")
    if protected_root and is_nested_directory(os.fspath(protected_root), backup_dir):
        return fail(
            ErrorKind.BACKUP_PATH_INSIDE_ROOT,
            f"Backups may not be stored inside {os.fspath(protected_root)} ({backup_dir}).",
            path=backup_dir,
        )

    target = os.path.join(backup_dir, subdir) if subdir else backup_dir
    result = make_dir(target)
    if result.success:
        logger.info("Prepared backup directory %s", target)
    return result
