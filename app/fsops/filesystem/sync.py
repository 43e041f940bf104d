"""Directory copy and move under an overwrite policy.

Validates preconditions (destination policy, source readability,
destination writability) before delegating to the recursive transfer
primitives. Moves try an atomic rename first and fall back to
copy followed by delete.
"""

import logging
import os

from fsops.filesystem.errors import fail, wrap
from fsops.filesystem.models import ErrorKind, OpResult, OverwritePolicy
from fsops.filesystem.transfer import copy_tree, delete_tree
from fsops.utils.pathops import is_nested_directory

logger = logging.getLogger(__name__)


def copy_dir(
    src: str | os.PathLike[str],
    dst: str | os.PathLike[str],
    policy: OverwritePolicy = OverwritePolicy.ABORT,
) -> OpResult:
    """Copy a directory (or file) tree from ``src`` to ``dst``.

    If ``dst`` exists, ``policy`` decides: ABORT fails with
    DESTINATION_EXISTS and leaves ``dst`` untouched, OVERWRITE deletes
    ``dst`` first (best effort), MERGE copies into the existing tree.

    Args:
        src: Source path.
        dst: Destination path.
        policy: What to do when ``dst`` already exists.

    Returns:
        OpResult. Precondition failures report SOURCE_UNREADABLE or
        DESTINATION_NOT_WRITABLE; a failed transfer reports COPY_FAILURE,
        as does a destination equal to or inside ``src``.
    """
    source, dest = os.fspath(src), os.fspath(dst)

    if is_nested_directory(source, dest):
        return fail(
            ErrorKind.COPY_FAILURE,
            f"Cannot copy {source} into itself ({dest}).",
            path=dest,
        )

    if os.path.lexists(dest):
        if policy == OverwritePolicy.ABORT:
            return fail(
                ErrorKind.DESTINATION_EXISTS,
                f"Destination directory {dest} already exists.",
                path=dest,
            )
        if policy == OverwritePolicy.OVERWRITE:
            removed = delete_tree(dest, force=True)
            if not removed.success:
                logger.warning("Could not remove existing %s: %s", dest, removed.cause)
        else:
            logger.info("Merging into existing directory %s", dest)

    precondition = _check_preconditions(source, dest)
    if precondition is not None:
        return precondition

    return copy_tree(source, dest)


def move_dir(
    src: str | os.PathLike[str],
    dst: str | os.PathLike[str],
    overwrite: bool = False,
) -> OpResult:
    """Move a directory (or file) tree from ``src`` to ``dst``.

    Tries ``os.rename`` first. When that fails (typically because the
    paths are on different filesystems) the tree is copied with the
    OVERWRITE policy and the source is force-deleted.

    Args:
        src: Source path.
        dst: Destination path.
        overwrite: If True, an existing ``dst`` is deleted first;
            otherwise an existing ``dst`` fails with DESTINATION_EXISTS.

    Returns:
        OpResult. A failed fallback reports MOVE_FAILURE, as does a destination
        equal to or inside ``src``.
    """
    source, dest = os.fspath(src), os.fspath(dst)

    if is_nested_directory(source, dest):
        return fail(
            ErrorKind.MOVE_FAILURE,
            f"Cannot move {source} into itself ({dest}).",
            path=dest,
        )

    if os.path.lexists(dest):
        if not overwrite:
            return fail(
                ErrorKind.DESTINATION_EXISTS,
                f"Destination directory {dest} already exists.",
                path=dest,
            )
        removed = delete_tree(dest, force=True)
        if not removed.success:
            logger.warning("Could not remove existing %s: %s", dest, removed.cause)

    precondition = _check_preconditions(source, dest)
    if precondition is not None:
        return precondition

    try:
        os.rename(source, dest)
        return OpResult.ok(dest)
    except OSError as e:
        logger.debug("Rename of %s to %s failed (%s), copying instead", source, dest, e)
        # Some platforms leave an empty file behind after a failed cross-device rename
        if os.path.isfile(dest) and not os.path.islink(dest):
            try:
                os.unlink(dest)
            except OSError as unlink_error:
                logger.debug("Could not remove stray file %s: %s", dest, unlink_error)

    copied = copy_dir(source, dest, OverwritePolicy.OVERWRITE)
    if not copied.success:
        return wrap(
            ErrorKind.MOVE_FAILURE,
            f"Unable to move {source} to {dest}.",
            path=dest,
            inner=copied,
        )

    removed = delete_tree(source, force=True)
    if not removed.success:
        return wrap(
            ErrorKind.MOVE_FAILURE,
            f"Copied {source} to {dest} but could not remove the source.",
            path=dest,
            inner=removed,
        )
    return OpResult.ok(dest)


def _check_preconditions(source: str, dest: str) -> OpResult | None:
    """Return a failure result if ``source`` or the parent of ``dest`` is unusable."""
    if not os.path.exists(source) or not os.access(source, os.R_OK):
        return fail(
            ErrorKind.SOURCE_UNREADABLE,
            f"Source directory {source} does not exist or is not readable.",
            path=source,
        )

    parent = os.path.dirname(os.path.abspath(dest))
    if not os.access(parent, os.W_OK):
        return fail(
            ErrorKind.DESTINATION_NOT_WRITABLE,
            f"Destination directory {parent} is not writable.",
            path=dest,
            failed_path=parent,
        )
    return None
