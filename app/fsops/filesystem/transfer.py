"""Recursive copy, delete and directory creation primitives.

These functions walk a file or directory subtree and either copy it
to a new location or remove it. Both stop at the first entry that
fails and report it through an OpResult; nothing here raises for
ordinary filesystem conditions such as missing files or permission
denial.
"""

import logging
import os
import shutil
import stat
import sys
from collections.abc import Callable

from fsops.filesystem.errors import fail, wrap
from fsops.filesystem.models import ErrorKind, OpResult

logger = logging.getLogger(__name__)

_EXEC_BITS = stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH


def make_dir(path: str | os.PathLike[str], required: bool = True) -> OpResult:
    """Create a directory and any missing ancestors.

    A directory that appears between the existence check and the
    mkdir call (created by a concurrent process) counts as success.

    Args:
        path: Directory to create.
        required: If False, failures are returned without an error message.

    Returns:
        OpResult. Failure kinds are CREATE_DIR_FAILURE when the parent is
        writable, PARENT_NOT_WRITABLE when it is not, and
        DESTINATION_NOT_WRITABLE when the directory exists read-only.
    """
    target = os.fspath(path)

    if os.path.isdir(target):
        if os.access(target, os.W_OK):
            return OpResult.ok(target)
        return _optional_fail(
            required,
            ErrorKind.DESTINATION_NOT_WRITABLE,
            f"Directory {target} exists, but is not writable. "
            "Please check directory permissions.",
            target,
        )

    parent = os.path.dirname(os.path.abspath(target))
    if parent != os.path.abspath(target) and not os.path.isdir(parent):
        parent_result = make_dir(parent, required)
        if not parent_result.success:
            return parent_result

    try:
        os.mkdir(target)
        return OpResult.ok(target)
    except OSError as e:
        if os.path.isdir(target) and os.access(target, os.W_OK):
            logger.debug("Directory %s was created concurrently", target)
            return OpResult.ok(target)
        if os.access(parent, os.W_OK):
            return _optional_fail(
                required,
                ErrorKind.CREATE_DIR_FAILURE,
                f"Unable to create {target}.",
                target,
                cause=str(e),
            )
        return _optional_fail(
            required,
            ErrorKind.PARENT_NOT_WRITABLE,
            f"Unable to create {target} in {parent}. Please check directory permissions.",
            target,
            cause=str(e),
        )


def copy_tree(src: str | os.PathLike[str], dst: str | os.PathLike[str]) -> OpResult:
    """Recursively copy a file, symlink or directory.

    Directories are created (with parents) and their entries copied into
    them, merging with whatever ``dst`` already contains. Symlinks are
    recreated pointing at the same target string. Regular files are
    byte-copied over any existing file. Modification times are kept, and
    execute bits on the source are added to the destination.

    Returns:
        OpResult; on failure COPY_FAILURE with the failing entry in
        ``failed_path``.
    """
    source, dest = os.fspath(src), os.fspath(dst)
    result = _copy(source, dest)
    if result.success:
        return OpResult.ok(dest)
    return wrap(
        ErrorKind.COPY_FAILURE,
        f"Unable to copy {source} to {dest}.",
        path=dest,
        inner=result,
    )


def delete_tree(
    path: str | os.PathLike[str],
    force: bool = False,
    follow_symlinks: bool = False,
) -> OpResult:
    """Recursively delete a file, symlink or directory.

    A symlink is unlinked, leaving its target alone, unless
    ``follow_symlinks`` is set, in which case the target is deleted and
    the link kept. A path that does not exist is a success. With
    ``force``, read-only protection is stripped before removal.

    A directory is emptied entry by entry and then removed. If any entry
    cannot be deleted the call fails and the directory is left partially
    emptied.

    Returns:
        OpResult; on failure DELETE_FAILURE with the failing entry in
        ``failed_path``.
    """
    target = os.fspath(path)
    result = _delete(target, force, follow_symlinks)
    if result.success:
        return OpResult.ok(target)
    return wrap(
        ErrorKind.DELETE_FAILURE,
        f"Unable to delete {target}.",
        path=target,
        inner=result,
    )


# === Private helpers ===


def _optional_fail(
    required: bool,
    kind: ErrorKind,
    message: str,
    path: str,
    cause: str | None = None,
) -> OpResult:
    if not required:
        return OpResult(path=path, success=False, error_kind=kind, failed_path=path, cause=cause)
    return fail(kind, message, path=path, cause=cause)


def _copy(src: str, dst: str) -> OpResult:
    try:
        if os.path.islink(src):
            _copy_symlink(src, dst)
            return OpResult.ok(dst)

        if os.path.isdir(src):
            created = make_dir(dst)
            if not created.success:
                return created
            for name in sorted(os.listdir(src)):
                result = _copy(os.path.join(src, name), os.path.join(dst, name))
                if not result.success:
                    return result
        else:
            shutil.copyfile(src, dst)

        _preserve_metadata(src, dst)
    except OSError as e:
        return fail(
            ErrorKind.COPY_FAILURE,
            f"Unable to copy {src} to {dst}.",
            path=dst,
            failed_path=src,
            cause=str(e),
        )
    return OpResult.ok(dst)


def _copy_symlink(src: str, dst: str) -> None:
    # Merging onto an existing link or file replaces it
    if os.path.islink(dst) or os.path.isfile(dst):
        os.unlink(dst)
    os.symlink(os.readlink(src), dst)


def _preserve_metadata(src: str, dst: str) -> None:
    src_stat = os.stat(src)
    os.utime(dst, ns=(src_stat.st_atime_ns, src_stat.st_mtime_ns))

    if sys.platform == "win32":
        return

    exec_bits = stat.S_IMODE(src_stat.st_mode) & _EXEC_BITS
    if exec_bits:
        dst_mode = stat.S_IMODE(os.stat(dst).st_mode)
        os.chmod(dst, dst_mode | exec_bits)


def _delete(path: str, force: bool, follow_symlinks: bool = False) -> OpResult:
    if os.path.islink(path):
        if follow_symlinks:
            if not os.path.exists(path):
                return fail(
                    ErrorKind.DELETE_FAILURE,
                    f"Target of symlink {path} does not exist.",
                    path=path,
                )
            return _delete(os.path.realpath(path), force)
        # Removing a link whose target is gone is fine
        return _remove(path, os.unlink, force=False)

    if not os.path.exists(path):
        return OpResult.ok(path)

    if not os.path.isdir(path):
        return _remove(path, os.unlink, force)

    if force:
        _make_permissive(path)
    try:
        names = sorted(os.listdir(path))
    except OSError as e:
        return fail(
            ErrorKind.DELETE_FAILURE,
            f"Unable to read directory {path}.",
            path=path,
            cause=str(e),
        )

    for name in names:
        result = _delete(os.path.join(path, name), force)
        if not result.success:
            return result

    return _remove(path, os.rmdir, force)


def _remove(path: str, remover: Callable[[str], None], force: bool) -> OpResult:
    if force:
        _make_permissive(path)
    try:
        remover(path)
    except FileNotFoundError:
        return OpResult.ok(path)
    except OSError as e:
        return fail(
            ErrorKind.DELETE_FAILURE,
            f"Unable to delete {path}.",
            path=path,
            cause=str(e),
        )
    return OpResult.ok(path)


def _make_permissive(path: str) -> None:
    try:
        os.chmod(path, 0o777)
    except OSError as e:
        logger.debug("Could not make %s writable: %s", path, e)
