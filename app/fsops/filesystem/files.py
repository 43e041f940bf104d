"""Small file helpers and tree content hashing."""

import hashlib
import logging
import os

from fsops.filesystem.models import ScanKey
from fsops.filesystem.walker import scan_directory

logger = logging.getLogger(__name__)

_CHUNK_SIZE = 64 * 1024


def dir_md5(directory: str | os.PathLike[str]) -> str:
    """Compute an aggregate md5 over every file in a tree.

    Each file contributes ``<md5> <relative path>``. The lines are
    sorted before hashing, so the result depends only on file names and
    contents, not on traversal order or the location of the tree.
    Dotfiles are included. Files that vanish mid-scan are skipped.

    Returns:
        Hex digest of the newline-joined list.
    """
    root = os.fspath(directory)
    entries = scan_directory(
        root,
        ".",
        exclude_names=(".", ".."),
        depth_limit=True,
        key=ScanKey.FULL_PATH,
        include_dotfiles=True,
    )

    lines: list[str] = []
    for full_path in entries:
        try:
            digest = _file_md5(full_path)
        except OSError as e:
            logger.debug("Skipping %s while hashing: %s", full_path, e)
            continue
        relative = os.path.relpath(full_path, root).replace(os.sep, "/")
        lines.append(f"{digest} {relative}")

    lines.sort()
    return hashlib.md5("\n".join(lines).encode("utf-8")).hexdigest()


def file_not_empty(path: str | os.PathLike[str]) -> bool:
    """Check that a file exists and has content."""
    try:
        return os.path.getsize(path) > 0
    except OSError:
        return False


def append_data(path: str | os.PathLike[str], data: str) -> bool:
    """Append text to a file, creating it if needed.

    Returns:
        True on success, False if the file could not be written.
    """
    try:
        with open(path, "a", encoding="utf-8") as f:
            f.write(data)
    except OSError as e:
        logger.warning("Could not append to %s: %s", os.fspath(path), e)
        return False
    return True


def _file_md5(path: str) -> str:
    md5 = hashlib.md5()
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(_CHUNK_SIZE), b""):
            md5.update(chunk)
    return md5.hexdigest()
