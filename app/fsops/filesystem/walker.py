"""Recursive directory scanner.

Enumerates files beneath a directory, filtered by a name mask, an
exclusion list, depth bounds and a dotfile policy, and returns them
keyed by full path, base name or stem.
"""

import logging
import os
import re
from collections.abc import Iterable

from fsops.filesystem.models import DirEntry, ScanKey

logger = logging.getLogger(__name__)

DEFAULT_EXCLUDE: tuple[str, ...] = (".", "..", "CVS")


def scan_directory(
    directory: str | os.PathLike[str],
    mask: str | re.Pattern[str],
    exclude_names: Iterable[str] = DEFAULT_EXCLUDE,
    depth_limit: bool | int = True,
    key: ScanKey = ScanKey.FULL_PATH,
    min_depth: int = 0,
    include_dotfiles: bool = False,
) -> dict[str, DirEntry]:
    """Scan a directory tree for files whose names match ``mask``.

    Only files are returned; directories are traversed but never
    themselves matched. Entries are visited depth-first in name order.
    When two matches share a key, the shallower one wins: the results
    of a subdirectory are merged in front of what has already been
    collected, and later (shallower) entries overwrite earlier ones.

    Args:
        directory: Root directory to scan.
        mask: Regular expression searched for in each base name.
        exclude_names: Names that are neither traversed nor returned.
        depth_limit: True for unbounded recursion, or the number of
            subdirectory levels below the root to descend into.
            0 scans only the root.
        key: DirEntry attribute used as the mapping key.
        min_depth: Matches shallower than this depth (root = 0) are
            left out of the result.
        include_dotfiles: If False, names starting with ``.`` are skipped.

    Returns:
        Ordered mapping of key to DirEntry. An unreadable directory
        contributes nothing.
    """
    pattern = re.compile(mask) if isinstance(mask, str) else mask
    return _scan(
        os.fspath(directory),
        pattern,
        frozenset(exclude_names),
        depth_limit,
        key,
        min_depth,
        include_dotfiles,
        0,
    )


def _scan(
    directory: str,
    pattern: re.Pattern[str],
    exclude: frozenset[str],
    depth_limit: bool | int,
    key: ScanKey,
    min_depth: int,
    include_dotfiles: bool,
    depth: int,
) -> dict[str, DirEntry]:
    try:
        names = sorted(os.listdir(directory))
    except OSError as e:
        logger.debug("Cannot read directory %s: %s", directory, e)
        return {}

    files: dict[str, DirEntry] = {}

    for name in names:
        if name in exclude:
            continue
        if not include_dotfiles and name.startswith("."):
            continue

        path = os.path.join(directory, name)

        if os.path.isdir(path):
            # Symlinked directories are neither followed nor returned
            if os.path.islink(path) or not _can_descend(depth_limit):
                continue
            nested = _scan(
                path,
                pattern,
                exclude,
                _next_limit(depth_limit),
                key,
                min_depth,
                include_dotfiles,
                depth + 1,
            )
            files = {**nested, **files}
            continue

        if depth < min_depth or not pattern.search(name):
            continue

        entry = DirEntry(full_path=path, base_name=name, stem=_stem(name))
        files[entry.key(key)] = entry

    return files


def _can_descend(depth_limit: bool | int) -> bool:
    # bool is checked first since True == 1
    if isinstance(depth_limit, bool):
        return depth_limit
    return depth_limit > 0


def _next_limit(depth_limit: bool | int) -> bool | int:
    if depth_limit is True:
        return True
    return int(depth_limit) - 1


def _stem(name: str) -> str:
    stem, _ext = os.path.splitext(name)
    return stem or name
