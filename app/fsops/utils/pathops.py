"""Path string helpers.

Stateless predicates and transforms that work on path strings the
same way on POSIX and Windows.
"""

import os
import re

_WINDOWS_DRIVE = re.compile(r"^[A-Za-z]:[\\/]")


def is_absolute_path(path: str) -> bool:
    """Check whether a path is absolute on any supported platform.

    Accepts POSIX absolute paths, Windows drive paths (``C:\\`` or ``C:/``)
    and UNC paths (``\\\\server\\share``).
    """
    if not path:
        return False
    return path.startswith(("/", "\\\\")) or bool(_WINDOWS_DRIVE.match(path))


def normalize_path(path: str) -> str:
    """Normalize separators to ``/`` and trim trailing separators.

    Windows drive letters are upper-cased so that ``c:/x`` and ``C:\\x``
    compare equal.
    """
    normalized = path.replace("\\", "/")
    if len(normalized) > 1:
        normalized = normalized.rstrip("/") or "/"
    if len(normalized) >= 2 and normalized[1] == ":":
        normalized = normalized[0].upper() + normalized[1:]
    return normalized


def is_nested_directory(base_dir: str, candidate: str) -> bool:
    """Check whether ``candidate`` is ``base_dir`` or lies beneath it.

    Both paths are made absolute and normalized first. Symlinks are not
    resolved.
    """
    base = normalize_path(os.path.normpath(os.path.abspath(base_dir)))
    test = normalize_path(os.path.normpath(os.path.abspath(candidate)))
    if test == base:
        return True
    prefix = base if base.endswith("/") else base + "/"
    return test.startswith(prefix)
