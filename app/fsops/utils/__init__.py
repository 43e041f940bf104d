"""Utility modules for fsops.

This module exports commonly used utility functions.
"""

from fsops.utils.pathops import is_absolute_path, is_nested_directory, normalize_path

__all__ = [
    "is_absolute_path",
    "is_nested_directory",
    "normalize_path",
]
