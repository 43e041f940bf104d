"""Filesystem transfer, scanning and temp-file management.

This module provides recursive copy/move/delete with overwrite
policies, filtered directory scanning, a temporary path registry,
backup directory preparation and tree hashing.
"""

from fsops.filesystem.backup import prepare_backup_dir
from fsops.filesystem.files import append_data, dir_md5, file_not_empty
from fsops.filesystem.models import DirEntry, ErrorKind, OpResult, OverwritePolicy, ScanKey
from fsops.filesystem.sync import copy_dir, move_dir
from fsops.filesystem.tempfiles import RegistryState, TempRegistry
from fsops.filesystem.transfer import copy_tree, delete_tree, make_dir
from fsops.filesystem.walker import DEFAULT_EXCLUDE, scan_directory

__all__ = [
    "DEFAULT_EXCLUDE",
    "DirEntry",
    "ErrorKind",
    "OpResult",
    "OverwritePolicy",
    "RegistryState",
    "ScanKey",
    "TempRegistry",
    "append_data",
    "copy_dir",
    "copy_tree",
    "delete_tree",
    "dir_md5",
    "file_not_empty",
    "make_dir",
    "move_dir",
    "prepare_backup_dir",
    "scan_directory",
]
