"""Filesystem domain models for tree transfer and scanning.

This module defines the core data structures shared by the walker,
the recursive transfer primitives and the sync operations: scan
entries and keys, overwrite policies, error kinds and the result
type every operation returns.
"""

from dataclasses import dataclass
from enum import Enum


class ScanKey(str, Enum):
    """Attribute of a DirEntry used to key scan results.

    Attributes:
        FULL_PATH: Path of the entry including the scan root.
        BASE_NAME: Final path segment (e.g., ``module.php``).
        STEM: Final path segment without its trailing extension.
    """

    FULL_PATH = "full-path"
    BASE_NAME = "base-name"
    STEM = "stem"


class OverwritePolicy(str, Enum):
    """Rule applied when the destination of a copy already exists.

    Attributes:
        ABORT: Fail without touching the destination.
        OVERWRITE: Delete the destination tree before copying.
        MERGE: Copy into the existing tree, overwriting colliding paths.
    """

    ABORT = "abort"
    OVERWRITE = "overwrite"
    MERGE = "merge"


class ErrorKind(str, Enum):
    """Distinct failure conditions reported by filesystem operations."""

    DESTINATION_EXISTS = "destination_exists"
    SOURCE_UNREADABLE = "source_unreadable"
    DESTINATION_NOT_WRITABLE = "destination_not_writable"
    CREATE_DIR_FAILURE = "create_dir_failure"
    PARENT_NOT_WRITABLE = "parent_not_writable"
    COPY_FAILURE = "copy_failure"
    MOVE_FAILURE = "move_failure"
    DELETE_FAILURE = "delete_failure"
    BACKUP_PATH_INSIDE_ROOT = "backup_path_inside_root"


@dataclass(frozen=True, slots=True)
class DirEntry:
    """A file matched during a directory scan.

    Attributes:
        full_path: Path of the file, prefixed with the scan root as given.
        base_name: Final path segment.
        stem: Base name without its trailing extension.
    """

    full_path: str
    base_name: str
    stem: str

    def key(self, key: ScanKey) -> str:
        """Return the attribute selected by ``key``."""
        if key == ScanKey.FULL_PATH:
            return self.full_path
        if key == ScanKey.BASE_NAME:
            return self.base_name
        return self.stem


@dataclass(frozen=True, slots=True)
class OpResult:
    """Outcome of a filesystem operation.

    Recursive operations stop at the first failure. The top-level call
    reports its own error kind while ``failed_path`` and ``cause`` keep
    the details of the entry that actually failed.

    Attributes:
        path: Path the operation was requested for.
        success: Whether the operation completed successfully.
        error_kind: Failure classification, None on success.
        error: Human-readable error message, None on success.
        failed_path: Deepest path that failed, None on success.
        cause: Underlying OS error text, if any.
    """

    path: str
    success: bool
    error_kind: ErrorKind | None = None
    error: str | None = None
    failed_path: str | None = None
    cause: str | None = None

    @classmethod
    def ok(cls, path: str) -> "OpResult":
        """Build a successful result for ``path``."""
        return cls(path=path, success=True)
