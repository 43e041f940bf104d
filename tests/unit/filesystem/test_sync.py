"""Tests for copy_dir and move_dir."""

import errno
import logging
import os
from collections.abc import Callable
from pathlib import Path
from unittest.mock import patch

import pytest
from fsops.filesystem.models import ErrorKind, OpResult, OverwritePolicy
from fsops.filesystem.sync import copy_dir, move_dir

Snapshot = Callable[[Path], dict[str, bytes | str]]


def _cross_device(*args: object, **kwargs: object) -> None:
    raise OSError(errno.EXDEV, "Invalid cross-device link")


class TestCopyDir:
    """Tests for copy_dir function."""

    def test_copies_to_new_destination(
        self, sample_tree: Path, tmp_path: Path, snapshot: Snapshot
    ) -> None:
        """A fresh destination receives an exact copy."""
        dst = tmp_path / "dst"

        result = copy_dir(sample_tree, dst)

        assert result.success is True
        assert snapshot(dst) == snapshot(sample_tree)

    def test_abort_leaves_destination_untouched(
        self, sample_tree: Path, tmp_path: Path, snapshot: Snapshot
    ) -> None:
        """ABORT fails with DESTINATION_EXISTS and changes nothing."""
        dst = tmp_path / "dst"
        dst.mkdir()
        (dst / "mine.txt").write_text("mine")
        before = snapshot(dst)

        result = copy_dir(sample_tree, dst, OverwritePolicy.ABORT)

        assert result.success is False
        assert result.error_kind == ErrorKind.DESTINATION_EXISTS
        assert result.failed_path == str(dst)
        assert snapshot(dst) == before

    def test_overwrite_replaces_destination(
        self, sample_tree: Path, tmp_path: Path, snapshot: Snapshot
    ) -> None:
        """OVERWRITE produces an exact copy and drops old-only files."""
        dst = tmp_path / "dst"
        dst.mkdir()
        (dst / "old.txt").write_text("old")

        result = copy_dir(sample_tree, dst, OverwritePolicy.OVERWRITE)

        assert result.success is True
        assert not (dst / "old.txt").exists()
        assert snapshot(dst) == snapshot(sample_tree)

    def test_merge_keeps_extra_files(
        self, sample_tree: Path, tmp_path: Path, snapshot: Snapshot
    ) -> None:
        """MERGE copies into the existing tree and keeps unrelated files."""
        dst = tmp_path / "dst"
        dst.mkdir()
        (dst / "extra.txt").write_text("extra")

        result = copy_dir(sample_tree, dst, OverwritePolicy.MERGE)

        assert result.success is True
        merged = snapshot(dst)
        assert merged.pop("extra.txt") == b"extra"
        assert merged == snapshot(sample_tree)

    def test_merge_is_idempotent(
        self, sample_tree: Path, tmp_path: Path, snapshot: Snapshot
    ) -> None:
        """Merging the same source twice gives the same result as once."""
        dst = tmp_path / "dst"
        copy_dir(sample_tree, dst, OverwritePolicy.MERGE)
        first = snapshot(dst)

        result = copy_dir(sample_tree, dst, OverwritePolicy.MERGE)

        assert result.success is True
        assert snapshot(dst) == first

    def test_merge_logs_notice(
        self, sample_tree: Path, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Merging into an existing directory logs an info notice."""
        dst = tmp_path / "dst"
        dst.mkdir()

        with caplog.at_level(logging.INFO, logger="fsops"):
            copy_dir(sample_tree, dst, OverwritePolicy.MERGE)

        assert "Merging into existing directory" in caplog.text

    def test_missing_source(self, tmp_path: Path) -> None:
        """A missing source fails with SOURCE_UNREADABLE."""
        result = copy_dir(tmp_path / "missing", tmp_path / "dst")

        assert result.success is False
        assert result.error_kind == ErrorKind.SOURCE_UNREADABLE
        assert not (tmp_path / "dst").exists()

    def test_destination_parent_missing(self, sample_tree: Path, tmp_path: Path) -> None:
        """A destination whose parent is missing fails with DESTINATION_NOT_WRITABLE."""
        dst = tmp_path / "nope" / "dst"

        result = copy_dir(sample_tree, dst)

        assert result.success is False
        assert result.error_kind == ErrorKind.DESTINATION_NOT_WRITABLE
        assert result.failed_path == str(tmp_path / "nope")

    def test_overwrite_delete_failure_is_not_fatal(
        self, sample_tree: Path, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        """A failed pre-delete under OVERWRITE is logged and the copy continues."""
        dst = tmp_path / "dst"
        dst.mkdir()
        (dst / "old.txt").write_text("old")
        failed = OpResult(
            path=str(dst),
            success=False,
            error_kind=ErrorKind.DELETE_FAILURE,
            error="nope",
            failed_path=str(dst),
            cause="locked",
        )

        with (
            caplog.at_level(logging.WARNING, logger="fsops"),
            patch("fsops.filesystem.sync.delete_tree", return_value=failed),
        ):
            result = copy_dir(sample_tree, dst, OverwritePolicy.OVERWRITE)

        assert result.success is True
        assert (dst / "old.txt").exists()
        assert (dst / "README.md").exists()
        assert "Could not remove existing" in caplog.text

    def test_copy_failure_is_reported(self, sample_tree: Path, tmp_path: Path) -> None:
        """A failing entry surfaces as COPY_FAILURE with the entry path."""
        with patch(
            "fsops.filesystem.transfer.shutil.copyfile",
            side_effect=OSError(errno.ENOSPC, "No space left on device"),
        ):
            result = copy_dir(sample_tree, tmp_path / "dst")

        assert result.success is False
        assert result.error_kind == ErrorKind.COPY_FAILURE
        assert result.failed_path is not None
        assert result.failed_path.startswith(str(sample_tree))

    def test_destination_inside_source_rejected(self, sample_tree: Path) -> None:
        """Copying a tree into its own subdirectory fails before anything is written."""
        dst = sample_tree / "inner"

        result = copy_dir(sample_tree, dst)

        assert result.success is False
        assert result.error_kind == ErrorKind.COPY_FAILURE
        assert result.error is not None
        assert str(sample_tree) in result.error
        assert not dst.exists()

    def test_overwrite_onto_itself_keeps_source(
        self, sample_tree: Path, snapshot: Snapshot
    ) -> None:
        """OVERWRITE with src == dst fails instead of deleting the source."""
        before = snapshot(sample_tree)

        result = copy_dir(sample_tree, sample_tree, OverwritePolicy.OVERWRITE)

        assert result.success is False
        assert result.error_kind == ErrorKind.COPY_FAILURE
        assert snapshot(sample_tree) == before


class TestMoveDir:
    """Tests for move_dir function."""

    def test_move_by_rename(self, sample_tree: Path, tmp_path: Path, snapshot: Snapshot) -> None:
        """A same-device move renames the tree."""
        before = snapshot(sample_tree)
        dst = tmp_path / "moved"

        result = move_dir(sample_tree, dst)

        assert result.success is True
        assert result.path == str(dst)
        assert not sample_tree.exists()
        assert snapshot(dst) == before

    def test_move_falls_back_to_copy_and_delete(
        self, sample_tree: Path, tmp_path: Path, snapshot: Snapshot
    ) -> None:
        """When rename fails the tree is copied and the source removed."""
        before = snapshot(sample_tree)
        dst = tmp_path / "moved"

        with patch("fsops.filesystem.sync.os.rename", side_effect=_cross_device):
            result = move_dir(sample_tree, dst)

        assert result.success is True
        assert not sample_tree.exists()
        assert snapshot(dst) == before

    def test_stray_file_from_failed_rename_is_removed(
        self, sample_tree: Path, tmp_path: Path
    ) -> None:
        """An empty file left behind by a failed rename does not block the copy."""
        dst = tmp_path / "moved"

        def leaky_rename(src: str, target: str) -> None:
            Path(target).touch()
            _cross_device()

        with patch("fsops.filesystem.sync.os.rename", side_effect=leaky_rename):
            result = move_dir(sample_tree, dst)

        assert result.success is True
        assert dst.is_dir()
        assert (dst / "README.md").read_text() == "# readme\n"

    def test_existing_destination_fails_without_overwrite(
        self, sample_tree: Path, tmp_path: Path
    ) -> None:
        """An existing destination fails with DESTINATION_EXISTS."""
        dst = tmp_path / "moved"
        dst.mkdir()

        result = move_dir(sample_tree, dst)

        assert result.success is False
        assert result.error_kind == ErrorKind.DESTINATION_EXISTS
        assert sample_tree.exists()

    def test_overwrite_replaces_destination(self, sample_tree: Path, tmp_path: Path) -> None:
        """overwrite=True deletes the existing destination first."""
        dst = tmp_path / "moved"
        dst.mkdir()
        (dst / "old.txt").write_text("old")

        result = move_dir(sample_tree, dst, overwrite=True)

        assert result.success is True
        assert not (dst / "old.txt").exists()
        assert (dst / "README.md").exists()

    def test_missing_source(self, tmp_path: Path) -> None:
        """A missing source fails with SOURCE_UNREADABLE."""
        result = move_dir(tmp_path / "missing", tmp_path / "dst")

        assert result.success is False
        assert result.error_kind == ErrorKind.SOURCE_UNREADABLE

    def test_fallback_copy_failure(self, sample_tree: Path, tmp_path: Path) -> None:
        """A failed fallback copy reports MOVE_FAILURE and keeps the source."""
        dst = tmp_path / "moved"
        inner = OpResult(
            path=str(dst),
            success=False,
            error_kind=ErrorKind.COPY_FAILURE,
            error="copy broke",
            failed_path=str(sample_tree / "README.md"),
            cause="disk full",
        )

        with (
            patch("fsops.filesystem.sync.os.rename", side_effect=_cross_device),
            patch("fsops.filesystem.sync.copy_dir", return_value=inner),
        ):
            result = move_dir(sample_tree, dst)

        assert result.success is False
        assert result.error_kind == ErrorKind.MOVE_FAILURE
        assert result.failed_path == str(sample_tree / "README.md")
        assert result.cause == "disk full"
        assert os.path.isdir(sample_tree)

    def test_stray_file_that_cannot_be_removed(self, sample_tree: Path, tmp_path: Path) -> None:
        """An undeletable leftover file yields MOVE_FAILURE instead of an exception."""
        dst = tmp_path / "moved"

        def leaky_rename(src: str, target: str) -> None:
            Path(target).touch()
            _cross_device()

        with (
            patch("fsops.filesystem.sync.os.rename", side_effect=leaky_rename),
            patch("fsops.filesystem.sync.os.unlink", side_effect=PermissionError("busy")),
        ):
            result = move_dir(sample_tree, dst)

        assert result.success is False
        assert result.error_kind == ErrorKind.MOVE_FAILURE
        assert (sample_tree / "README.md").exists()

    def test_destination_inside_source_rejected(self, sample_tree: Path) -> None:
        """Moving a tree into its own subdirectory fails and keeps the source."""
        dst = sample_tree / "inner"

        result = move_dir(sample_tree, dst)

        assert result.success is False
        assert result.error_kind == ErrorKind.MOVE_FAILURE
        assert not dst.exists()
        assert (sample_tree / "README.md").exists()

    def test_overwrite_onto_itself_keeps_source(
        self, sample_tree: Path, snapshot: Snapshot
    ) -> None:
        """overwrite=True with src == dst fails instead of deleting the source."""
        before = snapshot(sample_tree)

        result = move_dir(sample_tree, sample_tree, overwrite=True)

        assert result.success is False
        assert result.error_kind == ErrorKind.MOVE_FAILURE
        assert snapshot(sample_tree) == before
