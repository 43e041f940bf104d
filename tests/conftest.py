"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

import logging
import os
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest


@pytest.fixture(autouse=True)
def isolated_xdg(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point XDG config and state directories into the test's tmp_path."""
    xdg = tmp_path / "xdg"
    monkeypatch.setenv("XDG_CONFIG_HOME", str(xdg / "config"))
    monkeypatch.setenv("XDG_STATE_HOME", str(xdg / "state"))
    return xdg


@pytest.fixture(autouse=True)
def reset_fsops_logger() -> Iterator[None]:
    """Undo the handler the CLI installs so log records reach caplog."""
    yield
    logger = logging.getLogger("fsops")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


@pytest.fixture
def sample_tree(tmp_path: Path) -> Path:
    """Create a small source tree.

    Layout:
        src/
            README.md
            run.sh          (mode 0755)
            .env
            link -> README.md
            lib/
                util.py
                deep/
                    core.py
    """
    root = tmp_path / "src"
    (root / "lib" / "deep").mkdir(parents=True)
    (root / "README.md").write_text("# readme\n")
    (root / "run.sh").write_text("#!/bin/sh\necho hi\n")
    (root / "run.sh").chmod(0o755)
    (root / ".env").write_text("SECRET=1\n")
    (root / "link").symlink_to("README.md")
    (root / "lib" / "util.py").write_text("def util(): pass\n")
    (root / "lib" / "deep" / "core.py").write_text("def core(): pass\n")
    return root


@pytest.fixture
def snapshot() -> Callable[[Path], dict[str, bytes | str]]:
    """Return a function mapping relative paths to file contents or link targets."""

    def _snapshot(root: Path) -> dict[str, bytes | str]:
        result: dict[str, bytes | str] = {}
        for path in sorted(root.rglob("*")):
            rel = path.relative_to(root).as_posix()
            if path.is_symlink():
                result[rel] = os.readlink(path)
            elif path.is_file():
                result[rel] = path.read_bytes()
        return result

    return _snapshot
