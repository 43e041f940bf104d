"""Unit tests for the scan CLI command."""

# pyright: reportPrivateUsage=false

import json
from pathlib import Path
from unittest.mock import patch

import pytest
from fsops.cli.commands.scan import _print_table
from fsops.cli.main import app
from fsops.filesystem.models import DirEntry
from typer.testing import CliRunner

runner = CliRunner()


@pytest.fixture
def workdir(sample_tree: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run commands from the directory holding the sample tree as ``src``."""
    monkeypatch.chdir(sample_tree.parent)
    return sample_tree.parent


def _scan_json(*args: str) -> dict[str, dict[str, str]]:
    """Invoke scan with JSON output and return the parsed mapping."""
    result = runner.invoke(app, ["scan", "src", "--format", "json", *args])
    assert result.exit_code == 0, result.output
    return json.loads(result.stdout)


class TestScanTable:
    """Tests for table output."""

    def test_scan_lists_matches(self, workdir: Path) -> None:
        """Matching files are listed with a summary."""
        result = runner.invoke(app, ["scan", "src", "--mask", r"\.py$", "--key", "base-name"])

        assert result.exit_code == 0
        assert "Matched Files" in result.stdout
        assert "util.py" in result.stdout
        assert "core.py" in result.stdout
        assert "Found 2 matching file(s)" in result.stdout

    def test_scan_no_matches(self, workdir: Path) -> None:
        """An empty result prints a notice instead of a table."""
        result = runner.invoke(app, ["scan", "src", "--mask", r"\.php$"])

        assert result.exit_code == 0
        assert "No matching files found." in result.stdout

    def test_scan_not_a_directory(self, workdir: Path) -> None:
        """Scanning a missing directory is an error."""
        result = runner.invoke(app, ["scan", "nope"])

        assert result.exit_code == 1
        assert "Not a directory" in result.output

    def test_scan_invalid_mask(self, workdir: Path) -> None:
        """A mask that is not a valid regular expression is an error."""
        result = runner.invoke(app, ["scan", "src", "--mask", "["])

        assert result.exit_code == 1
        assert "Invalid mask" in result.output

    def test_symlink_rows_styled(self, workdir: Path) -> None:
        """Entries that are symlinks are rendered with the symlink style."""
        entries = {
            "link": DirEntry(full_path="src/link", base_name="link", stem="link"),
            "README": DirEntry(full_path="src/README.md", base_name="README.md", stem="README"),
        }

        with patch("fsops.cli.commands.scan.console") as mock_console:
            _print_table(entries)

        table = mock_console.print.call_args.args[0]
        assert [row.style for row in table.rows] == ["symlink", None]


class TestScanJson:
    """Tests for JSON output and scan options."""

    def test_json_entries(self, workdir: Path) -> None:
        """JSON output maps keys to entry fields."""
        data = _scan_json("--mask", r"^util\.py$", "--key", "stem")

        assert data == {
            "util": {
                "full_path": str(Path("src") / "lib" / "util.py"),
                "base_name": "util.py",
                "stem": "util",
            }
        }

    def test_depth_zero(self, workdir: Path) -> None:
        """--depth 0 only lists the root level."""
        data = _scan_json("--depth", "0", "--key", "base-name")

        assert set(data) == {"README.md", "link", "run.sh"}

    def test_depth_one(self, workdir: Path) -> None:
        """--depth 1 includes the first subdirectory level."""
        data = _scan_json("--depth", "1", "--key", "base-name")

        assert "util.py" in data
        assert "core.py" not in data

    def test_min_depth(self, workdir: Path) -> None:
        """--min-depth drops shallow matches."""
        data = _scan_json("--min-depth", "2", "--key", "base-name")

        assert set(data) == {"core.py"}

    def test_dotfiles(self, workdir: Path) -> None:
        """--dotfiles includes names starting with a dot."""
        assert ".env" not in _scan_json("--key", "base-name")
        assert ".env" in _scan_json("--dotfiles", "--key", "base-name")

    def test_exclude(self, workdir: Path) -> None:
        """--exclude skips a subtree."""
        data = _scan_json("--exclude", "lib", "--key", "base-name")

        assert "util.py" not in data
        assert "README.md" in data

    def test_exclude_from_config(self, workdir: Path) -> None:
        """scan_exclude from the config file is applied."""
        (workdir / "cfg.toml").write_text('scan_exclude = ["deep"]\n')

        result = runner.invoke(
            app,
            ["-c", "cfg.toml", "scan", "src", "--format", "json", "--key", "base-name"],
        )

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert "util.py" in data
        assert "core.py" not in data

    def test_negative_depth_rejected(self, workdir: Path) -> None:
        """Negative depths are rejected by the CLI."""
        result = runner.invoke(app, ["scan", "src", "--depth", "-1"])

        assert result.exit_code == 2
