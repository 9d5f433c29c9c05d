"""Tests for the package version lookup."""

from pathlib import Path

from modscope._version import _source_tree_version, get_version


class TestSourceTreeVersion:
    def test_reads_own_pyproject(self, tmp_path: Path) -> None:
        pyproject = tmp_path / "pyproject.toml"
        pyproject.write_text('[project]\nname = "modscope"\nversion = "9.9.1"\n')
        assert _source_tree_version(pyproject) == "9.9.1"

    def test_other_project_ignored(self, tmp_path: Path) -> None:
        pyproject = tmp_path / "pyproject.toml"
        pyproject.write_text('[project]\nname = "someone-else"\nversion = "1.0"\n')
        assert _source_tree_version(pyproject) is None

    def test_missing_or_broken_file(self, tmp_path: Path) -> None:
        assert _source_tree_version(tmp_path / "pyproject.toml") is None
        broken = tmp_path / "broken.toml"
        broken.write_text("[project\n")
        assert _source_tree_version(broken) is None


def test_get_version_from_checkout() -> None:
    assert get_version() == "0.1.0"
