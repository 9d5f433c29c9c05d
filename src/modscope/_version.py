"""Version lookup for modscope."""

import tomllib
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _metadata_version
from pathlib import Path

DISTRIBUTION = "modscope"
UNKNOWN_VERSION = "0.0.0"


def _source_tree_version(pyproject: Path) -> str | None:
    """``[project] version`` of a checkout, if ``pyproject`` belongs to modscope."""
    if not pyproject.is_file():
        return None
    try:
        project = tomllib.loads(pyproject.read_text(encoding="utf-8")).get("project", {})
    except tomllib.TOMLDecodeError:
        return None
    if project.get("name") != DISTRIBUTION:
        return None
    return project.get("version")


def get_version() -> str:
    """Checkout version when running from source, else the installed one."""
    found = _source_tree_version(Path(__file__).parents[2] / "pyproject.toml")
    if found:
        return found
    try:
        return _metadata_version(DISTRIBUTION)
    except PackageNotFoundError:
        return UNKNOWN_VERSION
