"""
Project configuration for modscope.

Read from ``modscope.toml`` or the ``[tool.modscope]`` table of
``pyproject.toml``:

    package = "main"

    [logging]
    level = "DEBUG"

    [[keywords]]
    feature = "module"
    options = { as = "namespace", preamble = ["version 0.1"] }

Every ``[[keywords]]`` entry is installed into ``package`` before a script
is compiled, as if the script began with ``use FEATURE OPTIONS``.
"""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from .core.errors import ConfigurationError

CONFIG_FILENAME = "modscope.toml"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


class KeywordConfig(BaseModel):
    """One feature to install before compiling."""

    model_config = ConfigDict(extra="forbid")

    feature: str = "module"
    options: dict[str, Any] | list[Any] | None = None


class LoggingConfig(BaseModel):
    """Logging configuration."""

    model_config = ConfigDict(extra="forbid")

    level: str = "WARNING"
    format: str = LOG_FORMAT

    def apply(self) -> None:
        logging.basicConfig(level=self.level.upper(), format=self.format)


class ModscopeConfig(BaseModel):
    """Complete modscope configuration."""

    model_config = ConfigDict(extra="forbid")

    package: str = "main"
    keywords: list[KeywordConfig] = Field(default_factory=list)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    def prelude(self) -> list[tuple[str, Any]]:
        """``(feature, options)`` pairs for ``compile_source``."""
        return [(entry.feature, entry.options) for entry in self.keywords]


def parse_config(data: dict[str, Any], source: str = "<config>") -> ModscopeConfig:
    try:
        return ModscopeConfig.model_validate(data)
    except PydanticValidationError as e:
        raise ConfigurationError(f"Invalid configuration in {source}: {e}") from e


def load_config(path: Path) -> ModscopeConfig:
    """
    Load configuration from a ``modscope.toml`` or ``pyproject.toml`` file.

    Raises:
        ConfigurationError: If the file is not valid TOML or has invalid values
    """
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as e:
        raise ConfigurationError(f"Invalid TOML in {path}: {e}") from e

    if path.name == "pyproject.toml":
        data = data.get("tool", {}).get("modscope", {})
    return parse_config(data, str(path))


def find_config(start: Path) -> Path | None:
    """Nearest ``modscope.toml``, or ``pyproject.toml`` with a modscope table."""
    directory = start if start.is_dir() else start.parent
    for candidate_dir in (directory, *directory.parents):
        candidate = candidate_dir / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
        pyproject = candidate_dir / "pyproject.toml"
        if pyproject.is_file() and "[tool.modscope" in pyproject.read_text(encoding="utf-8"):
            return pyproject
    return None


def resolve_config(explicit: Path | None, script: Path | None = None) -> ModscopeConfig:
    """Explicit config file, else the nearest one to ``script``, else defaults."""
    if explicit is not None:
        return load_config(explicit)
    found = find_config(script if script is not None else Path.cwd())
    return load_config(found) if found else ModscopeConfig()
