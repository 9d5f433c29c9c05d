"""Shared pytest fixtures for modscope tests."""

from pathlib import Path

import pytest

from modscope.core.feature import ModuleFeature
from modscope.host import Parser, SourceBuffer, compile_source
from modscope.host.features import FeatureRegistry, default_registry


@pytest.fixture
def make_parser():
    """Return a factory building a parser over the given source."""

    def _make(text: str = "", **kwargs) -> Parser:
        return Parser(SourceBuffer(text, Path("test.msc")), **kwargs)

    return _make


@pytest.fixture
def registry() -> FeatureRegistry:
    """Return a registry holding the syntax and module features."""
    return default_registry()


@pytest.fixture
def feature() -> ModuleFeature:
    return ModuleFeature()


@pytest.fixture
def compile_module():
    """Compile source with the module keyword installed in main."""

    def _compile(text: str, options=None, **kwargs):
        return compile_source(text, prelude=[("module", options)], **kwargs)

    return _compile
