"""
Reference host language for modscope syntax features.

A small brace-delimited language with Perl-style packages. Its parser reads
from a mutable buffer and dispatches installed keywords while parsing.

Usage:
    from modscope.host import compile_source

    compiled = compile_source('use module; module Foo::Bar 1.23 { 1 }')
    compiled.run()                          # "Foo::Bar"
    compiled.namespaces.version_of("Foo::Bar")  # "1.23"
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .buffer import SourceBuffer
from .features import FeatureRegistry, SyntaxDispatcher, default_registry
from .ir import Block
from .literal import dump_literal
from .parser import Parser
from .runtime import MAIN_PACKAGE, Interpreter, NamespaceTable


@dataclass
class CompiledProgram:
    """A parsed program with the namespaces its parse produced."""

    program: Block
    namespaces: NamespaceTable
    source: str

    def run(self) -> Any:
        return Interpreter(self.namespaces).run(self.program)


def compile_source(
    text: str,
    *,
    file: Path | None = None,
    namespaces: NamespaceTable | None = None,
    features: FeatureRegistry | None = None,
    package: str = MAIN_PACKAGE,
    prelude: Iterable[tuple[str, Any]] = (),
) -> CompiledProgram:
    """
    Parse host source.

    Args:
        text: Program source
        file: Path reported in error locations
        namespaces: Existing namespace table to compile into
        features: Feature registry (defaults to ``syntax`` and ``module``)
        package: Package the program starts in
        prelude: ``(feature name, options)`` pairs installed into ``package``
            before parsing, as if the program began with ``use`` statements

    Returns:
        CompiledProgram holding the program tree and rewritten source
    """
    parser = Parser(SourceBuffer(text, file), namespaces, features, package)
    for name, options in prelude:
        parser.features.require(name).install(package, options, host=parser)
    program = parser.parse()
    return CompiledProgram(program, parser.namespaces, parser.buffer.text)


def expand_source(text: str, **kwargs: Any) -> str:
    """Source text after every declaration has been rewritten."""
    return compile_source(text, **kwargs).source


def run_source(text: str, **kwargs: Any) -> Any:
    """Compile and run host source, returning its last value."""
    return compile_source(text, **kwargs).run()


__all__ = [
    "CompiledProgram",
    "FeatureRegistry",
    "Interpreter",
    "NamespaceTable",
    "Parser",
    "SourceBuffer",
    "SyntaxDispatcher",
    "compile_source",
    "default_registry",
    "dump_literal",
    "expand_source",
    "run_source",
]
