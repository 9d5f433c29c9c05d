"""
modscope - a module keyword for a brace-delimited scripting language.

Installs a ``module`` keyword that rewrites

    module Foo::Bar 1.23 { ... }

into a block running inside package ``Foo::Bar``, while the source is
being parsed.
"""

from __future__ import annotations

from ._version import get_version
from .core.errors import (
    ConfigurationError,
    DeclarationSyntaxError,
    HostRuntimeError,
    ModscopeError,
    ParseError,
)
from .core.feature import (
    ModuleFeature,
    default_keyword_name,
    default_preamble,
    install,
    install_multiple,
    runtime_trampoline,
)
from .host import compile_source, expand_source, run_source

__version__ = get_version()

__all__ = [
    "__version__",
    "ModscopeError",
    "ConfigurationError",
    "DeclarationSyntaxError",
    "ParseError",
    "HostRuntimeError",
    "ModuleFeature",
    "default_keyword_name",
    "default_preamble",
    "install",
    "install_multiple",
    "runtime_trampoline",
    "compile_source",
    "expand_source",
    "run_source",
]
