"""
The ``module`` syntax feature.

Installing the feature into a package makes a keyword available there:

    module Foo::Bar 1.23 {
        sub baz { 45 }
    };

The block runs inside package ``Foo::Bar`` with version ``1.23`` and the
whole declaration evaluates to ``"Foo::Bar"``. Name and version are both
optional; without a name the enclosing package is used.

Subclass ``ModuleFeature`` to change the keyword, extend the preamble or
change what a declaration returns at run time.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any

from . import preamble as _preamble
from .driver import RewriteDriver
from .errors import ConfigurationError
from .finalizer import ScopeEndFinalizer
from .interfaces import HostProtocol
from .options import KeywordOptions, merge_options, normalize_options
from .preamble import PreambleArgs, render_preamble

logger = logging.getLogger(__name__)


class ModuleFeature:
    """Installs the module keyword and rewrites its declarations."""

    feature_name = "module"

    def default_keyword_name(self) -> str:
        """The keyword spelling used when no ``as`` option is given."""
        return "module"

    def prepare_options(self, options: Any) -> KeywordOptions:
        return normalize_options(options, self)

    def install(self, target: str, options: Any = None, *, host: HostProtocol) -> bool:
        """
        Make the keyword available in package ``target``.

        The keyword's run-time function is removed from ``target`` again when
        the scope that is being compiled ends.

        Raises:
            ConfigurationError: If ``options`` are invalid; nothing is
                installed in that case
        """
        prepared = self.prepare_options(options)
        self._install_prepared(target, prepared, host)
        return True

    def install_multiple(
        self,
        target: str,
        blocks: Mapping[str, Any],
        shared_options: Any = None,
        *,
        host: HostProtocol,
    ) -> bool:
        """
        Install one keyword per entry of ``blocks``.

        ``blocks`` maps keyword spellings to per-keyword options. Each entry
        is merged with ``shared_options``; list options are concatenated
        with the shared values first. Every merged entry is validated before
        any keyword is installed.
        """
        if not isinstance(blocks, Mapping):
            raise ConfigurationError(
                f"Blocks for {type(self).__name__} expected to be a mapping",
                field="options",
            )
        label = type(self).__name__
        prepared = []
        for alias, delta in blocks.items():
            merged = merge_options(shared_options, delta, label)
            merged["as"] = alias
            prepared.append(self.prepare_options(merged))
        for options in prepared:
            self._install_prepared(target, options, host)
        return True

    def _install_prepared(
        self, target: str, options: KeywordOptions, host: HostProtocol
    ) -> None:
        name = options.alias_name
        host.provide_feature(self)
        previous = host.lookup_function(target, name)
        previous_hook = host.declared_keyword(target, name)
        host.declare_keyword(target, name, RewriteDriver(self, options))
        host.install_function(target, name, self.runtime_trampoline(target))
        host.on_scope_end(
            lambda h: self._restore_keyword(h, target, name, previous, previous_hook)
        )
        logger.debug("Installed %s keyword %r into %s", self.feature_name, name, target)

    def _restore_keyword(
        self,
        host: HostProtocol,
        target: str,
        name: str,
        previous: Any,
        previous_hook: Callable[..., None] | None,
    ) -> None:
        """Put back whatever ``name`` meant in ``target`` before the install."""
        if previous is None:
            host.remove_function(target, name)
            return
        host.install_function(target, name, previous)
        host.declare_keyword(target, name, previous_hook)
        logger.debug("Restored keyword %r in %s", name, target)

    def default_preamble(
        self, name: str, version: str | None, options: KeywordOptions
    ) -> list[str]:
        """
        Package, version and propagation statements for a block.

        Override to add statements; the ``preamble`` option statements are
        appended after whatever this returns.
        """
        return _preamble.default_preamble(self._preamble_args(name, version, options))

    def generate_preamble(
        self, name: str, version: str | None, options: KeywordOptions
    ) -> list[str]:
        return [*self.default_preamble(name, version, options), *options.preamble]

    def render_preamble(
        self, name: str, version: str | None, options: KeywordOptions
    ) -> str:
        return render_preamble(self.generate_preamble(name, version, options))

    def _preamble_args(
        self, name: str, version: str | None, options: KeywordOptions
    ) -> PreambleArgs:
        return PreambleArgs(
            name=name,
            version=version,
            options=options,
            feature_name=self.feature_name,
        )

    def runtime_trampoline(self, target: str) -> Callable[[str, Any], Any]:
        """
        Function called once per declaration when the program runs.

        It receives the package name and the value of the block's last
        statement. The default returns the package name.
        """

        def trampoline(package: str, result: Any) -> Any:
            return package

        return trampoline

    def scope_end_trigger(self) -> str:
        return f"begin {self.feature_name}.scope_end; "

    def scope_end(self, host: HostProtocol) -> None:
        """Compile-time hook: close the declaration when the current block ends."""
        ScopeEndFinalizer().arm(host)

    def compile_hooks(self) -> dict[str, Callable[[HostProtocol], None]]:
        return {"scope_end": self.scope_end}


_default_feature = ModuleFeature()


def default_keyword_name() -> str:
    return _default_feature.default_keyword_name()


def install(target: str, options: Any = None, *, host: HostProtocol) -> bool:
    return _default_feature.install(target, options, host=host)


def install_multiple(
    target: str,
    blocks: Mapping[str, Any],
    shared_options: Any = None,
    *,
    host: HostProtocol,
) -> bool:
    return _default_feature.install_multiple(target, blocks, shared_options, host=host)


def default_preamble(
    name: str, version: str | None, options: Any = None
) -> list[str]:
    record = normalize_options(options, _default_feature)
    return _default_feature.default_preamble(name, version, record)


def runtime_trampoline(target: str) -> Callable[[str, Any], Any]:
    return _default_feature.runtime_trampoline(target)
