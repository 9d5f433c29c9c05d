"""
Namespaces and the tree-walking interpreter for host programs.

Does NOT use Python's eval(). Only the closed set of node types in
``modscope.host.ir`` is handled.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from ..core.errors import HostRuntimeError
from .ir import Block, Call, DoBlock, ListExpr, Literal, Node, Subroutine, VersionAssign

logger = logging.getLogger(__name__)

MAIN_PACKAGE = "main"


@dataclass
class Namespace:
    """A package: version tag, identifier table and keyword table."""

    name: str
    version: str | None = None
    functions: dict[str, Any] = field(default_factory=dict)
    keywords: dict[str, Callable[..., None]] = field(default_factory=dict)


class NamespaceTable:
    """All packages known to one compilation unit."""

    def __init__(self) -> None:
        self._namespaces: dict[str, Namespace] = {}
        self.declare(MAIN_PACKAGE)

    def __contains__(self, name: str) -> bool:
        return name in self._namespaces

    def declare(self, name: str) -> Namespace:
        namespace = self._namespaces.get(name)
        if namespace is None:
            namespace = Namespace(name)
            self._namespaces[name] = namespace
        return namespace

    def get(self, name: str) -> Namespace | None:
        return self._namespaces.get(name)

    def names(self) -> list[str]:
        return list(self._namespaces)

    def set_version(self, package: str, literal: str) -> None:
        self.declare(package).version = literal

    def version_of(self, package: str) -> str | None:
        namespace = self._namespaces.get(package)
        return namespace.version if namespace else None

    def install_function(self, package: str, name: str, function: Any) -> None:
        self.declare(package).functions[name] = function

    def remove_function(self, package: str, name: str) -> None:
        namespace = self._namespaces.get(package)
        if namespace is not None:
            namespace.functions.pop(name, None)

    def lookup_function(self, package: str, name: str) -> Any | None:
        namespace = self._namespaces.get(package)
        return namespace.functions.get(name) if namespace else None

    def declare_keyword(
        self, package: str, name: str, hook: Callable[..., None] | None
    ) -> None:
        """Bind ``name`` to ``hook``; a None hook turns the keyword off."""
        keywords = self.declare(package).keywords
        if hook is None:
            keywords.pop(name, None)
        else:
            keywords[name] = hook

    def declared_keyword(self, package: str, name: str) -> Callable[..., None] | None:
        """Keyword hook for ``name`` whether or not its function is installed."""
        namespace = self._namespaces.get(package)
        return namespace.keywords.get(name) if namespace else None

    def lookup_keyword(self, package: str, name: str) -> Callable[..., None] | None:
        """Keyword hook for ``name``, only while its function is installed."""
        namespace = self._namespaces.get(package)
        if namespace is None or name not in namespace.functions:
            return None
        return namespace.keywords.get(name)


def split_qualified(name: str, package: str) -> tuple[str, str]:
    """Split ``Foo::Bar::baz`` into ``("Foo::Bar", "baz")``."""
    if "::" in name:
        head, _, tail = name.rpartition("::")
        return head, tail
    return package, name


class Interpreter:
    """Runs a parsed program against a namespace table."""

    def __init__(self, namespaces: NamespaceTable):
        self.namespaces = namespaces

    def run(self, program: Block) -> Any:
        return self._interpret(program)

    def _interpret(self, node: Node) -> Any:
        """Dispatch evaluation to the appropriate handler."""
        if isinstance(node, Literal):
            return node.value

        if isinstance(node, ListExpr):
            return [self._interpret(item) for item in node.items]

        if isinstance(node, Call):
            return self._interpret_call(node)

        if isinstance(node, VersionAssign):
            self.namespaces.set_version(node.package, node.literal)
            return node.literal

        if isinstance(node, DoBlock):
            return self._interpret_block(node.body)

        if isinstance(node, Block):
            return self._interpret_block(node)

        raise HostRuntimeError(f"Unknown node type: {type(node).__name__}")

    def _interpret_block(self, block: Block) -> Any:
        result = None
        for statement in block.statements:
            result = self._interpret(statement)
        return result

    def _interpret_call(self, node: Call) -> Any:
        package, name = split_qualified(node.name, node.package)
        target = node.target
        if target is None:
            target = self.namespaces.lookup_function(package, name)
        if target is None:
            raise HostRuntimeError(f"Undefined subroutine &{package}::{name}")

        args = [self._interpret(arg) for arg in node.args]
        if isinstance(target, Subroutine):
            if args:
                raise HostRuntimeError(
                    f"Subroutine &{target.qualified_name} takes no arguments"
                )
            return self._interpret_block(target.body)
        logger.debug("Calling %s with %d argument(s)", node.name, len(args))
        return target(*args)
