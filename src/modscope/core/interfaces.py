"""
Interfaces between the rewriting engine and the host parser.

The engine never imports the host parser. Everything it needs at a
declaration site is reached through ``KeywordSite`` and ``HostProtocol``.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from ..host.buffer import SourceBuffer
    from .errors import ErrorContext


ScopeEndCallback = Callable[["HostProtocol"], None]


@runtime_checkable
class HostProtocol(Protocol):
    """
    Services a host parser offers to syntax features.

    ``buffer`` is the live source text and ``pos`` the parser's read
    position inside it. Text inserted at or after ``pos`` is read by the
    parser as if it had been written there.
    """

    buffer: SourceBuffer
    pos: int

    def current_package(self) -> str: ...
    def skip_insignificant(self, offset: int) -> int: ...
    def declare_keyword(
        self, package: str, name: str, hook: Callable[[KeywordSite], None] | None
    ) -> None: ...
    def lookup_function(self, package: str, name: str) -> Any | None: ...
    def declared_keyword(
        self, package: str, name: str
    ) -> Callable[[KeywordSite], None] | None: ...
    def install_function(self, package: str, name: str, function: Any) -> None: ...
    def remove_function(self, package: str, name: str) -> None: ...
    def on_scope_end(self, callback: ScopeEndCallback) -> None: ...
    def provide_feature(self, feature: Any) -> None: ...
    def error_context(self, offset: int) -> ErrorContext: ...


@dataclass(frozen=True)
class KeywordSite:
    """
    A keyword occurrence the host parser found while reading.

    Attributes:
        host: The parser that found the keyword
        offset: Buffer offset of the first character of the keyword
        declarator: The keyword as written
    """

    host: HostProtocol
    offset: int
    declarator: str
