"""
Single-pass parser for host source.

The parser reads characters straight from a ``SourceBuffer`` instead of a
token list, because syntax features rewrite the text ahead of the read
position while parsing is under way.

Grammar:
    program     → statements EOF
    statements  → (statement? ";")* statement?
    statement   → "package" NAME
                | "version" (NUMBER | STRING)
                | "use" WORD (data ("," data)*)?
                | "begin" WORD "." WORD
                | "sub" WORD block
                | expr
    expr        → STRING | NUMBER | "null" | "true" | "false" | "__PACKAGE__"
                | "(" ")" | "(" expr ("," expr)* ")" | "[" (expr ("," expr)*)? "]"
                | "do" block
                | NAME "(" (expr ("," expr)*)? ")"
                | NAME
    block       → "{" statements "}"
    data        → STRING | NUMBER | WORD | "[" data,* "]" | "{" (data "=>" data),* "}"
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from ..core.errors import ErrorContext, ParseError, make_parse_error
from ..core.interfaces import KeywordSite, ScopeEndCallback
from .buffer import SourceBuffer
from .features import FeatureRegistry, default_registry
from .ir import Block, Call, DoBlock, ListExpr, Literal, Node, Subroutine, VersionAssign
from .runtime import MAIN_PACKAGE, NamespaceTable, split_qualified
from .scanner import (
    ScanError,
    number_value,
    scan_number,
    scan_string,
    scan_word,
    skip_insignificant,
)

logger = logging.getLogger(__name__)

STATEMENT_WORDS = frozenset({"package", "version", "use", "begin", "sub", "do"})
CONSTANT_WORDS: dict[str, Any] = {"null": None, "true": True, "false": False}


@dataclass
class Scope:
    """A lexical block being parsed."""

    package: str
    end_hooks: list[ScopeEndCallback] = field(default_factory=list)


class Parser:
    """
    Parses one buffer, dispatching installed keywords as it goes.

    Implements the services syntax features rely on (see
    ``modscope.core.interfaces.HostProtocol``).
    """

    def __init__(
        self,
        buffer: SourceBuffer,
        namespaces: NamespaceTable | None = None,
        features: FeatureRegistry | None = None,
        package: str = MAIN_PACKAGE,
    ):
        self.buffer = buffer
        self.pos = 0
        self.namespaces = namespaces if namespaces is not None else NamespaceTable()
        self.features = features if features is not None else default_registry()
        self.namespaces.declare(package)
        self.scopes: list[Scope] = [Scope(package)]
        self._root_package = package

    # -- Host services --

    def current_package(self) -> str:
        """Innermost enclosing package at the read position."""
        if not self.scopes:
            return self._root_package
        return self.scopes[-1].package

    def skip_insignificant(self, offset: int) -> int:
        return skip_insignificant(self.buffer.text, offset)

    def declare_keyword(self, package: str, name: str, hook: Any) -> None:
        self.namespaces.declare_keyword(package, name, hook)

    def install_function(self, package: str, name: str, function: Any) -> None:
        self.namespaces.install_function(package, name, function)

    def remove_function(self, package: str, name: str) -> None:
        self.namespaces.remove_function(package, name)

    def lookup_function(self, package: str, name: str) -> Any | None:
        return self.namespaces.lookup_function(package, name)

    def declared_keyword(self, package: str, name: str) -> Any | None:
        return self.namespaces.declared_keyword(package, name)

    def on_scope_end(self, callback: ScopeEndCallback) -> None:
        """Run ``callback`` when the innermost open block has been read."""
        self.scopes[-1].end_hooks.append(callback)

    def provide_feature(self, feature: Any) -> None:
        self.features.provide(feature)

    def error_context(self, offset: int) -> ErrorContext:
        line, column = self.buffer.location(offset)
        return ErrorContext(
            file=self.buffer.file,
            line=line,
            column=column,
            snippet=self.buffer.line_at(offset),
        )

    # -- Entry point --

    def parse(self) -> Block:
        """Parse the whole buffer into a program."""
        statements = self.parse_statements(closing=None)
        self._close_scope()
        if self._peek_char():
            raise self._error(f"Unexpected {self._peek_char()!r} after end of program")
        return Block(statements=statements)

    # -- Character helpers --

    def _peek_char(self) -> str:
        self.pos = skip_insignificant(self.buffer.text, self.pos)
        return self.buffer.text[self.pos : self.pos + 1]

    def _match_char(self, char: str) -> bool:
        if self._peek_char() == char:
            self.pos += 1
            return True
        return False

    def _expect_char(self, char: str) -> None:
        found = self._peek_char()
        if found != char:
            got = repr(found) if found else "end of input"
            raise self._error(f"Expected '{char}', got {got}")
        self.pos += 1

    def _peek_word(self) -> str | None:
        self._peek_char()
        m = scan_word(self.buffer.text, self.pos)
        return m.group(0) if m else None

    def _expect_word(self, what: str) -> str:
        word = self._peek_word()
        if word is None:
            raise self._error(f"Expected {what}")
        self.pos += len(word)
        return word

    def _error(self, message: str, offset: int | None = None) -> ParseError:
        context = self.error_context(self.pos if offset is None else offset)
        return make_parse_error(
            message, context.file, context.line, context.column, context.snippet
        )

    # -- Statements --

    def parse_statements(self, closing: str | None) -> list[Node]:
        statements: list[Node] = []
        while True:
            c = self._peek_char()
            if not c:
                if closing is not None:
                    raise self._error(f"Missing '{closing}' before end of input")
                break
            if c == closing:
                break
            if c == ";":
                self.pos += 1
                continue

            node = self.parse_statement()
            if node is not None:
                statements.append(node)

            c = self._peek_char()
            if c == ";":
                self.pos += 1
            elif c and c != closing:
                raise self._error(f"Expected ';' between statements, got {c!r}")
        return statements

    def parse_statement(self) -> Node | None:
        word = self._peek_word()
        if word == "package":
            self.pos += len(word)
            return self._parse_package()
        if word == "version":
            self.pos += len(word)
            return self._parse_version()
        if word == "use":
            self.pos += len(word)
            return self._parse_use()
        if word == "begin":
            self.pos += len(word)
            return self._parse_begin()
        if word == "sub":
            self.pos += len(word)
            return self._parse_sub()
        return self.parse_expr()

    def _parse_package(self) -> None:
        name = self._expect_word("a package name")
        self.namespaces.declare(name)
        self.scopes[-1].package = name

    def _parse_version(self) -> VersionAssign:
        c = self._peek_char()
        if c == '"':
            literal, self.pos = self._scan_string()
        else:
            m = scan_number(self.buffer.text, self.pos)
            if m is None:
                raise self._error("Expected a version number")
            literal = m.group(0)
            self.pos = m.end()
        return VersionAssign(package=self.current_package(), literal=literal)

    def _parse_use(self) -> None:
        self._peek_char()
        start = self.pos
        name = self._expect_word("a syntax feature name")
        feature = self.features.get(name)
        if feature is None:
            raise self._error(f"Unknown syntax feature: {name}", start)

        args: list[Any] = []
        if self._peek_char() not in (";", "}", ""):
            args.append(self.parse_data())
            while self._match_char(","):
                args.append(self.parse_data())

        options: Any = None
        if len(args) == 1:
            options = args[0]
        elif args:
            options = args
        logger.debug("use %s in %s", name, self.current_package())
        feature.install(self.current_package(), options, host=self)

    def _parse_begin(self) -> None:
        self._peek_char()
        start = self.pos
        feature_name = self._expect_word("a syntax feature name")
        self._expect_char(".")
        hook_name = self._expect_word("a compile hook name")
        feature = self.features.get(feature_name)
        if feature is None:
            raise self._error(f"Unknown syntax feature: {feature_name}", start)
        hook = feature.compile_hooks().get(hook_name)
        if hook is None:
            raise self._error(f"Syntax feature {feature_name} has no hook {hook_name}", start)
        hook(self)

    def _parse_sub(self) -> None:
        name = self._expect_word("a subroutine name")
        package = self.current_package()
        body = self.parse_block()
        self.namespaces.install_function(
            package, name, Subroutine(name=name, package=package, body=body)
        )

    # -- Expressions --

    def parse_expr(self) -> Node:
        c = self._peek_char()
        if not c:
            raise self._error("Expected an expression, got end of input")

        if c == '"':
            value, self.pos = self._scan_string()
            return Literal(value=value)

        next_char = self.buffer.text[self.pos + 1 : self.pos + 2]
        if c.isdigit() or (c == "-" and next_char.isdigit()):
            return Literal(value=self._scan_number())

        if c == "(":
            self.pos += 1
            return self._parse_parenthesized()

        if c == "[":
            self.pos += 1
            return ListExpr(items=self._parse_expr_list("]"))

        start = self.pos
        word = self._peek_word()
        if word is None:
            raise self._error(f"Unexpected {c!r}")

        if word == "do":
            self.pos += len(word)
            return DoBlock(body=self.parse_block())
        if word in STATEMENT_WORDS:
            raise self._error(f"'{word}' cannot be used as an expression")
        if word in CONSTANT_WORDS:
            self.pos += len(word)
            return Literal(value=CONSTANT_WORDS[word])
        if word == "__PACKAGE__":
            self.pos += len(word)
            return Literal(value=self.current_package())

        if "::" not in word:
            hook = self.namespaces.lookup_keyword(self.current_package(), word)
            if hook is not None:
                logger.debug("Keyword %s at offset %d", word, start)
                hook(KeywordSite(host=self, offset=start, declarator=word))
        self.pos = start + len(word)
        return self._parse_word(word)

    def _parse_word(self, word: str) -> Node:
        package, name = split_qualified(word, self.current_package())
        target = self.namespaces.lookup_function(package, name)
        if self._match_char("("):
            args = self._parse_expr_list(")")
            return Call(name=word, package=self.current_package(), args=args, target=target)
        if target is not None:
            return Call(name=word, package=self.current_package(), target=target)
        return Literal(value=word)

    def _parse_parenthesized(self) -> Node:
        if self._match_char(")"):
            return Literal(value=None)
        first = self.parse_expr()
        if self._match_char(")"):
            return first
        self._expect_char(",")
        return ListExpr(items=[first, *self._parse_expr_list(")")])

    def _parse_expr_list(self, closing: str) -> list[Node]:
        items: list[Node] = []
        while not self._match_char(closing):
            items.append(self.parse_expr())
            if not self._match_char(","):
                self._expect_char(closing)
                break
        return items

    def parse_block(self) -> Block:
        self._expect_char("{")
        self.scopes.append(Scope(self.current_package()))
        statements = self.parse_statements(closing="}")
        self._expect_char("}")
        self._close_scope()
        return Block(statements=statements)

    def _close_scope(self) -> None:
        scope = self.scopes.pop()
        for callback in scope.end_hooks:
            callback(self)

    # -- Data literals (use arguments) --

    def parse_data(self) -> Any:
        c = self._peek_char()
        if c == '"':
            value, self.pos = self._scan_string()
            return value
        if c.isdigit() or c == "-":
            return self._scan_number()
        if c == "[":
            self.pos += 1
            return self._parse_data_items("]")
        if c == "{":
            self.pos += 1
            return self._parse_data_mapping()
        word = self._peek_word()
        if word is None:
            got = repr(c) if c else "end of input"
            raise self._error(f"Expected a literal value, got {got}")
        self.pos += len(word)
        return CONSTANT_WORDS.get(word, word)

    def _parse_data_items(self, closing: str) -> list[Any]:
        items: list[Any] = []
        while not self._match_char(closing):
            items.append(self.parse_data())
            if not self._match_char(","):
                self._expect_char(closing)
                break
        return items

    def _parse_data_mapping(self) -> dict[str, Any]:
        mapping: dict[str, Any] = {}
        while not self._match_char("}"):
            key_offset = self.pos
            key = self.parse_data()
            if not isinstance(key, str):
                raise self._error("Mapping keys must be strings", key_offset)
            self._peek_char()
            if not self.buffer.text.startswith("=>", self.pos):
                raise self._error("Expected '=>' after mapping key")
            self.pos += 2
            mapping[key] = self.parse_data()
            if not self._match_char(","):
                self._expect_char("}")
                break
        return mapping

    # -- Scanning --

    def _scan_string(self) -> tuple[str, int]:
        try:
            return scan_string(self.buffer.text, self.pos)
        except ScanError as e:
            raise self._error(str(e), e.offset) from e

    def _scan_number(self) -> int | float | str:
        negative = self._match_char("-")
        m = scan_number(self.buffer.text, self.pos)
        if m is None:
            raise self._error("Expected a number")
        self.pos = m.end()
        value = number_value(m.group(0))
        if negative:
            if isinstance(value, str):
                raise self._error(f"Cannot negate version literal {value}")
            return -value
        return value
