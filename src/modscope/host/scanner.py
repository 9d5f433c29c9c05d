"""
Character-level scanning primitives for host source.

The host parser reads straight from a mutable buffer, so there is no token
list: every primitive takes the current text and an offset and returns the
offset after whatever it read.
"""

from __future__ import annotations

import re

WORD_RE = re.compile(r"[A-Za-z_]\w*(?:::[A-Za-z_]\w*)*")
NUMBER_RE = re.compile(r"[0-9][0-9_]*(?:\.[0-9][0-9_]*)*")

_UNESCAPES = {"n": "\n", "t": "\t"}


class ScanError(Exception):
    """Malformed input at a known offset."""

    def __init__(self, message: str, offset: int) -> None:
        super().__init__(message)
        self.offset = offset


def skip_insignificant(text: str, offset: int) -> int:
    """Skip whitespace and ``#`` comments."""
    n = len(text)
    while offset < n:
        c = text[offset]
        if c in " \t\r\n":
            offset += 1
        elif c == "#":
            end = text.find("\n", offset)
            offset = n if end == -1 else end + 1
        else:
            break
    return offset


def scan_word(text: str, offset: int) -> re.Match[str] | None:
    return WORD_RE.match(text, offset)


def scan_number(text: str, offset: int) -> re.Match[str] | None:
    return NUMBER_RE.match(text, offset)


def number_value(literal: str) -> int | float | str:
    """Numeric value of a number literal; dotted versions stay strings."""
    digits = literal.replace("_", "")
    dots = digits.count(".")
    if dots == 0:
        return int(digits)
    if dots == 1:
        return float(digits)
    return literal


def scan_string(text: str, offset: int) -> tuple[str, int]:
    """Read a double-quoted string starting at ``offset``."""
    i = offset + 1
    n = len(text)
    chars: list[str] = []

    while i < n:
        c = text[i]
        if c == "\\":
            if i + 1 < n:
                escaped = text[i + 1]
                chars.append(_UNESCAPES.get(escaped, escaped))
                i += 2
                continue
            raise ScanError("Unterminated escape sequence", i)
        if c == '"':
            return "".join(chars), i + 1
        chars.append(c)
        i += 1

    raise ScanError("Unterminated string literal", offset)
