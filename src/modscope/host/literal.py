"""
Render Python values as host source literals.

The output reads back through the host parser's literal grammar to an
equal value. Tuples come back as lists.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\t": "\\t",
}


class LiteralEncodeError(TypeError):
    """Raised for values the host has no literal syntax for."""


def dump_string(value: str) -> str:
    return '"' + "".join(_ESCAPES.get(c, c) for c in value) + '"'


def dump_literal(value: Any) -> str:
    """Render ``value`` as host literal source text."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return repr(value)
    if isinstance(value, float):
        text = repr(value)
        if not text.lstrip("-").replace(".", "").isdigit():
            raise LiteralEncodeError(f"No literal syntax for float {text}")
        return text
    if isinstance(value, str):
        return dump_string(value)
    if isinstance(value, Mapping):
        pairs = []
        for key, item in value.items():
            if not isinstance(key, str):
                raise LiteralEncodeError(f"Mapping keys must be strings, not {key!r}")
            pairs.append(f"{dump_string(key)} => {dump_literal(item)}")
        return "{" + ", ".join(pairs) + "}"
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(dump_literal(item) for item in value) + "]"
    raise LiteralEncodeError(f"Cannot render {type(value).__name__} as a literal")
