"""
Optional name and version tokens following a declaration keyword.

Both strippers remove their token from the buffer only when it is present.
"""

from __future__ import annotations

import re

from .cursor import DeclarationCursor
from .version import match_version

NAME_RE = re.compile(r"[A-Za-z_]\w*(?:::[A-Za-z_]\w*)*")


def strip_name(cursor: DeclarationCursor) -> str | None:
    """Remove and return a ``::`` qualified name at the cursor, if any."""
    cursor.skip_insignificant()
    rest = cursor.peek_remaining()
    if not rest or rest[0].isdigit():
        return None
    m = NAME_RE.match(rest)
    if m is None:
        return None
    return cursor.strip(m.end())


def strip_version(cursor: DeclarationCursor) -> str | None:
    """Remove and return a version literal at the cursor, if any."""
    cursor.skip_insignificant()
    matched = match_version(cursor.peek_remaining())
    if matched is None:
        return None
    return cursor.strip(len(matched.literal))
