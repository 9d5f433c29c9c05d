"""
Version literal grammar.

Recognizes dotted numeric versions such as ``7``, ``1.23`` or ``2_0.0``.
Underscores may only appear between digits. A version never starts with a
non-digit, so it cannot be confused with a package name.
"""

from __future__ import annotations

import re
from typing import NamedTuple

VERSION_RE = re.compile(
    r"""
    [0-9]               # 2
    (?:[0-9_]*[0-9])?   # 23_17
    (?:                 # 23_17.9
        \.
        [0-9]
        (?:[0-9_]*[0-9])?   # 23_17.94_77
    )*
    """,
    re.VERBOSE,
)


class VersionMatch(NamedTuple):
    """A matched version literal and the text following it."""

    literal: str
    remainder: str


def match_version(text: str) -> VersionMatch | None:
    """Match the longest version literal at the start of ``text``.

    Returns None when ``text`` does not start with a digit.
    """
    m = VERSION_RE.match(text)
    if m is None:
        return None
    return VersionMatch(m.group(0), text[m.end() :])


def is_version(text: str) -> bool:
    """True if the whole of ``text`` is a version literal."""
    return VERSION_RE.fullmatch(text) is not None
