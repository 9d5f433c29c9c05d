"""
Declaration cursor over the host's live source buffer.

The cursor keeps its own offset into the buffer the host parser is still
reading. Injected text is always inserted and stepped over in a single
call, so already consumed text is never read twice and injected text never
shifts the cursor onto genuine source.
"""

from __future__ import annotations

import re

from .interfaces import HostProtocol, KeywordSite


class DeclarationCursor:
    """Offset-tracking editor for one declaration site."""

    def __init__(self, host: HostProtocol, offset: int, declarator: str = ""):
        self.host = host
        self.offset = offset
        self.declarator = declarator

    @classmethod
    def at_site(cls, site: KeywordSite) -> DeclarationCursor:
        """Cursor at the start of a keyword the host just dispatched."""
        return cls(site.host, site.offset, site.declarator)

    @classmethod
    def at_parser(cls, host: HostProtocol) -> DeclarationCursor:
        """Cursor at the host parser's current read position."""
        return cls(host, host.pos)

    def peek_remaining(self) -> str:
        """Buffer content from the offset onward."""
        return self.host.buffer.text[self.offset :]

    def rest_of_line(self) -> str:
        """Remaining text up to the end of the current line."""
        return self.peek_remaining().split("\n", 1)[0]

    def skip_insignificant(self) -> None:
        """Move past whitespace and comments, using the host's rules."""
        self.offset = self.host.skip_insignificant(self.offset)

    def skip_declarator(self) -> None:
        """Move past the keyword itself."""
        self.offset += len(self.declarator)

    def looking_at(self, pattern: re.Pattern[str]) -> bool:
        """Skip insignificant input, then test ``pattern`` at the offset."""
        self.skip_insignificant()
        return pattern.match(self.host.buffer.text, self.offset) is not None

    def inject(self, text: str, skip: int = 0) -> None:
        """Insert ``text`` ``skip`` characters past the offset and step over it."""
        self._advance(self._splice(skip, text))

    def strip(self, length: int) -> str:
        """Remove ``length`` characters at the offset and return them."""
        buffer = self.host.buffer
        removed = buffer.text[self.offset : self.offset + length]
        buffer.delete(self.offset, length)
        return removed

    def _splice(self, relative_offset: int, text: str) -> int:
        self.host.buffer.insert(self.offset + relative_offset, text)
        return relative_offset + len(text)

    def _advance(self, count: int) -> None:
        self.offset += count
