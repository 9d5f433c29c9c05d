"""
Mutable source text shared by the host parser and keyword hooks.
"""

from __future__ import annotations

from pathlib import Path


class SourceBuffer:
    """Source text that may be edited while it is being parsed."""

    def __init__(self, text: str, file: Path | None = None):
        self.text = text
        self.file = file or Path("<string>")

    def __len__(self) -> int:
        return len(self.text)

    def insert(self, offset: int, text: str) -> None:
        self._check(offset)
        self.text = self.text[:offset] + text + self.text[offset:]

    def delete(self, offset: int, length: int) -> None:
        self._check(offset)
        self.text = self.text[:offset] + self.text[offset + length :]

    def location(self, offset: int) -> tuple[int, int]:
        """1-indexed line and column of ``offset``."""
        line = self.text.count("\n", 0, offset) + 1
        line_start = self.text.rfind("\n", 0, offset) + 1
        return line, offset - line_start + 1

    def line_at(self, offset: int) -> str:
        start = self.text.rfind("\n", 0, offset) + 1
        end = self.text.find("\n", offset)
        return self.text[start:] if end == -1 else self.text[start:end]

    def _check(self, offset: int) -> None:
        if not 0 <= offset <= len(self.text):
            raise IndexError(f"Offset {offset} outside buffer of length {len(self.text)}")
