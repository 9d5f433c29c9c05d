"""
Error types for modscope keyword installation, rewriting and host parsing.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional


class ModscopeError(Exception):
    """Base exception for all modscope errors."""

    def __init__(self, message: str, context: Optional["ErrorContext"] = None):
        self.message = message
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with context if available."""
        if self.context:
            return f"{self.context.format()}\n{self.message}"
        return self.message


class ConfigurationError(ModscopeError):
    """
    Raised when the options given to a keyword installation are invalid.

    Always raised before any keyword, function or scope hook is installed,
    so the caller can fix the options and retry.

    Attributes:
        field: Name of the offending option ("options", "as", "inner" or
            "preamble")
    """

    def __init__(self, message: str, field: str = "options"):
        self.field = field
        super().__init__(message)


class DeclarationSyntaxError(ModscopeError):
    """
    Raised when a declaration is not followed by a block.

    The buffer may already be partially rewritten, so this error is fatal
    to the enclosing parse.

    Attributes:
        stage: Last successfully parsed part ("keyword", "namespace" or
            "version")
    """

    def __init__(
        self,
        message: str,
        stage: str,
        context: Optional["ErrorContext"] = None,
    ):
        self.stage = stage
        super().__init__(message, context)


class ParseError(ModscopeError):
    """
    Raised when host source cannot be parsed.

    Examples:
    - Unexpected characters or tokens
    - Unterminated strings or blocks
    - Unknown syntax features in a use statement
    """

    pass


class HostRuntimeError(ModscopeError):
    """
    Raised when a compiled host program fails while running.

    Examples:
    - Calling an undefined subroutine
    - Passing arguments to a subroutine
    """

    pass


@dataclass
class ErrorContext:
    """
    Context information for an error, including source location.

    Attributes:
        file: Path to the source file where error occurred
        line: Line number (1-indexed)
        column: Column number (1-indexed)
        snippet: Optional line of source showing the error location
    """

    file: Path
    line: int
    column: int
    snippet: str | None = None

    def format(self) -> str:
        """
        Format error context as a human-readable string.

        Returns:
            Formatted string like: "script.msc:10:5"
        """
        location = f"{self.file}:{self.line}:{self.column}"
        if self.snippet is not None:
            return f"{location}\n{self._format_snippet()}"
        return location

    def _format_snippet(self) -> str:
        """Format the snippet line with its number and an error marker."""
        prefix = f"{self.line:4d} | "
        marker = " " * (len(prefix) + self.column - 1) + "^^^"
        return f"{prefix}{self.snippet}\n{marker}"


def make_parse_error(
    message: str,
    file: Path,
    line: int,
    column: int,
    snippet: str | None = None,
) -> ParseError:
    """
    Helper to create a ParseError with context.

    Args:
        message: Error description
        file: Source file path
        line: Line number (1-indexed)
        column: Column number (1-indexed)
        snippet: Optional code snippet

    Returns:
        ParseError with context attached
    """
    context = ErrorContext(file=file, line=line, column=column, snippet=snippet)
    return ParseError(message, context)
