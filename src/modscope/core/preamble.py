"""
Statements injected at the top of a declared block.

The default preamble declares the package, sets its version when one was
given, and propagates the keyword (plus any inner features) into the new
package. Extra ``preamble`` option statements follow, so they already see
the package and version in effect.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..host.literal import dump_literal
from .options import KeywordOptions

STATEMENT_SEPARATOR = "; "
PLACEHOLDER = "()"


@dataclass(frozen=True)
class PreambleArgs:
    """
    Inputs shared by all preamble generators.

    Attributes:
        name: Resolved package name
        version: Version literal, or None when the declaration had none
        options: Option record of the keyword being expanded
        feature_name: Registry name used to re-install the feature
    """

    name: str
    version: str | None
    options: KeywordOptions
    feature_name: str


def package_preamble(args: PreambleArgs) -> list[str]:
    return [f"package {args.name}"]


def version_preamble(args: PreambleArgs) -> list[str]:
    if args.version is None:
        return []
    return [f"version {args.version}"]


def propagation_preamble(args: PreambleArgs) -> list[str]:
    """Re-install this keyword, then the inner features, inside the block."""
    statements = [f"use {args.feature_name} {dump_literal(args.options.to_literal())}"]
    if args.options.inner:
        entries = []
        for entry in args.options.inner:
            entries.append(dump_literal(entry.name))
            if entry.options is not None:
                entries.append(dump_literal(entry.options))
        statements.append(f"use syntax {', '.join(entries)}")
    return statements


def default_preamble(args: PreambleArgs) -> list[str]:
    return [
        *package_preamble(args),
        *version_preamble(args),
        *propagation_preamble(args),
    ]


def render_preamble(statements: list[str]) -> str:
    """Join statements and close with a placeholder expression."""
    return STATEMENT_SEPARATOR.join([*statements, PLACEHOLDER]) + ";"
