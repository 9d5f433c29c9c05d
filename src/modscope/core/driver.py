"""
Rewrite driver for declaration sites.

Turns

    module Foo::Bar 1.23 { ... }

into

    module ("Foo::Bar", do {begin module.scope_end; package Foo::Bar;
        version 1.23; use module {...}; (); ... }

while the host parser is still reading the buffer. The scope-end finalizer
later appends the closing ``)``.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

from ..host.literal import dump_literal
from .cursor import DeclarationCursor
from .errors import DeclarationSyntaxError
from .interfaces import KeywordSite
from .options import KeywordOptions
from .strippers import strip_name, strip_version

if TYPE_CHECKING:
    from .feature import ModuleFeature

logger = logging.getLogger(__name__)

BLOCK_OPEN_RE = re.compile(r"\{")


class Stage(StrEnum):
    """How far a declaration got before the block was required."""

    KEYWORD = "keyword"
    NAMESPACE = "namespace"
    VERSION = "version"


@dataclass
class DeclarationContext:
    """State of one declaration site while it is being rewritten."""

    cursor: DeclarationCursor
    resolved_name: str | None = None
    resolved_version: str | None = None
    stage_seen: Stage = Stage.KEYWORD


class RewriteDriver:
    """
    Keyword hook that rewrites one declaration site per call.

    The driver holds only the feature and its option record, so the same
    instance serves every occurrence of the installed keyword.
    """

    def __init__(self, feature: ModuleFeature, options: KeywordOptions):
        self.feature = feature
        self.options = options

    def __call__(self, site: KeywordSite) -> None:
        self.transform(site)

    def transform(self, site: KeywordSite) -> DeclarationContext:
        """
        Rewrite the declaration starting at ``site``.

        Raises:
            DeclarationSyntaxError: If no block follows the declaration
        """
        ctx = DeclarationContext(cursor=DeclarationCursor.at_site(site))
        cursor = ctx.cursor
        cursor.skip_declarator()
        cursor.skip_insignificant()
        cursor.inject("(")

        name = strip_name(cursor)
        if name is not None:
            ctx.stage_seen = Stage.NAMESPACE
        else:
            name = site.host.current_package()
        ctx.resolved_name = name
        cursor.inject(dump_literal(name))
        cursor.inject(", do ")

        ctx.resolved_version = strip_version(cursor)
        if ctx.resolved_version is not None:
            ctx.stage_seen = Stage.VERSION

        preamble = self.feature.render_preamble(name, ctx.resolved_version, self.options)

        if not cursor.looking_at(BLOCK_OPEN_RE):
            raise DeclarationSyntaxError(
                f"Expected a block after {site.declarator} {ctx.stage_seen}, "
                f"not: {cursor.rest_of_line()}",
                stage=ctx.stage_seen,
                context=site.host.error_context(cursor.offset),
            )

        cursor.inject(self.feature.scope_end_trigger(), skip=1)
        cursor.inject(preamble)
        logger.debug(
            "Rewrote %s declaration of %s (version %s)",
            site.declarator,
            name,
            ctx.resolved_version,
        )
        return ctx
