"""
One-shot rewrite run when a declared block closes.
"""

from __future__ import annotations

import logging

from .cursor import DeclarationCursor
from .interfaces import HostProtocol

logger = logging.getLogger(__name__)


class ScopeEndFinalizer:
    """
    Closes the expression a declaration opened.

    Registered on the innermost open scope by ``arm``. When that scope's
    closing brace has been read, it drops ``drop`` characters right after
    the brace and inserts ``closing`` there for the parser to read next.
    """

    def __init__(self, closing: str = ")", drop: int = 0):
        self.closing = closing
        self.drop = drop
        self.armed = False
        self.fired = False

    def arm(self, host: HostProtocol) -> None:
        if self.armed:
            return
        self.armed = True
        host.on_scope_end(self)

    def __call__(self, host: HostProtocol) -> None:
        if not self.armed or self.fired:
            return
        self.fired = True
        cursor = DeclarationCursor.at_parser(host)
        if self.drop:
            cursor.strip(self.drop)
        # host.pos is left alone so the parser reads the closing token next.
        cursor.inject(self.closing)
        logger.debug("Closed declaration at offset %d", host.pos)
