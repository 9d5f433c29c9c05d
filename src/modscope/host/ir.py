"""
Program tree produced by the host parser.

Only run-time constructs appear here. Package declarations, ``use``,
``begin`` and ``sub`` take effect while parsing and leave no node behind.
"""

from __future__ import annotations

from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field


class Literal(BaseModel):
    """A constant: string, number, boolean, bareword or null."""

    value: Any = Field(description="The literal value")

    model_config = ConfigDict(frozen=True)


class ListExpr(BaseModel):
    """``[a, b]`` or ``(a, b)``."""

    items: list[Node] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)


class Call(BaseModel):
    """
    A function call.

    ``target`` is the function the name resolved to while parsing, if any.
    Unresolved calls are looked up in ``package`` when they run.
    """

    name: str
    package: str
    args: list[Node] = Field(default_factory=list)
    target: Any = None

    model_config = ConfigDict(frozen=True)


class VersionAssign(BaseModel):
    """``version 1.23`` inside ``package``."""

    package: str
    literal: str

    model_config = ConfigDict(frozen=True)


class Block(BaseModel):
    """A sequence of statements; evaluates to the last one."""

    statements: list[Node] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)


class DoBlock(BaseModel):
    """``do { ... }``"""

    body: Block

    model_config = ConfigDict(frozen=True)


Node = Union[Literal, ListExpr, Call, VersionAssign, Block, DoBlock]

for _model in (ListExpr, Call, Block, DoBlock):
    _model.model_rebuild()


class Subroutine(BaseModel):
    """A ``sub NAME { ... }`` definition installed into a package."""

    name: str
    package: str
    body: Block

    model_config = ConfigDict(frozen=True)

    @property
    def qualified_name(self) -> str:
        return f"{self.package}::{self.name}"
