"""
Option records for installed keywords.

Raw options arrive as a mapping, as a list (shorthand for ``inner``) or not
at all. They are normalized into an immutable ``KeywordOptions`` record by a
fixed pipeline of validators before anything is installed.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field

from ..host.literal import LiteralEncodeError, dump_literal
from .errors import ConfigurationError

if TYPE_CHECKING:
    from .feature import ModuleFeature

KEYWORD_RE = re.compile(r"\A[a-z_][a-z0-9_]*\Z", re.IGNORECASE)

_KNOWN_KEYS = frozenset({"as", "alias_name", "inner", "preamble"})


class InnerFeature(BaseModel):
    """A syntax feature to make available inside a declared block."""

    name: str = Field(description="Registered feature name")
    options: Any = Field(default=None, description="Raw options for the feature")

    model_config = ConfigDict(frozen=True)

    def to_literal(self) -> Any:
        if self.options is None:
            return self.name
        return [self.name, self.options]


class KeywordOptions(BaseModel):
    """Normalized options for one installed keyword."""

    alias_name: str = Field(alias="as", description="Installed keyword spelling")
    inner: tuple[InnerFeature, ...] = Field(default=())
    preamble: tuple[str, ...] = Field(default=())

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    def to_literal(self) -> dict[str, Any]:
        """Raw mapping form that normalizes back to an equal record."""
        return {
            "as": self.alias_name,
            "inner": [entry.to_literal() for entry in self.inner],
            "preamble": list(self.preamble),
        }


def coerce_options(raw: Any, feature_label: str) -> dict[str, Any]:
    """Turn raw options into a plain dict without validating fields."""
    if raw is None:
        return {}
    if isinstance(raw, Mapping):
        options = dict(raw)
        if "alias_name" in options:
            if "as" in options:
                raise ConfigurationError(
                    f"Options for {feature_label} give both as and alias_name",
                    field="as",
                )
            options["as"] = options.pop("alias_name")
        return options
    if isinstance(raw, (list, tuple)):
        return {"inner": list(raw)}
    raise ConfigurationError(
        f"Options for {feature_label} expected to be a mapping or a list",
        field="options",
    )


def _normalise_inner_option(options: dict[str, Any], feature: ModuleFeature) -> None:
    inner = options.get("inner")
    if inner is None:
        inner = []
    if not isinstance(inner, (list, tuple)):
        raise ConfigurationError("The inner option only accepts lists", field="inner")
    entries = tuple(_inner_entry(entry) for entry in inner)
    for entry in entries:
        _check_inner_entry(entry, feature)
    options["inner"] = entries


def _inner_entry(entry: Any) -> InnerFeature:
    if isinstance(entry, InnerFeature):
        return entry
    if isinstance(entry, str):
        return InnerFeature(name=entry)
    if (
        isinstance(entry, (list, tuple))
        and len(entry) == 2
        and isinstance(entry[0], str)
    ):
        return InnerFeature(name=entry[0], options=entry[1])
    raise ConfigurationError(
        f"Inner features must be names or [name, options] pairs, not: {entry!r}",
        field="inner",
    )


def _check_inner_entry(entry: InnerFeature, feature: ModuleFeature) -> None:
    """Inner options must render as host literals and, for this feature, be valid."""
    try:
        dump_literal(entry.to_literal())
    except LiteralEncodeError as e:
        raise ConfigurationError(
            f"Options for inner feature {entry.name} cannot be written out: {e}",
            field="inner",
        ) from e
    if entry.name == feature.feature_name and entry.options is not None:
        try:
            normalize_options(entry.options, feature)
        except ConfigurationError as e:
            raise ConfigurationError(
                f"Invalid options for inner feature {entry.name}: {e.message}",
                field="inner",
            ) from e


def _normalise_as_option(options: dict[str, Any], feature: ModuleFeature) -> None:
    alias = options.get("as")
    if alias is None:
        alias = feature.default_keyword_name()
    if not isinstance(alias, str):
        raise ConfigurationError("The as option only accepts strings", field="as")
    if not KEYWORD_RE.match(alias):
        raise ConfigurationError(
            f"The string '{alias}' cannot be used as keyword for "
            f"{type(feature).__name__} syntax",
            field="as",
        )
    options["as"] = alias


def _normalise_preamble_option(options: dict[str, Any], feature: ModuleFeature) -> None:
    preamble = options.get("preamble")
    if preamble is None:
        preamble = []
    if not isinstance(preamble, (list, tuple)) or not all(
        isinstance(statement, str) for statement in preamble
    ):
        raise ConfigurationError(
            "The preamble option only accepts lists of strings", field="preamble"
        )
    options["preamble"] = tuple(preamble)


# Run in this order; later validators may rely on earlier defaults.
OPTION_VALIDATORS: tuple[Callable[[dict[str, Any], ModuleFeature], None], ...] = (
    _normalise_inner_option,
    _normalise_as_option,
    _normalise_preamble_option,
)


def normalize_options(raw: Any, feature: ModuleFeature) -> KeywordOptions:
    """
    Validate raw options and build the option record.

    Args:
        raw: A mapping, a list of inner features, an existing record, or None
        feature: The feature being installed (supplies the default keyword)

    Returns:
        Fully populated KeywordOptions

    Raises:
        ConfigurationError: If any option is missing its expected shape
    """
    if isinstance(raw, KeywordOptions):
        return raw
    options = coerce_options(raw, type(feature).__name__)
    unknown = sorted(set(options) - _KNOWN_KEYS)
    if unknown:
        raise ConfigurationError(
            f"Unknown options for {type(feature).__name__}: {', '.join(unknown)}",
            field="options",
        )
    for validate in OPTION_VALIDATORS:
        validate(options, feature)
    return KeywordOptions(
        alias_name=options["as"],
        inner=options["inner"],
        preamble=options["preamble"],
    )


def merge_options(shared: Any, delta: Any, feature_label: str) -> dict[str, Any]:
    """
    Combine shared batch options with one entry's own options.

    Entry values win, except ``inner`` and ``preamble`` which are
    concatenated with the shared values first.
    """
    base = coerce_options(shared, feature_label)
    own = coerce_options(delta, feature_label)
    merged = {**base, **own}
    for key in ("inner", "preamble"):
        if key in base and key in own:
            first, second = base[key], own[key]
            if isinstance(first, (list, tuple)) and isinstance(second, (list, tuple)):
                merged[key] = [*first, *second]
    return merged
