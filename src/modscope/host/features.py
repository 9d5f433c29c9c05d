"""
Registry of syntax features a host program can ``use``.

A feature is any object with a ``feature_name`` attribute, an
``install(target, options, *, host)`` method and a ``compile_hooks()``
method returning the hooks reachable through ``begin FEATURE.HOOK``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from ..core.errors import ConfigurationError

if TYPE_CHECKING:
    from ..core.interfaces import HostProtocol

logger = logging.getLogger(__name__)


class SyntaxDispatcher:
    """
    The ``syntax`` feature: installs other features by name.

        use syntax "module", {"as" => "namespace"}, "other";

    Each name may be followed by a mapping or list of options for it.
    """

    feature_name = "syntax"

    def __init__(self, registry: FeatureRegistry):
        self.registry = registry

    def install(self, target: str, options: Any = None, *, host: HostProtocol) -> bool:
        for name, feature_options in self.pairs(options):
            feature = self.registry.require(name)
            feature.install(target, feature_options, host=host)
        return True

    def pairs(self, args: Any) -> list[tuple[str, Any]]:
        if args is None:
            return []
        if isinstance(args, str):
            args = [args]
        if not isinstance(args, (list, tuple)):
            raise ConfigurationError(
                "Options for syntax expected to be a list of feature names"
            )
        pairs: list[tuple[str, Any]] = []
        for item in args:
            if isinstance(item, str):
                pairs.append((item, None))
            elif pairs and pairs[-1][1] is None:
                pairs[-1] = (pairs[-1][0], item)
            else:
                raise ConfigurationError(f"Expected a feature name, not: {item!r}")
        return pairs

    def compile_hooks(self) -> dict[str, Callable[..., None]]:
        return {}


class FeatureRegistry:
    """Feature objects by name."""

    def __init__(self) -> None:
        self._features: dict[str, Any] = {}
        self.register(SyntaxDispatcher(self))

    def __contains__(self, name: str) -> bool:
        return name in self._features

    def register(self, feature: Any) -> None:
        self._features[feature.feature_name] = feature
        logger.debug("Registered syntax feature %s", feature.feature_name)

    def provide(self, feature: Any) -> None:
        """Register ``feature`` unless the same kind of feature already is."""
        registered = self._features.get(feature.feature_name)
        if registered is None:
            self.register(feature)
        elif type(registered) is not type(feature):
            raise ConfigurationError(
                f"Syntax feature name '{feature.feature_name}' is already taken by "
                f"{type(registered).__name__}"
            )

    def get(self, name: str) -> Any | None:
        return self._features.get(name)

    def require(self, name: str) -> Any:
        feature = self._features.get(name)
        if feature is None:
            raise ConfigurationError(f"Unknown syntax feature: {name}")
        return feature

    def names(self) -> list[str]:
        return sorted(self._features)


def default_registry() -> FeatureRegistry:
    """A registry holding ``syntax`` and the ``module`` feature."""
    from ..core.feature import ModuleFeature

    registry = FeatureRegistry()
    registry.register(ModuleFeature())
    return registry
