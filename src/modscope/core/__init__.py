"""Core modscope functionality: options, rewriting, finalization and installation."""

from .cursor import DeclarationCursor
from .driver import DeclarationContext, RewriteDriver, Stage
from .errors import (
    ConfigurationError,
    DeclarationSyntaxError,
    ErrorContext,
    HostRuntimeError,
    ModscopeError,
    ParseError,
)
from .feature import (
    ModuleFeature,
    default_keyword_name,
    default_preamble,
    install,
    install_multiple,
    runtime_trampoline,
)
from .finalizer import ScopeEndFinalizer
from .interfaces import HostProtocol, KeywordSite
from .options import InnerFeature, KeywordOptions, normalize_options
from .version import match_version

__all__ = [
    "ModscopeError",
    "ConfigurationError",
    "DeclarationSyntaxError",
    "ParseError",
    "HostRuntimeError",
    "ErrorContext",
    "DeclarationCursor",
    "DeclarationContext",
    "RewriteDriver",
    "Stage",
    "ModuleFeature",
    "ScopeEndFinalizer",
    "HostProtocol",
    "KeywordSite",
    "InnerFeature",
    "KeywordOptions",
    "normalize_options",
    "match_version",
    "default_keyword_name",
    "default_preamble",
    "install",
    "install_multiple",
    "runtime_trampoline",
]
