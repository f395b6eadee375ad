"""Backend runtime package."""

from weblookup.backends.base import (
    EXIT_FAILURE,
    EXIT_OK,
    EXIT_PERMISSION_DENIED,
    BackendContext,
    CompletionRegistry,
    Invocation,
    InvocationMode,
    LookupBackend,
)
from weblookup.backends.hook_types import (
    POST_LAUNCH,
    PRE_LAUNCH,
    QUERY_RESOLVED,
    PostLaunchContext,
    PreLaunchContext,
)
from weblookup.backends.hooks import HookRegistry
from weblookup.backends.manager import BackendManager
from weblookup.backends.options import OptionSpec, ParsedOptions, parse_options

__all__ = [
    "EXIT_FAILURE",
    "EXIT_OK",
    "EXIT_PERMISSION_DENIED",
    "BackendContext",
    "BackendManager",
    "CompletionRegistry",
    "HookRegistry",
    "Invocation",
    "InvocationMode",
    "LookupBackend",
    "OptionSpec",
    "ParsedOptions",
    "POST_LAUNCH",
    "PRE_LAUNCH",
    "QUERY_RESOLVED",
    "PostLaunchContext",
    "PreLaunchContext",
    "parse_options",
]
