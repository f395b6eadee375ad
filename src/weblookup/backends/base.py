"""Base backend contracts."""

from __future__ import annotations

import logging
import sys
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import (
    TYPE_CHECKING,
    Any,
    Callable,
    Dict,
    List,
    Mapping,
    Optional,
    Protocol,
    TextIO,
    Tuple,
)

from weblookup.backends.options import OptionSpec, ParsedOptions, parse_options
from weblookup.config.styles import StyleStore, build_context

if TYPE_CHECKING:
    from weblookup.backends.hooks import HookRegistry

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_PERMISSION_DENIED = 126
CONTEXT_ROOT = "lookup"
DEFAULT_REFINEMENT = "-default-"

CompletionGenerator = Callable[[], Mapping[str, str]]


class InvocationMode(Enum):
    DESCRIBE = "describe"
    HELP = "help"
    COMPLETE = "complete"
    EXECUTE = "execute"


class LauncherLike(Protocol):
    def open(self, uri: str) -> int: ...


class DispatchGuard(Protocol):
    def is_dispatching(self, invocation: "Invocation") -> bool: ...


class CompletionRegistry:
    """Completion candidate generators keyed by option flag."""

    def __init__(self) -> None:
        self._generators: Dict[str, CompletionGenerator] = {}

    def register(self, flag: str, generator: CompletionGenerator) -> None:
        if flag in self._generators:
            raise ValueError(f"completion generator already registered: {flag}")
        if not callable(generator):
            raise TypeError("generator must be callable")
        self._generators[flag] = generator

    def flags(self) -> List[str]:
        return list(self._generators)

    def described(self, flag: str) -> Dict[str, str]:
        """Return candidate -> description for ``flag`` (empty when unknown)."""
        generator = self._generators.get(flag)
        if generator is None:
            return {}
        return dict(generator())

    def candidates(self, flag: str) -> List[str]:
        return list(self.described(flag))


@dataclass(eq=False)
class Invocation:
    """One request from the dispatcher to a backend.

    ``query`` is the reserved name for the user's lookup text; backends set it
    from their positional arguments and hooks may rewrite it.
    """

    backend: str
    mode: InvocationMode
    argv: Tuple[str, ...]
    styles: StyleStore
    launcher: LauncherLike
    hooks: "HookRegistry"
    guard: Optional[DispatchGuard] = None
    refinement: str = DEFAULT_REFINEMENT
    completions: Optional[CompletionRegistry] = None
    stdout: TextIO = field(default_factory=lambda: sys.stdout)
    stderr: TextIO = field(default_factory=lambda: sys.stderr)
    query: str = ""

    @property
    def context(self) -> str:
        return build_context(CONTEXT_ROOT, self.refinement, self.backend)

    def is_dispatched(self) -> bool:
        return self.guard is not None and self.guard.is_dispatching(self)

    def style(self, key: str, default: Any = None) -> Any:
        """Resolve a style for this invocation's context."""
        value = self.styles.resolve(self.context, key)
        return default if value is None else value

    def write(self, text: str) -> None:
        self.stdout.write(text)

    def error(self, message: str) -> None:
        """Write one diagnostic line to stderr."""
        self.stderr.write(f"{self.backend}: {message}\n")


@dataclass(frozen=True)
class BackendContext:
    """Activation context passed to backend instances."""

    backend_name: str
    config_dir: Path
    config: Mapping[str, Any]
    hook_registry: "HookRegistry"
    logger: logging.Logger


class LookupBackend(ABC):
    """Abstract backend interface.

    Subclasses declare ``name`` and ``options`` and implement ``describe``,
    ``render_help`` and ``execute``. Calling the instance runs the dispatch
    guard and then exactly one mode.
    """

    name: str = ""
    options: Tuple[OptionSpec, ...] = ()

    def activate(self, context: BackendContext) -> None:
        """Hook up runtime behavior such as hook callbacks."""
        return None

    @abstractmethod
    def describe(self) -> str:
        """Return one line describing what this backend looks up."""

    @abstractmethod
    def render_help(self, invocation: Invocation) -> str:
        """Return full usage text."""

    def register_completions(self, registry: CompletionRegistry) -> None:
        """Register candidate generators for options with dynamic values."""
        return None

    @abstractmethod
    def execute(self, invocation: Invocation) -> int:
        """Run the lookup and return a status code."""

    def __call__(self, invocation: Invocation) -> int:
        if not invocation.is_dispatched():
            logger.warning("backend %s called outside the dispatcher", self.name)
            return EXIT_PERMISSION_DENIED

        mode = invocation.mode
        if mode is InvocationMode.DESCRIBE:
            invocation.write(self.describe().rstrip("\n"))
            return EXIT_OK
        if mode is InvocationMode.HELP:
            return self.show_help(invocation)
        if mode is InvocationMode.COMPLETE:
            if invocation.completions is None:
                invocation.completions = CompletionRegistry()
            self.register_completions(invocation.completions)
            return EXIT_OK
        return self.execute(invocation)

    def show_help(self, invocation: Invocation, *, failed: bool = False) -> int:
        """Write usage text; ``failed`` marks help forced by bad input."""
        text = self.render_help(invocation)
        invocation.write(text if text.endswith("\n") else text + "\n")
        return EXIT_FAILURE if failed else EXIT_OK

    def parse(self, invocation: Invocation) -> ParsedOptions:
        return parse_options(self.options, invocation.argv)
