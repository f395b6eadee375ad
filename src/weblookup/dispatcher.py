"""Route requests to registered backends in one invocation mode."""

from __future__ import annotations

import io
import logging
import sys
from typing import Dict, Iterator, List, Optional, Sequence, TextIO, Tuple

from weblookup.backends.base import (
    DEFAULT_REFINEMENT,
    EXIT_FAILURE,
    CompletionRegistry,
    Invocation,
    InvocationMode,
    LauncherLike,
    LookupBackend,
)
from weblookup.backends.errors import BackendRegistrationError
from weblookup.backends.hooks import HookRegistry
from weblookup.config.styles import StyleStore

logger = logging.getLogger(__name__)


class Dispatcher:
    """Registry of backends keyed by name, plus the mode dispatch."""

    def __init__(
        self,
        styles: StyleStore,
        launcher: LauncherLike,
        hooks: Optional[HookRegistry] = None,
        *,
        stdout: Optional[TextIO] = None,
        stderr: Optional[TextIO] = None,
    ) -> None:
        self.styles = styles
        self.launcher = launcher
        self.hooks = hooks or HookRegistry()
        self.stdout = stdout
        self.stderr = stderr
        self._backends: Dict[str, LookupBackend] = {}
        self._in_flight: List[Invocation] = []

    def register(self, backend: LookupBackend) -> None:
        name = str(backend.name or "").strip()
        if not name:
            raise BackendRegistrationError(
                f"{type(backend).__name__} does not declare a name"
            )
        if name in self._backends:
            raise BackendRegistrationError(f"backend already registered: {name}")
        self._backends[name] = backend

    def names(self) -> List[str]:
        return sorted(self._backends)

    def get(self, name: str) -> Optional[LookupBackend]:
        return self._backends.get(name)

    def is_dispatching(self, invocation: Invocation) -> bool:
        """Return True while ``invocation`` is being dispatched by this instance."""
        return any(active is invocation for active in self._in_flight)

    def dispatch(
        self,
        name: str,
        mode: InvocationMode = InvocationMode.EXECUTE,
        argv: Sequence[str] = (),
        *,
        refinement: Optional[str] = None,
        completions: Optional[CompletionRegistry] = None,
        stdout: Optional[TextIO] = None,
    ) -> int:
        """Invoke backend ``name`` in ``mode`` and return its status code."""
        stderr = self.stderr or sys.stderr
        backend = self._backends.get(name)
        if backend is None:
            stderr.write(f"lookup: unknown backend: {name}\n")
            logger.info("unknown backend requested name=%s", name)
            return EXIT_FAILURE

        invocation = Invocation(
            backend=name,
            mode=mode,
            argv=tuple(argv),
            styles=self.styles,
            launcher=self.launcher,
            hooks=self.hooks,
            guard=self,
            refinement=refinement or DEFAULT_REFINEMENT,
            completions=completions,
            stdout=stdout or self.stdout or sys.stdout,
            stderr=stderr,
        )
        logger.debug(
            "dispatching backend=%s mode=%s argc=%d", name, mode.value, len(argv)
        )
        self._in_flight.append(invocation)
        try:
            status = backend(invocation)
        finally:
            self._in_flight.remove(invocation)
        logger.debug("backend=%s mode=%s status=%s", name, mode.value, status)
        return status

    def describe(self, name: str) -> str:
        """Return the one-line description of backend ``name``."""
        buffer = io.StringIO()
        self.dispatch(name, InvocationMode.DESCRIBE, stdout=buffer)
        return buffer.getvalue()

    def describe_all(self) -> Iterator[Tuple[str, str]]:
        for name in self.names():
            yield name, self.describe(name)

    def completions_for(self, name: str) -> CompletionRegistry:
        """Run complete mode for ``name`` and return its generators."""
        registry = CompletionRegistry()
        self.dispatch(name, InvocationMode.COMPLETE, completions=registry)
        return registry
