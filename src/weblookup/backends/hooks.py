"""Callbacks that backends attach to the lookup pipeline.

A backend registers callbacks while it is activated; the registry is frozen
once the roster is up, so every lookup in a process sees the same set.
Callbacks for one hook run by ascending priority, then owner name, then
registration order. A failing callback is logged and skipped.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterator, List, Tuple

from weblookup.backends.hook_types import SUPPORTED_HOOK_NAMES

logger = logging.getLogger(__name__)
DEFAULT_HOOK_PRIORITY = 100


@dataclass(frozen=True)
class HookCallback:
    """A callback bound to one pipeline hook."""

    hook_name: str
    callback: Callable[..., Any]
    owner: str
    priority: int
    sequence: int

    @property
    def order(self) -> Tuple[int, str, int]:
        return self.priority, self.owner, self.sequence

    def describe(self) -> str:
        module = getattr(self.callback, "__module__", "")
        name = getattr(self.callback, "__qualname__", repr(self.callback))
        return f"{module}.{name}" if module else str(name)


class HookRegistry:
    """Ordered, freezable set of pipeline callbacks."""

    def __init__(self) -> None:
        self._by_hook: Dict[str, List[HookCallback]] = {}
        self._lock = threading.RLock()
        self._sequence = 0
        self._frozen = False

    def freeze(self) -> None:
        with self._lock:
            self._frozen = True

    @property
    def is_frozen(self) -> bool:
        with self._lock:
            return self._frozen

    def register(
        self,
        hook_name: str,
        callback: Callable[..., Any],
        *,
        owner: str,
        priority: int = DEFAULT_HOOK_PRIORITY,
    ) -> None:
        """Attach ``callback`` to ``hook_name`` on behalf of backend ``owner``."""
        hook_name = str(hook_name or "").strip()
        if hook_name not in SUPPORTED_HOOK_NAMES:
            raise ValueError(f"Unknown hook name: {hook_name}")
        if not callable(callback):
            raise TypeError("callback must be callable")

        with self._lock:
            if self._frozen:
                raise RuntimeError("hook registry is frozen")
            self._sequence += 1
            entry = HookCallback(
                hook_name=hook_name,
                callback=callback,
                owner=str(owner or "").strip() or "unknown",
                priority=int(priority),
                sequence=self._sequence,
            )
            callbacks = self._by_hook.setdefault(hook_name, [])
            callbacks.append(entry)
            callbacks.sort(key=lambda item: item.order)
            logger.debug(
                "hook registered hook=%s owner=%s priority=%d",
                hook_name,
                entry.owner,
                entry.priority,
            )

    def invoke(self, hook_name: str, payload: Any) -> Any:
        """Hand ``payload`` to every callback and return it, possibly mutated."""
        for _ in self._run(hook_name, lambda: payload):
            pass
        return payload

    def invoke_chain(self, hook_name: str, value: Any) -> Any:
        """Thread ``value`` through the callbacks; ``None`` keeps it unchanged."""
        for result in self._run(hook_name, lambda: value):
            if result is not None:
                value = result
        return value

    def _run(self, hook_name: str, current: Callable[[], Any]) -> Iterator[Any]:
        with self._lock:
            callbacks = list(self._by_hook.get(str(hook_name or "").strip(), ()))
        for entry in callbacks:
            try:
                result = entry.callback(current())
            except Exception:
                logger.exception(
                    "hook callback failed hook=%s owner=%s callback=%s",
                    entry.hook_name,
                    entry.owner,
                    entry.describe(),
                )
                continue
            yield result
