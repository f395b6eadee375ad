"""Argcomplete wiring and completion providers for the lookup CLI."""

from __future__ import annotations

import argparse
import logging
import os
from typing import Callable, Iterable, List, Mapping

from weblookup.backends.base import CompletionRegistry

COMPLETION_SHELLS = ("bash", "zsh")
COMPLETION_PROGRAMS = ("lookup",)

logger = logging.getLogger(__name__)

Completer = Callable[..., Mapping[str, str]]


def is_completing() -> bool:
    """Return True when the shell asked argcomplete for candidates."""
    return "_ARGCOMPLETE" in os.environ


def enable_argcomplete(parser: argparse.ArgumentParser) -> None:
    """Enable argcomplete only for completion invocations."""
    if not is_completing():
        return
    try:
        import argcomplete  # type: ignore

        argcomplete.autocomplete(parser)
    except Exception as exc:
        logger.debug("argcomplete autocomplete setup skipped: %s", exc)


def build_completion_script(shell: str) -> str:
    """Return shell snippet for enabling lookup completion."""
    if shell not in COMPLETION_SHELLS:
        raise ValueError(
            f"Unsupported shell '{shell}'. Supported values: {', '.join(COMPLETION_SHELLS)}"
        )

    import argcomplete  # type: ignore

    header = "\n".join(
        [
            "# lookup argcomplete setup",
            "# Append this to your shell rc file.",
        ]
    )
    shell_code = argcomplete.shellcode(list(COMPLETION_PROGRAMS), shell=shell)
    return f"{header}\n{shell_code}"


def option_completer(registry: CompletionRegistry, flag: str) -> Completer:
    """Wrap a backend's candidate generator as an argcomplete completer."""

    def _complete(
        prefix: str, parsed_args: argparse.Namespace, **kwargs: object
    ) -> Mapping[str, str]:
        del parsed_args, kwargs
        return _prefix_filter_with_descriptions(registry.described(flag), prefix)

    return _complete


def backend_name_completer(names: Iterable[str]) -> Completer:
    """Complete backend names for ``-h BACKEND``."""
    known = list(names)

    def _complete(
        prefix: str, parsed_args: argparse.Namespace, **kwargs: object
    ) -> List[str]:
        del parsed_args, kwargs
        return _prefix_filter(known, prefix)

    return _complete


def _prefix_filter(values: Iterable[str], prefix: str) -> List[str]:
    """Filter values by prefix."""
    unique_values = list(dict.fromkeys(values))
    if not prefix:
        return unique_values
    return [value for value in unique_values if value.startswith(prefix)]


def _prefix_filter_with_descriptions(
    values: Mapping[str, str], prefix: str
) -> Mapping[str, str]:
    """Filter completion mapping by token prefix."""
    if not prefix:
        return dict(values)
    return {
        token: description
        for token, description in values.items()
        if token.startswith(prefix)
    }
