"""Schema-driven option parsing for backend arguments."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Mapping, Optional, Sequence, Tuple

from weblookup.backends.errors import ArgumentError

END_OF_OPTIONS = "--"


@dataclass(frozen=True)
class OptionSpec:
    """One flag accepted by a backend."""

    flag: str
    takes_value: bool = False
    help: str = ""
    metavar: str = "VALUE"

    @property
    def name(self) -> str:
        """Flag name without leading dashes."""
        return self.flag.lstrip("-")


@dataclass(frozen=True)
class ParsedOptions:
    """Flags resolved against a schema plus ordered positional tokens."""

    options: Mapping[str, Any] = field(default_factory=dict)
    positionals: Tuple[str, ...] = ()

    def get(self, name: str, default: Any = None) -> Any:
        return self.options.get(name, default)


def build_schema(specs: Iterable[OptionSpec]) -> Tuple[OptionSpec, ...]:
    """Return specs as a tuple, rejecting duplicate or malformed flags."""
    schema = tuple(specs)
    seen: set[str] = set()
    for spec in schema:
        if not spec.flag.startswith("-") or not spec.name:
            raise ValueError(f"Option flag must start with '-': {spec.flag!r}")
        if spec.flag in seen:
            raise ValueError(f"Duplicate option flag: {spec.flag}")
        seen.add(spec.flag)
    return schema


def _is_flag_token(token: str) -> bool:
    return token.startswith("-") and token != "-"


def parse_options(
    schema: Sequence[OptionSpec], argv: Sequence[str]
) -> ParsedOptions:
    """Apply ``schema`` to ``argv``.

    Flags are consumed until the first token that is not a flag; that token
    and everything after it are positional. ``--`` ends flag parsing and is
    dropped. A value flag accepts its value either attached (``-lende``) or
    as the next token (``-l ende``).
    """
    by_flag: Dict[str, OptionSpec] = {spec.flag: spec for spec in schema}
    options: Dict[str, Any] = {}
    tokens = list(argv)
    index = 0

    while index < len(tokens):
        token = tokens[index]
        if token == END_OF_OPTIONS:
            index += 1
            break
        if not _is_flag_token(token):
            break

        spec, attached = _match_flag(by_flag, token)
        if spec is None:
            raise ArgumentError(f"unknown option: {token}")

        if spec.takes_value:
            if attached:
                options[spec.name] = attached
            elif index + 1 < len(tokens):
                index += 1
                options[spec.name] = tokens[index]
            else:
                raise ArgumentError(f"missing argument for option: {spec.flag}")
        elif attached:
            _apply_bundled_switches(by_flag, token, options)
        else:
            options[spec.name] = True
        index += 1

    return ParsedOptions(options=options, positionals=tuple(tokens[index:]))


def _match_flag(
    by_flag: Mapping[str, OptionSpec], token: str
) -> Tuple[Optional[OptionSpec], str]:
    spec = by_flag.get(token)
    if spec is not None:
        return spec, ""
    # Short flags may carry their value or further switches in the same token.
    if not token.startswith("--") and len(token) > 2:
        spec = by_flag.get(token[:2])
        if spec is not None:
            return spec, token[2:]
    return None, ""


def _apply_bundled_switches(
    by_flag: Mapping[str, OptionSpec], token: str, options: Dict[str, Any]
) -> None:
    for letter in token[1:]:
        spec = by_flag.get(f"-{letter}")
        if spec is None:
            raise ArgumentError(f"unknown option: -{letter} (in {token})")
        if spec.takes_value:
            raise ArgumentError(
                f"option {spec.flag} takes a value and cannot be bundled in {token}"
            )
        options[spec.name] = True
