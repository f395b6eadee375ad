"""Style store: context-scoped settings resolved by most specific pattern.

A style is a ``(pattern, key, value)`` triple. Patterns are shell globs over
colon-separated contexts such as ``:lookup:-default-:leo:``. When several
patterns match a context and define the same key, the most specific one wins:

* more colon-separated components beat fewer;
* with equal counts, components are compared left to right, literal text
  beating globs and any glob beating a bare ``*``;
* remaining ties go to the pattern defined last.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Any, List, Mapping, Optional, Tuple

import tomlkit

from weblookup.config.loader import STYLES_FILENAME, _get_config_dir

logger = logging.getLogger(__name__)

GLOB_CHARACTERS = frozenset("*?[")
LITERAL_COMPONENT_WEIGHT = 2
GLOB_COMPONENT_WEIGHT = 1
STAR_COMPONENT_WEIGHT = 0


class StyleError(ValueError):
    """Raised for malformed style configuration."""


@dataclass(frozen=True)
class StyleRule:
    """One style pattern with its ranking weight."""

    pattern: str
    values: Mapping[str, Any]
    weight: Tuple[int, Tuple[int, ...]]
    index: int


def pattern_weight(pattern: str) -> Tuple[int, Tuple[int, ...]]:
    """Return a sortable specificity weight for ``pattern``."""
    components = pattern.split(":")
    weights = []
    for component in components:
        if component == "*":
            weights.append(STAR_COMPONENT_WEIGHT)
        elif GLOB_CHARACTERS.intersection(component):
            weights.append(GLOB_COMPONENT_WEIGHT)
        else:
            weights.append(LITERAL_COMPONENT_WEIGHT)
    return len(components), tuple(weights)


def build_context(*parts: str) -> str:
    """Join context components as ``:a:b:c:``."""
    cleaned = [str(part).strip(":") for part in parts]
    return ":" + ":".join(cleaned) + ":"


class StyleStore:
    """Ranked pattern matcher over a snapshot of style definitions."""

    def __init__(self, styles: Optional[Mapping[str, Any]] = None) -> None:
        self._rules: List[StyleRule] = []
        if styles:
            self.update(styles)

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "StyleStore":
        """Build a store from the ``styles`` table of a loaded config."""
        styles = config.get("styles", {})
        if not isinstance(styles, Mapping):
            raise StyleError("[styles] must be a table of pattern tables")
        return cls(styles)

    def update(self, styles: Mapping[str, Any]) -> None:
        """Add or override pattern tables."""
        for pattern, values in styles.items():
            self.define(pattern, values)

    def define(self, pattern: Any, values: Any) -> None:
        """Add one pattern table; later definitions win ties."""
        if not isinstance(pattern, str) or not pattern.startswith(":"):
            raise StyleError(f"style pattern must start with ':': {pattern!r}")
        if not isinstance(values, Mapping):
            raise StyleError(f"style pattern {pattern!r} must map keys to values")
        rule = StyleRule(
            pattern=pattern,
            values=dict(values),
            weight=pattern_weight(pattern),
            index=len(self._rules),
        )
        self._rules.append(rule)

    def lookup(self, context: str, key: str) -> Optional[Tuple[str, Any]]:
        """Return ``(pattern, value)`` of the best match, or ``None``."""
        best: Optional[StyleRule] = None
        for rule in self._rules:
            if key not in rule.values:
                continue
            if not fnmatchcase(context, rule.pattern):
                continue
            if best is None or (rule.weight, rule.index) > (best.weight, best.index):
                best = rule
        if best is None:
            return None
        return best.pattern, best.values[key]

    def resolve(self, context: str, key: str) -> Any:
        """Return the value of ``key`` for ``context`` or ``None`` when unset."""
        match = self.lookup(context, key)
        if match is None:
            logger.debug("style unset context=%s key=%s", context, key)
            return None
        pattern, value = match
        logger.debug(
            "style resolved context=%s key=%s pattern=%s", context, key, pattern
        )
        return value


def _styles_path(config_dir: Optional[Path] = None) -> Path:
    return (config_dir or _get_config_dir()).expanduser() / STYLES_FILENAME


def _load_styles_document(path: Path) -> tomlkit.TOMLDocument:
    if not path.exists():
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("[styles]\n", encoding="utf-8")
    content = path.read_text(encoding="utf-8")
    return tomlkit.parse(content or "[styles]\n")


def set_style(
    pattern: str,
    key: str,
    value: Any,
    *,
    config_dir: Optional[Path] = None,
) -> Path:
    """Persist one style into the user's styles file, keeping its comments."""
    if not isinstance(pattern, str) or not pattern.startswith(":"):
        raise StyleError(f"style pattern must start with ':': {pattern!r}")
    key = str(key or "").strip()
    if not key:
        raise StyleError("style key must be a non-empty string")

    path = _styles_path(config_dir)
    doc = _load_styles_document(path)
    if "styles" not in doc:
        doc["styles"] = tomlkit.table()
    styles = doc["styles"]
    if pattern not in styles:
        styles[pattern] = tomlkit.table()
    styles[pattern][key] = value

    path.write_text(doc.as_string(), encoding="utf-8")
    logger.debug("saved style pattern=%s key=%s at %s", pattern, key, path)
    return path
