"""Backend roster schema and validation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Tuple

REQUIRED_MANIFEST_KEYS = ("enabled", "module", "class")
KNOWN_MANIFEST_KEYS = set(REQUIRED_MANIFEST_KEYS)


@dataclass(frozen=True)
class BackendManifest:
    """Normalized backend roster entry."""

    name: str
    enabled: bool
    module: str
    backend_class: str


@dataclass(frozen=True)
class ManifestBuildResult:
    """Result of building one manifest entry."""

    manifest: Optional[BackendManifest]
    warnings: Tuple[str, ...] = ()
    error: Optional[str] = None


def build_manifest_entry(name: str, raw_entry: Any) -> ManifestBuildResult:
    """Validate and normalize one ``[backend.<name>]`` table."""
    if not isinstance(raw_entry, dict):
        return ManifestBuildResult(
            manifest=None,
            error="manifest entry must be a TOML table",
        )

    missing = [key for key in REQUIRED_MANIFEST_KEYS if key not in raw_entry]
    if missing:
        return ManifestBuildResult(
            manifest=None,
            error=f"missing required field(s): {', '.join(sorted(missing))}",
        )

    enabled = bool(raw_entry.get("enabled"))
    module = str(raw_entry.get("module", "") or "").strip()
    backend_class = str(raw_entry.get("class", "") or "").strip()
    if not module:
        return ManifestBuildResult(
            manifest=None,
            error="field 'module' must be a non-empty string",
        )
    if not backend_class:
        return ManifestBuildResult(
            manifest=None,
            error="field 'class' must be a non-empty string",
        )

    unknown_keys = sorted(set(raw_entry.keys()) - KNOWN_MANIFEST_KEYS)
    warnings = tuple(
        f"backend '{name}': ignoring unknown manifest key '{key}'"
        for key in unknown_keys
    )

    return ManifestBuildResult(
        manifest=BackendManifest(
            name=name,
            enabled=enabled,
            module=module,
            backend_class=backend_class,
        ),
        warnings=warnings,
    )
