"""Configuration loading, style resolution and re-exports for weblookup."""

from typing import Any, Dict

from weblookup.config.loader import _get_config_dir, load_config
from weblookup.config.styles import StyleError, StyleStore, build_context, set_style

DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_LOG_FILE = "~/.config/weblookup/logs/weblookup.log"


def general_settings(config: Dict[str, Any]) -> Dict[str, Any]:
    """Return the [general] table with defaults applied."""
    general = config.get("general", {}) or {}
    return {
        "log_level": str(general.get("log_level") or DEFAULT_LOG_LEVEL),
        "log_file": str(general.get("log_file") or DEFAULT_LOG_FILE),
        "browser": str(general.get("browser") or "").strip(),
    }


__all__ = [
    "DEFAULT_LOG_FILE",
    "DEFAULT_LOG_LEVEL",
    "StyleError",
    "StyleStore",
    "_get_config_dir",
    "build_context",
    "general_settings",
    "load_config",
    "set_style",
]
