"""Configuration loading and merging logic."""

import logging
import shutil
import sys
import tomllib
from importlib import resources
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

GENERAL_FILENAME = "general.toml"
STYLES_FILENAME = "styles.toml"
BACKENDS_FILENAME = "backends.toml"
CONFIG_FILES = (GENERAL_FILENAME, STYLES_FILENAME, BACKENDS_FILENAME)
BUNDLED_CONFIG_PACKAGE = "weblookup.data.config"


def _get_config_dir() -> Path:
    """Return the configuration directory path."""
    return Path.home() / ".config" / "weblookup"


def merge(base: Dict[str, Any], update: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge ``update`` into ``base`` and return ``base``."""
    for k, v in update.items():
        if k in base and isinstance(base[k], dict) and isinstance(v, dict):
            merge(base[k], v)
        else:
            base[k] = v
    return base


def _copy_default(filename: str, user_file_path: Path) -> None:
    resource_path = resources.files(BUNDLED_CONFIG_PACKAGE).joinpath(filename)
    try:
        with resources.as_file(resource_path) as source_path:
            shutil.copy(source_path, user_file_path)
        logger.info("Created default configuration %s at %s", filename, user_file_path)
    except OSError:
        logger.exception("Failed to create default config %s", user_file_path)


def load_config(config_dir: Optional[Path] = None) -> Dict[str, Any]:
    """Load configuration from TOML files, falling back to bundled defaults."""
    config_dir = (config_dir or _get_config_dir()).expanduser()
    config_dir.mkdir(parents=True, exist_ok=True)

    final_config: Dict[str, Any] = {
        "general": {},
        "styles": {},
        "backend": {},
    }

    # 1. Bundled defaults, copied to the user directory when missing
    for filename in CONFIG_FILES:
        resource_path = resources.files(BUNDLED_CONFIG_PACKAGE).joinpath(filename)
        with resource_path.open("rb") as f:
            merge(final_config, tomllib.load(f))

        user_file_path = config_dir / filename
        if not user_file_path.exists():
            _copy_default(filename, user_file_path)

    # 2. User files override the bundled ones
    for filename in CONFIG_FILES:
        user_file_path = config_dir / filename
        if not user_file_path.exists():
            continue
        try:
            with open(user_file_path, "rb") as f:
                merge(final_config, tomllib.load(f))
        except tomllib.TOMLDecodeError as e:
            print(
                f"Error: Invalid configuration file at {user_file_path}",
                file=sys.stderr,
            )
            print(f"Details: {e}", file=sys.stderr)
            sys.exit(1)

    return final_config
