"""Logging configuration for weblookup."""

import datetime
import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, Union

DEFAULT_LOG_FILE = "~/.config/weblookup/logs/weblookup.log"
MAX_LOG_FILE_BYTES = 5 * 1024 * 1024  # 5 MiB per rotated file.
LOG_BACKUP_COUNT = 3
MAX_ARCHIVED_LOG_FILES = 10
_ROLLED_LOG_PATHS: set[Path] = set()


def _archive_existing_log_file(log_path: Path) -> None:
    """Archive an existing log file to a timestamp-prefixed name once per process."""
    resolved_path = log_path.resolve()
    if resolved_path in _ROLLED_LOG_PATHS:
        return
    if not log_path.exists():
        _ROLLED_LOG_PATHS.add(resolved_path)
        return
    timestamp = datetime.datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
    archived_path = log_path.parent / f"{timestamp}_{log_path.name}"
    suffix = 1
    while archived_path.exists():
        archived_path = log_path.parent / f"{timestamp}_{suffix}_{log_path.name}"
        suffix += 1
    log_path.rename(archived_path)
    _ROLLED_LOG_PATHS.add(resolved_path)
    _prune_archived_log_files(log_path)


def _prune_archived_log_files(log_path: Path) -> None:
    """Keep only the newest MAX_ARCHIVED_LOG_FILES archives of ``log_path``."""
    archives = sorted(
        (
            path
            for path in log_path.parent.glob(f"*_{log_path.name}")
            if path.is_file()
        ),
        key=lambda path: (path.stat().st_mtime, path.name),
        reverse=True,
    )
    for stale in archives[MAX_ARCHIVED_LOG_FILES:]:
        stale.unlink(missing_ok=True)


def setup_logging(
    level_name: str = "INFO",
    log_file: Optional[Union[str, Path]] = None,
    archive: bool = True,
) -> None:
    """Configure root logging and rotate an existing target file at startup.

    Shell completion runs pass ``archive=False`` so each TAB press appends to
    the current log instead of starting a new one.
    """
    level = getattr(logging, level_name.upper(), logging.INFO)

    if not log_file:
        return
    log_path = Path(log_file).expanduser()

    log_path.parent.mkdir(parents=True, exist_ok=True)
    if archive:
        _archive_existing_log_file(log_path)

    logger = logging.getLogger()
    logger.setLevel(level)

    handler = RotatingFileHandler(
        log_path,
        mode="a",
        maxBytes=MAX_LOG_FILE_BYTES,
        backupCount=LOG_BACKUP_COUNT,
        encoding="utf-8",
    )

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )
    handler.setFormatter(formatter)

    # Remove existing handlers to avoid duplicates if re-initialized
    for existing_handler in list(logger.handlers):
        logger.removeHandler(existing_handler)
        existing_handler.close()

    logger.addHandler(handler)

    # Suppress noisy libraries
    logging.getLogger("argcomplete").setLevel(logging.WARNING)
