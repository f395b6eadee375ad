import logging
import os

import weblookup.logger as logger_module
from weblookup.logger import setup_logging


def _restore_root_logger(
    original_handlers: list[logging.Handler], original_level: int
) -> None:
    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        if handler not in original_handlers:
            handler.close()
    for handler in original_handlers:
        root_logger.addHandler(handler)
    root_logger.setLevel(original_level)


def test_setup_logging_without_file_is_noop():
    root_logger = logging.getLogger()
    handlers = list(root_logger.handlers)
    setup_logging("DEBUG", None)
    assert root_logger.handlers == handlers


def test_setup_logging_writes_to_expanded_path(monkeypatch, tmp_path):
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setattr(logger_module, "_ROLLED_LOG_PATHS", set())
    root_logger = logging.getLogger()
    original_handlers = list(root_logger.handlers)
    original_level = root_logger.level

    try:
        setup_logging("INFO", "~/.config/weblookup/logs/weblookup.log")
        logging.getLogger("weblookup.tests.logger").info("lookup logging works")
        for handler in logging.getLogger().handlers:
            handler.flush()

        log_path = tmp_path / ".config" / "weblookup" / "logs" / "weblookup.log"
        assert "lookup logging works" in log_path.read_text(encoding="utf-8")
    finally:
        _restore_root_logger(original_handlers, original_level)


def test_setup_logging_archives_existing_file(monkeypatch, tmp_path):
    monkeypatch.setattr(logger_module, "_ROLLED_LOG_PATHS", set())
    log_path = tmp_path / "logs" / "weblookup.log"
    log_path.parent.mkdir(parents=True)
    log_path.write_text("previous run\n", encoding="utf-8")
    root_logger = logging.getLogger()
    original_handlers = list(root_logger.handlers)
    original_level = root_logger.level

    try:
        setup_logging("INFO", log_path)
        archived = [
            path for path in log_path.parent.iterdir() if path.name != log_path.name
        ]
        assert len(archived) == 1
        assert archived[0].name.endswith("_weblookup.log")
        assert archived[0].read_text(encoding="utf-8") == "previous run\n"
    finally:
        _restore_root_logger(original_handlers, original_level)


def test_setup_logging_without_archive_appends(monkeypatch, tmp_path):
    monkeypatch.setattr(logger_module, "_ROLLED_LOG_PATHS", set())
    log_path = tmp_path / "logs" / "weblookup.log"
    log_path.parent.mkdir(parents=True)
    log_path.write_text("previous run\n", encoding="utf-8")
    root_logger = logging.getLogger()
    original_handlers = list(root_logger.handlers)
    original_level = root_logger.level

    try:
        setup_logging("INFO", log_path, archive=False)
        assert [path.name for path in log_path.parent.iterdir()] == ["weblookup.log"]
        assert log_path.read_text(encoding="utf-8") == "previous run\n"
    finally:
        _restore_root_logger(original_handlers, original_level)


def test_archived_logs_are_capped(monkeypatch, tmp_path):
    monkeypatch.setattr(logger_module, "_ROLLED_LOG_PATHS", set())
    monkeypatch.setattr(logger_module, "MAX_ARCHIVED_LOG_FILES", 3)
    log_dir = tmp_path / "logs"
    log_dir.mkdir()
    for index in range(5):
        old = log_dir / f"2020-01-0{index + 1}_00-00-00_weblookup.log"
        old.write_text(f"run {index}\n", encoding="utf-8")
        os.utime(old, (1_000_000 + index, 1_000_000 + index))
    log_path = log_dir / "weblookup.log"
    log_path.write_text("latest run\n", encoding="utf-8")
    root_logger = logging.getLogger()
    original_handlers = list(root_logger.handlers)
    original_level = root_logger.level

    try:
        setup_logging("INFO", log_path)
        archived = sorted(
            path.name for path in log_dir.iterdir() if path.name != log_path.name
        )
        assert len(archived) == 3
        assert "2020-01-05_00-00-00_weblookup.log" in archived
        assert "2020-01-04_00-00-00_weblookup.log" in archived
        assert not (log_dir / "2020-01-01_00-00-00_weblookup.log").exists()
    finally:
        _restore_root_logger(original_handlers, original_level)
