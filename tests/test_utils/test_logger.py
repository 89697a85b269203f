"""Проверки подсистемы логирования."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from dockdash.utils.logger import (
    LOG_FILE_NAME,
    configure_logging,
    get_logger,
    resolve_log_level,
)


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in root.handlers:
        handler.close()
    root.handlers = handlers
    root.setLevel(level)


def test_configure_logging_creates_file(tmp_path: Path) -> None:
    """После конфигурации должны появиться файлы логов и запись в них."""

    log_dir = tmp_path / "logs"
    configure_logging(log_dir, level_name="INFO", max_bytes=1024, backup_count=1)

    logger = get_logger("dockdash.test")
    logger.info("log entry")
    for handler in logging.getLogger().handlers:
        handler.flush()

    log_file = log_dir / LOG_FILE_NAME
    assert LOG_FILE_NAME == "dockdash.log"
    assert log_file.exists()
    assert "log entry" in log_file.read_text(encoding="utf-8")


def test_console_handler_is_optional(tmp_path: Path) -> None:
    configure_logging(tmp_path, console=False)
    assert len(logging.getLogger().handlers) == 1

    configure_logging(tmp_path, console=True)
    assert len(logging.getLogger().handlers) == 2


def test_docker_loggers_are_quieted(tmp_path: Path) -> None:
    configure_logging(tmp_path, level_name="DEBUG", console=False)
    assert logging.getLogger("urllib3").level == logging.INFO
    assert logging.getLogger("docker").level == logging.INFO


def test_resolve_log_level_invalid() -> None:
    """Неизвестный уровень логирования приводит к ValueError."""

    with pytest.raises(ValueError):
        resolve_log_level("INVALID")


def test_resolve_log_level_case_insensitive() -> None:
    assert resolve_log_level("warning") == logging.WARNING
