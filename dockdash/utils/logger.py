"""Настройка логирования: файл с ротацией и вывод в консоль."""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Final, Iterable, cast

LOG_FORMAT: Final[str] = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
LOG_FILE_NAME: Final[str] = "dockdash.log"

# docker-py и urllib3 пишут каждый HTTP-запрос к сокету на уровне DEBUG
NOISY_LOGGERS: Final[tuple[str, ...]] = ("urllib3", "docker")


def resolve_log_level(level_name: str) -> int:
    """Преобразует строковый уровень логирования в числовой."""

    level = getattr(logging, level_name.upper(), None)
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {level_name}")
    return cast(int, level)


def configure_logging(
    log_dir: Path,
    *,
    log_file_name: str = LOG_FILE_NAME,
    level_name: str = "INFO",
    max_bytes: int = 10 * 1024 * 1024,
    backup_count: int = 5,
    console: bool = True,
) -> None:
    """Создаёт конфигурацию логирования с ротацией файлов и (по желанию) выводом в stderr."""

    log_dir.mkdir(parents=True, exist_ok=True)
    log_level = resolve_log_level(level_name)

    file_handler = RotatingFileHandler(
        log_dir / log_file_name,
        maxBytes=max_bytes,
        backupCount=backup_count,
        encoding="utf-8",
    )
    handlers: list[logging.Handler] = [file_handler]
    if console:
        # stdout занят результатами команд
        handlers.append(logging.StreamHandler(sys.stderr))
    for handler in handlers:
        handler.setFormatter(logging.Formatter(LOG_FORMAT))

    logging.basicConfig(level=log_level, handlers=handlers, force=True)
    quiet_loggers(NOISY_LOGGERS, max(log_level, logging.INFO))


def quiet_loggers(names: Iterable[str], level: int) -> None:
    for name in names:
        logging.getLogger(name).setLevel(level)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
