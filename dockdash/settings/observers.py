"""Наблюдатели за изменением настроек."""

from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable


@runtime_checkable
class SettingsObserver(Protocol):
    """Контракт наблюдателя."""

    def on_setting_changed(
        self,
        group: str,
        key: str,
        old_value: object,
        new_value: object,
    ) -> None:
        """Обрабатывает изменение конкретного ключа."""


class LogLevelObserver:
    """Применяет новый уровень логирования без перезапуска процесса."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or logging.getLogger()

    def on_setting_changed(
        self,
        group: str,
        key: str,
        old_value: object,
        new_value: object,
    ) -> None:
        if group != "logging" or key != "level" or not isinstance(new_value, str):
            return
        self._logger.setLevel(new_value)
        logging.getLogger(__name__).info("Log level changed: %r -> %r", old_value, new_value)
