"""Группы настроек с валидацией значений."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Mapping, Tuple

from dockdash.settings.exceptions import SettingsNotFoundError, SettingsValidationError
from dockdash.settings.schemas import DEFAULT_CONFIG
from dockdash.settings.validators import (
    AnyOfValidator,
    EnumValidator,
    RangeValidator,
    RegexValidator,
    TypeValidator,
    Validator,
)

API_VERSION_PATTERN = r"^\d+\.\d+$"
CHANNEL_PATTERN = r"^[a-z0-9][a-z0-9\-_.]*$"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


class SettingsGroup(ABC):
    """Набор ключей одной секции config.json.

    Значения по умолчанию берутся из DEFAULT_CONFIG по имени группы.
    """

    group_name: str = ""

    def __init__(self) -> None:
        self._defaults: Dict[str, Any] = dict(DEFAULT_CONFIG[self.group_name])
        self._validators: Dict[str, Validator] = self._build_validators()
        self._values: Dict[str, Any] = dict(self._defaults)

    @abstractmethod
    def _build_validators(self) -> Dict[str, Validator]:
        """Возвращает валидаторы по ключам группы."""

    def _known(self, key: str) -> str:
        if key not in self._defaults:
            raise SettingsNotFoundError(self.group_name, key)
        return key

    def keys(self) -> Tuple[str, ...]:
        return tuple(self._defaults)

    def get(self, key: str, default: Any = None) -> Any:
        return self._values.get(self._known(key), default)

    def validate(self, key: str, value: Any) -> Tuple[bool, str]:
        validator = self._validators.get(key)
        return validator.validate(value) if validator else (True, "")

    def set(self, key: str, value: Any) -> None:
        """Сохраняет значение; невалидное значение не меняет группу."""

        is_valid, error = self.validate(self._known(key), value)
        if not is_valid:
            raise SettingsValidationError(f"{self.group_name}.{key}", value, error)
        self._values[key] = value

    def to_dict(self) -> Dict[str, Any]:
        return dict(self._values)

    def from_dict(self, data: Mapping[str, Any]) -> None:
        """Применяет значения секции; незнакомые ключи пропускаются."""

        for key in self._defaults.keys() & data.keys():
            self.set(key, data[key])

    def reset_to_defaults(self) -> None:
        self._values = dict(self._defaults)


class DaemonSettings(SettingsGroup):
    """Подключение к локальному демону контейнеров."""

    group_name = "daemon"

    def _build_validators(self) -> Dict[str, Validator]:
        return {
            "base_url": TypeValidator(str),
            "timeout_sec": RangeValidator(1, 600),
            "api_version": AnyOfValidator(
                [EnumValidator(["auto"]), RegexValidator(API_VERSION_PATTERN)]
            ),
        }


class LoggingSettings(SettingsGroup):
    """Файл журнала и уровень логирования."""

    group_name = "logging"

    def _build_validators(self) -> Dict[str, Validator]:
        return {
            "enabled": TypeValidator(bool),
            "level": EnumValidator(LOG_LEVELS),
            "max_file_size_mb": RangeValidator(1, 1000),
            "max_archived_files": RangeValidator(1, 50),
        }


class StreamSettings(SettingsGroup):
    """Каналы доставки потоковых событий."""

    group_name = "streams"

    def _build_validators(self) -> Dict[str, Validator]:
        return {"pull_progress_channel": RegexValidator(CHANNEL_PATTERN)}
