"""Ошибки конфигурации dockdash (config.json и значения настроек).

Они входят в общую иерархию FacadeError, поэтому точка входа печатает их в
той же форме {"ConfigError": "<сообщение>"}, что и ошибки демона.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

from dockdash.docker_api.exceptions import FacadeError


class SettingsError(FacadeError):
    """Конфигурация не может быть прочитана или применена."""

    wire_name = "ConfigError"


class SettingsNotFoundError(SettingsError):
    """Обращение к группе или ключу, которых нет в config.json."""

    def __init__(self, group: str, key: Optional[str] = None) -> None:
        self.group = group
        self.key = key
        setting = f"{group}.{key}" if key else group
        super().__init__(f"Unknown setting '{setting}'", context={"group": group, "key": key})


class SettingsValidationError(SettingsError):
    def __init__(self, key: str, value: Any, reason: str) -> None:
        self.key = key
        self.value = value
        self.reason = reason
        super().__init__(
            f"Invalid value {value!r} for setting '{key}': {reason}",
            context={"key": key, "value": value, "reason": reason},
        )


class SettingsIOError(SettingsError):
    """config.json недоступен или не является JSON-объектом."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = Path(path)
        super().__init__(
            f"Cannot use config file '{path}': {reason}",
            context={"path": str(path), "reason": reason},
        )
