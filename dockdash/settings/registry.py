"""Реестр настроек: загрузка config.json, валидация и уведомления."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Type

from dockdash.settings.exceptions import (
    SettingsIOError,
    SettingsNotFoundError,
    SettingsValidationError,
)
from dockdash.settings.groups import (
    DaemonSettings,
    LoggingSettings,
    SettingsGroup,
    StreamSettings,
)
from dockdash.settings.observers import SettingsObserver
from dockdash.settings.schemas import DEFAULT_CONFIG

LOGGER = logging.getLogger(__name__)

GROUP_TYPES: Tuple[Type[SettingsGroup], ...] = (DaemonSettings, LoggingSettings, StreamSettings)


class SettingsRegistry:
    """Все группы настроек процесса и их наблюдатели.

    Экземпляр создаётся в точке входа и передаётся зависимостям явно.
    """

    def __init__(self, config_path: Optional[Path] = None) -> None:
        self._file_path = config_path or Path.home() / ".dockdash" / "config.json"
        self._groups: Dict[str, SettingsGroup] = {
            group_type.group_name: group_type() for group_type in GROUP_TYPES
        }
        self._observers: List[SettingsObserver] = []

    @property
    def config_path(self) -> Path:
        return self._file_path

    def get_value(self, group: str, key: str, default: Any = None) -> Any:
        """Возвращает значение; default подставляется для неизвестной группы или ключа."""

        try:
            return self.get_group(group).get(key)
        except SettingsNotFoundError:
            if default is None:
                raise
            return default

    def set_value(self, group: str, key: str, value: Any) -> None:
        settings_group = self.get_group(group)
        previous = settings_group.get(key)
        settings_group.set(key, value)
        self.notify_observers(group, key, previous, value)

    def get_group(self, group: str) -> SettingsGroup:
        if group not in self._groups:
            raise SettingsNotFoundError(group)
        return self._groups[group]

    def register_observer(self, observer: SettingsObserver) -> None:
        if observer not in self._observers:
            self._observers.append(observer)

    def unregister_observer(self, observer: SettingsObserver) -> None:
        if observer in self._observers:
            self._observers.remove(observer)

    def notify_observers(self, group: str, key: str, old_value: Any, new_value: Any) -> None:
        """Сообщает наблюдателям об изменении; сбой одного не мешает остальным."""

        for observer in tuple(self._observers):
            try:
                observer.on_setting_changed(group, key, old_value, new_value)
            except Exception:  # pragma: no cover
                LOGGER.exception("Settings observer %r failed on %s.%s", observer, group, key)

    def snapshot(self) -> Dict[str, Any]:
        """Содержимое config.json для текущих значений."""

        payload: Dict[str, Any] = {"version": DEFAULT_CONFIG["version"]}
        payload.update((name, group.to_dict()) for name, group in self._groups.items())
        return payload

    def save_to_disk(self, path: Optional[Path] = None) -> None:
        target = path or self._file_path
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            with target.open("w", encoding="utf-8") as handle:
                json.dump(self.snapshot(), handle, indent=2, ensure_ascii=False)
        except OSError as exc:
            raise SettingsIOError(target, str(exc)) from exc

    def load_from_disk(self, path: Optional[Path] = None) -> None:
        """Читает config.json поверх значений по умолчанию.

        Отсутствующий файл создаётся со значениями по умолчанию, секции и
        ключи, которых нет в файле, сохраняют значения по умолчанию.
        """

        target = path or self._file_path
        if not target.exists():
            LOGGER.info("Config file %s not found, writing defaults", target)
            self.save_to_disk(target)
            return

        content = self._read(target)
        self.reset_to_defaults()
        for name, group in self._groups.items():
            section = content.get(name)
            if isinstance(section, dict):
                group.from_dict(section)
        self.validate()
        LOGGER.debug("Settings loaded from %s", target)

    def validate(self) -> bool:
        for name, group in self._groups.items():
            for key, value in group.to_dict().items():
                is_valid, error = group.validate(key, value)
                if not is_valid:
                    raise SettingsValidationError(f"{name}.{key}", value, error)
        return True

    def reset_to_defaults(self) -> None:
        for group in self._groups.values():
            group.reset_to_defaults()

    @staticmethod
    def _read(target: Path) -> Dict[str, Any]:
        try:
            with target.open(encoding="utf-8") as handle:
                content = json.load(handle)
        except (OSError, ValueError) as exc:
            raise SettingsIOError(target, str(exc)) from exc
        if not isinstance(content, dict):
            raise SettingsIOError(target, "top-level JSON value must be an object")
        return content
