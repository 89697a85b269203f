"""Сборка фасада: одна сессия демона, каналы уведомлений и командный слой."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from dockdash.docker_api.client import RuntimeClient
from dockdash.docker_api.dispatcher import CommandDispatcher
from dockdash.notifications import NotificationHub
from dockdash.settings.registry import SettingsRegistry
from dockdash.utils.helpers import normalize_socket_path


@dataclass
class ControlPlane:
    """Все долгоживущие объекты процесса; передаются обработчикам явно."""

    settings: SettingsRegistry
    client: RuntimeClient
    hub: NotificationHub
    dispatcher: CommandDispatcher

    def close(self) -> None:
        self.client.close()


def connect_client(settings: SettingsRegistry) -> RuntimeClient:
    """Создаёт сессию с демоном по группе настроек "daemon"."""

    return RuntimeClient.connect(
        normalize_socket_path(settings.get_value("daemon", "base_url", default="")),
        timeout=int(settings.get_value("daemon", "timeout_sec", default=60)),
        api_version=settings.get_value("daemon", "api_version", default="auto"),
    )


def create_application(
    settings: SettingsRegistry, client: Optional[RuntimeClient] = None
) -> ControlPlane:
    """Фабрика фасада. Без готового клиента подключается к демону (может упасть)."""

    runtime = client or connect_client(settings)
    hub = NotificationHub()
    dispatcher = CommandDispatcher(
        runtime,
        hub,
        pull_channel=settings.get_value("streams", "pull_progress_channel", default="pull-progress"),
    )
    return ControlPlane(settings=settings, client=runtime, hub=hub, dispatcher=dispatcher)
