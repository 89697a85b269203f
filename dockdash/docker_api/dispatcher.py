"""Командный слой фасада: единая точка входа для всех операций над демоном.

Каждая команда проверяет входные данные, делает один вызов `RuntimeClient`,
пропускает результат через проекции ресурсов, а сбой через классификатор
ошибок. Повторов нет; ошибка возвращается вызывающей стороне сразу.
"""

from __future__ import annotations

import logging
from typing import Any, AsyncGenerator, Awaitable, List, Optional, TypeVar

from dockdash.docker_api import containers, images, networks, relay, volumes
from dockdash.docker_api.client import RuntimeClient
from dockdash.docker_api.errors import DAEMON_FAILURES, ErrorContext, classify_failure
from dockdash.docker_api.exceptions import DaemonError, ValidationError
from dockdash.docker_api.models import (
    ContainerSummary,
    ImageSummary,
    NetworkMember,
    NetworkSummary,
    ProgressEvent,
    VolumeSummary,
)
from dockdash.notifications import PULL_PROGRESS_CHANNEL, NotificationHub, Sink

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_STOP_GRACE_SEC = 10
DEFAULT_KILL_SIGNAL = "SIGKILL"
DEFAULT_NETWORK_DRIVER = "bridge"


class CommandDispatcher:
    """Предоставляет типизированные асинхронные команды поверх одной сессии демона."""

    def __init__(
        self,
        client: RuntimeClient,
        hub: Optional[NotificationHub] = None,
        *,
        pull_channel: str = PULL_PROGRESS_CHANNEL,
    ) -> None:
        self._client = client
        self._hub = hub or NotificationHub()
        self._pull_channel = pull_channel

    @property
    def hub(self) -> NotificationHub:
        return self._hub

    @property
    def pull_channel(self) -> str:
        return self._pull_channel

    # ------------------------------------------------------------------ helpers
    @staticmethod
    def _require(field: str, value: Any) -> str:
        """Возвращает непустую строку или поднимает ValidationError."""

        if not isinstance(value, str) or not value.strip():
            raise ValidationError(field, value, "must be a non-empty string")
        return value

    @staticmethod
    async def _run(context: ErrorContext, call: Awaitable[T]) -> T:
        """Ожидает вызов демона, классифицируя любой его сбой."""

        try:
            return await call
        except DAEMON_FAILURES as exc:
            raise classify_failure(exc, context) from exc

    # --------------------------------------------------------------- containers
    async def list_containers(self) -> List[ContainerSummary]:
        """Возвращает все контейнеры, включая остановленные."""

        records = await self._run(
            ErrorContext("list containers"), self._client.list_containers()
        )
        return containers.list_containers(records)

    async def create_container(self, image: str, port_mapping: Optional[str] = None) -> None:
        """Создаёт контейнер из образа и сразу запускает его.

        Создание и запуск не транзакционны: если запуск не удался, созданный
        контейнер остаётся на демоне, а ошибка сообщает его идентификатор.
        """

        self._require("image", image)
        mapping = containers.parse_port_mapping(port_mapping)
        if port_mapping is not None and mapping.is_empty:
            LOGGER.warning("Ignoring malformed port mapping %r for image %s", port_mapping, image)

        container_id = await self._run(
            ErrorContext("create container"), self._client.create_container(image, mapping)
        )
        try:
            await self._run(
                ErrorContext("start created container", identifier=container_id),
                self._client.start_container(container_id),
            )
        except DaemonError as exc:
            exc.context["container_id"] = container_id
            raise
        LOGGER.info("Container %s created from %s and started", container_id, image)

    async def start_container(self, name: str) -> None:
        await self._container_action("start", name, self._client.start_container)

    async def stop_container(self, name: str, grace_period: int = DEFAULT_STOP_GRACE_SEC) -> None:
        await self._container_action("stop", name, self._client.stop_container, grace_period)

    async def kill_container(self, name: str, signal: str = DEFAULT_KILL_SIGNAL) -> None:
        await self._container_action("kill", name, self._client.kill_container, signal)

    async def pause_container(self, name: str) -> None:
        await self._container_action("pause", name, self._client.pause_container)

    async def unpause_container(self, name: str) -> None:
        await self._container_action("unpause", name, self._client.unpause_container)

    async def delete_container(
        self, name: str, *, force: bool = True, remove_volumes: bool = True
    ) -> None:
        self._require("name", name)
        await self._run(
            ErrorContext("delete", "container", name),
            self._client.remove_container(name, force=force, remove_volumes=remove_volumes),
        )
        LOGGER.info("Deleted container '%s' successfully", name)

    async def _container_action(self, operation: str, name: str, method: Any, *args: Any) -> None:
        self._require("name", name)
        await self._run(ErrorContext(operation, "container", name), method(name, *args))
        LOGGER.info("Container '%s': %s succeeded", name, operation)

    # ---------------------------------------------------------------------- logs
    async def emit_logs(self, container_name: str, sink: Sink) -> None:
        """Передаёт в приёмник весь журнал контейнера и новые строки до конца потока."""

        self._require("container_name", container_name)
        await relay.relay_logs(self._client, container_name, sink)

    def iter_logs(self, container_name: str) -> AsyncGenerator[str, None]:
        """Те же строки журнала в виде асинхронного итератора."""

        self._require("container_name", container_name)
        return relay.log_lines(self._client, container_name)

    # -------------------------------------------------------------------- images
    async def list_images(self) -> List[ImageSummary]:
        records = await self._run(ErrorContext("list images"), self._client.list_images())
        return images.list_images(records)

    async def remove_image(self, ref: str, *, force: bool = True) -> None:
        self._require("ref", ref)
        await self._run(
            ErrorContext("remove", "image", ref), self._client.remove_image(ref, force=force)
        )
        LOGGER.info("Removed image '%s' successfully", ref)

    async def pull_image(self, image_ref: str, sink: Optional[Sink] = None) -> None:
        """Загружает образ, публикуя ProgressEvent.

        Без явного приёмника события уходят в канал приложения
        "pull-progress"; явный приёмник даёт каждой загрузке свой путь доставки.
        """

        self._require("image_ref", image_ref)
        target = sink if sink is not None else self._hub.emitter(self._pull_channel)
        await relay.relay_pull_progress(self._client, image_ref, target)

    def iter_pull_progress(self, image_ref: str) -> AsyncGenerator[ProgressEvent, None]:
        self._require("image_ref", image_ref)
        return relay.pull_progress(self._client, image_ref)

    # ------------------------------------------------------------------- volumes
    async def create_volume(self, name: str) -> None:
        self._require("name", name)
        await self._run(
            ErrorContext("create volume", identifier=name), self._client.create_volume(name)
        )
        LOGGER.info("Volume '%s' created successfully", name)

    async def list_volumes(self) -> List[VolumeSummary]:
        """Возвращает только "висячие" тома (фильтр демона dangling=true)."""

        response = await self._run(
            ErrorContext("list volumes"), self._client.list_volumes(volumes.DANGLING_FILTER)
        )
        return volumes.list_volumes(response)

    async def remove_volume(self, name: str) -> None:
        self._require("name", name)
        await self._run(ErrorContext("remove", "volume", name), self._client.remove_volume(name))
        LOGGER.info("Volume '%s' removed successfully", name)

    # ------------------------------------------------------------------ networks
    async def list_networks(self) -> List[NetworkSummary]:
        records = await self._run(ErrorContext("list networks"), self._client.list_networks())
        return networks.list_networks(records)

    async def create_network(self, name: str, driver: Optional[str] = None) -> None:
        self._require("name", name)
        driver = driver or DEFAULT_NETWORK_DRIVER
        await self._run(
            ErrorContext("create network", identifier=name),
            self._client.create_network(name, driver),
        )
        LOGGER.info("Network '%s' (%s) created successfully", name, driver)

    async def list_network_members(self, network_name: str) -> List[NetworkMember]:
        """Возвращает контейнеры, подключённые к сети (подробный inspect)."""

        self._require("network_name", network_name)
        network = await self._run(
            ErrorContext("inspect", "network", network_name),
            self._client.inspect_network(network_name, verbose=True),
        )
        return networks.list_members(network)

    async def remove_network(self, network_id: str) -> None:
        self._require("network_id", network_id)
        await self._run(
            ErrorContext("remove", "network", network_id), self._client.remove_network(network_id)
        )
        LOGGER.info("Network '%s' removed successfully", network_id)

    async def connect_container_to_network(self, container_id: str, network_id: str) -> None:
        self._require("container_id", container_id)
        self._require("network_id", network_id)
        await self._run(
            ErrorContext("connect container to network"),
            self._client.connect_network(container_id, network_id),
        )
        LOGGER.info("Container '%s' connected to network '%s'", container_id, network_id)

    async def disconnect_container_from_network(
        self, container_id: str, network_id: str, *, force: bool = False
    ) -> None:
        self._require("container_id", container_id)
        self._require("network_id", network_id)
        await self._run(
            ErrorContext("disconnect container from network"),
            self._client.disconnect_network(container_id, network_id, force=force),
        )
        LOGGER.info("Container '%s' disconnected from network '%s'", container_id, network_id)
