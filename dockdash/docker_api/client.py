"""Асинхронная обёртка над docker-py: единственная сессия с демоном.

Каждый метод выполняет ровно один вызов API в рабочем потоке
(`asyncio.to_thread`), без повторов и проверок здоровья. Исключения
docker-py и requests выходят наружу без изменений: их классифицирует
вызывающая сторона.
"""

from __future__ import annotations

import asyncio
import codecs
import inspect
import logging
from contextlib import aclosing
from typing import Any, AsyncIterator, Dict, Iterator, List, Mapping, Optional

import docker
import requests
from docker.errors import APIError, DockerException
from docker.utils import parse_repository_tag

from dockdash.docker_api.containers import container_config
from dockdash.docker_api.exceptions import ConnectionSetupError
from dockdash.docker_api.models import PortMapping

LOGGER = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SEC = 60
_END = object()


class RuntimeClient:
    """Владеет `docker.DockerClient`, созданным один раз при старте процесса."""

    def __init__(self, raw_client: Any, *, base_url: str = "") -> None:
        self._client = raw_client  # SessionHandle: после создания не меняется
        self._base_url = base_url

    @classmethod
    def connect(
        cls,
        base_url: str = "",
        *,
        timeout: int = DEFAULT_TIMEOUT_SEC,
        api_version: str = "auto",
    ) -> "RuntimeClient":
        """Создаёт сессию и один раз проверяет демон; сбой фатален для запуска."""

        try:
            if base_url:
                raw = docker.DockerClient(base_url=base_url, version=api_version, timeout=timeout)
            else:
                raw = docker.from_env(version=api_version, timeout=timeout)
            raw.ping()
        except (DockerException, requests.exceptions.RequestException) as exc:
            LOGGER.error("Docker client init error via %s: %s", base_url or "local default", exc)
            raise ConnectionSetupError(base_url, str(exc)) from exc
        LOGGER.info("Connected to Docker daemon via %s", base_url or "local default")
        return cls(raw, base_url=base_url)

    @property
    def base_url(self) -> str:
        return self._base_url

    def get_raw_client(self) -> Any:
        """Возвращает внутренний docker client."""

        return self._client

    @property
    def _api(self) -> Any:
        return self._client.api

    async def _call(self, func: Any, *args: Any, **kwargs: Any) -> Any:
        return await asyncio.to_thread(func, *args, **kwargs)

    # ---------------------------------------------------------------- daemon
    async def ping(self) -> bool:
        return bool(await self._call(self._client.ping))

    async def version(self) -> Dict[str, Any]:
        return await self._call(self._client.version)

    def close(self) -> None:
        self._client.close()

    # ------------------------------------------------------------ containers
    async def list_containers(self) -> List[Dict[str, Any]]:
        return await self._call(self._api.containers, all=True)

    async def create_container(self, image: str, mapping: PortMapping) -> str:
        """Создаёт контейнер и возвращает его идентификатор."""

        config = container_config(image, mapping)
        host_config = self._api.create_host_config(port_bindings=config["port_bindings"])
        response = await self._call(
            self._api.create_container,
            config["image"],
            ports=config["ports"],
            host_config=host_config,
        )
        return response["Id"]

    async def start_container(self, name: str) -> None:
        await self._call(self._api.start, name)

    async def stop_container(self, name: str, timeout: int) -> None:
        await self._call(self._api.stop, name, timeout=timeout)

    async def kill_container(self, name: str, signal: str) -> None:
        await self._call(self._api.kill, name, signal=signal)

    async def pause_container(self, name: str) -> None:
        await self._call(self._api.pause, name)

    async def unpause_container(self, name: str) -> None:
        await self._call(self._api.unpause, name)

    async def remove_container(self, name: str, *, force: bool, remove_volumes: bool) -> None:
        await self._call(self._api.remove_container, name, v=remove_volumes, force=force)

    # ---------------------------------------------------------------- images
    async def list_images(self) -> List[Dict[str, Any]]:
        return await self._call(self._api.images, all=True)

    async def remove_image(self, ref: str, *, force: bool) -> None:
        await self._call(self._api.remove_image, ref, force=force)

    # --------------------------------------------------------------- volumes
    async def create_volume(self, name: str) -> Dict[str, Any]:
        return await self._call(self._api.create_volume, name)

    async def list_volumes(self, filters: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        return await self._call(self._api.volumes, filters=dict(filters) if filters else None)

    async def remove_volume(self, name: str) -> None:
        await self._call(self._api.remove_volume, name)

    # -------------------------------------------------------------- networks
    async def list_networks(self) -> List[Dict[str, Any]]:
        return await self._call(self._api.networks)

    async def create_network(self, name: str, driver: str) -> Dict[str, Any]:
        return await self._call(self._api.create_network, name, driver=driver)

    async def inspect_network(self, name: str, *, verbose: bool = True) -> Dict[str, Any]:
        return await self._call(self._api.inspect_network, name, verbose=verbose)

    async def remove_network(self, network_id: str) -> None:
        await self._call(self._api.remove_network, network_id)

    async def connect_network(self, container_id: str, network_id: str) -> None:
        await self._call(self._api.connect_container_to_network, container_id, network_id)

    async def disconnect_network(
        self, container_id: str, network_id: str, *, force: bool = False
    ) -> None:
        await self._call(
            self._api.disconnect_container_from_network, container_id, network_id, force=force
        )

    # --------------------------------------------------------------- streams
    async def stream_logs(self, name: str) -> AsyncIterator[str]:
        """Выдаёт строки stdout/stderr контейнера: весь backlog и новые записи.

        Куски потока не совпадают со строками (у TTY-контейнеров это отдельные
        байты), поэтому текст декодируется инкрементально и режется по "\\n".
        Хвост без перевода строки отдаётся в конце потока.
        """

        stream = await self._call(
            self._api.logs, name, stdout=True, stderr=True, stream=True, follow=True, tail="all"
        )
        decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        pending = ""
        async with aclosing(_iterate_in_thread(stream)) as chunks:
            async for chunk in chunks:
                pending += decoder.decode(chunk) if isinstance(chunk, bytes) else str(chunk)
                *lines, pending = pending.split("\n")
                for line in lines:
                    yield line + "\n"
        pending += decoder.decode(b"", final=True)
        if pending:
            yield pending

    async def stream_pull(self, ref: str) -> AsyncIterator[Any]:
        """Выдаёт сырые записи прогресса `docker pull`.

        Запись с ключом "error" означает отказ демона посреди загрузки и
        поднимается как APIError.
        """

        repository, tag = parse_repository_tag(ref)
        stream = await self._call(
            self._api.pull, repository, tag=tag or "latest", stream=True, decode=True
        )
        async with aclosing(_iterate_in_thread(stream)) as records:
            async for record in records:
                if isinstance(record, dict) and "error" in record:
                    detail = record.get("errorDetail") or {}
                    raise APIError(str(detail.get("message") or record["error"]))
                yield record


async def _iterate_in_thread(iterator: Iterator[Any]) -> AsyncIterator[Any]:
    """Перебирает блокирующий итератор, забирая каждый элемент в рабочем потоке.

    При отмене задачи `next()` может всё ещё выполняться в потоке. Генератор
    в этот момент закрыть нельзя, поэтому он закрывается, когда поток вернёт
    элемент. Потоки docker-py с собственным `close()` (CancellableStream)
    закрываются сразу: это рвёт сокет и освобождает поток.
    """

    loop = asyncio.get_running_loop()
    pending: Optional["asyncio.Future[Any]"] = None
    try:
        while True:
            pending = loop.run_in_executor(None, next, iterator, _END)
            item = await asyncio.shield(pending)
            if item is _END:
                return
            yield item
    finally:
        if pending is None or pending.done():
            _close_stream(iterator)
        elif inspect.isgenerator(iterator):
            pending.add_done_callback(lambda future: _close_after(future, iterator))
        else:
            pending.add_done_callback(_discard_result)
            _close_stream(iterator)


def _discard_result(future: "asyncio.Future[Any]") -> None:
    if not future.cancelled() and future.exception() is not None:
        LOGGER.debug("Stream read ended with %r after cancellation", future.exception())


def _close_after(future: "asyncio.Future[Any]", iterator: Iterator[Any]) -> None:
    _discard_result(future)
    _close_stream(iterator)


def _close_stream(iterator: Iterator[Any]) -> None:
    close = getattr(iterator, "close", None)
    if close is not None:
        close()
