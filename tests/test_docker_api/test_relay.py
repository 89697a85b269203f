"""Тесты ретрансляции потоков в приёмники."""

from __future__ import annotations

import asyncio
from typing import Any, AsyncGenerator, List

import pytest
from docker.errors import DockerException

from dockdash.docker_api import relay
from dockdash.docker_api.errors import ErrorContext
from dockdash.docker_api.exceptions import DaemonError, ErrorKind, UnexpectedError
from dockdash.notifications import NotificationChannel


class Source:
    """Асинхронный источник, отслеживающий закрытие."""

    def __init__(self, items: List[Any], error: BaseException = None) -> None:
        self.items = list(items)
        self.error = error
        self.closed = False

    def __aiter__(self) -> "Source":
        return self

    async def __anext__(self) -> Any:
        if self.items:
            return self.items.pop(0)
        if self.error is not None:
            raise self.error
        raise StopAsyncIteration

    async def aclose(self) -> None:
        self.closed = True


async def _generate(items: List[Any]) -> AsyncGenerator[Any, None]:
    for item in items:
        yield item


def test_guard_stream_translates_failures() -> None:
    source = Source(["a"], DockerException("connection aborted"))
    context = ErrorContext("fetch logs for", "container", "web")

    async def collect():
        return [item async for item in relay.guard_stream(source, context)]

    with pytest.raises(DaemonError) as exc_info:
        asyncio.run(collect())
    assert exc_info.value.kind is ErrorKind.UNREACHABLE
    assert source.closed


def test_relay_counts_delivered_items() -> None:
    received: List[int] = []
    delivered = asyncio.run(relay.relay(_generate([1, 2, 3]), received.append, what="item"))
    assert delivered == 3
    assert received == [1, 2, 3]


def test_relay_accepts_async_sink() -> None:
    received: List[int] = []

    async def sink(item: int) -> None:
        await asyncio.sleep(0)
        received.append(item)

    asyncio.run(relay.relay(_generate([1, 2]), sink, what="item"))
    assert received == [1, 2]


def test_progress_events_drop_malformed_records() -> None:
    records = [{"status": "a"}, None, {"status": "b", "id": 3}, {"status": "c"}]

    async def collect():
        return [event.status async for event in relay.progress_events(_generate(records))]

    assert asyncio.run(collect()) == ["a", "c"]


def test_closed_channel_stops_relay() -> None:
    async def scenario():
        channel = NotificationChannel()
        await channel.send("first")
        channel.close()
        return await relay.relay(_generate(["second", "third"]), channel, what="log")

    with pytest.raises(UnexpectedError) as exc_info:
        asyncio.run(scenario())
    assert exc_info.value.context == {"what": "log", "delivered": 0}
