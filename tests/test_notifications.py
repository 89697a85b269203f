"""Тесты каналов уведомлений."""

from __future__ import annotations

import asyncio
from typing import Any, List

import pytest

from dockdash.docker_api.exceptions import ChannelClosedError
from dockdash.notifications import NotificationChannel, NotificationHub


class TestNotificationHub:
    def test_emit_reaches_subscribers_of_channel(self) -> None:
        hub = NotificationHub()
        first: List[Any] = []
        other: List[Any] = []
        hub.subscribe("pull-progress", first.append)
        hub.subscribe("other", other.append)

        asyncio.run(hub.emit("pull-progress", "event"))
        assert first == ["event"]
        assert other == []

    def test_unsubscribe(self) -> None:
        hub = NotificationHub()
        received: List[Any] = []
        unsubscribe = hub.subscribe("pull-progress", received.append)
        unsubscribe()

        asyncio.run(hub.emit("pull-progress", "event"))
        assert received == []
        assert hub.listeners("pull-progress") == []

    def test_duplicate_subscription_is_ignored(self) -> None:
        hub = NotificationHub()
        listener = [].append
        hub.subscribe("c", listener)
        hub.subscribe("c", listener)
        assert len(hub.listeners("c")) == 1

    def test_listener_error_reaches_sender(self) -> None:
        hub = NotificationHub()

        def broken(_: Any) -> None:
            raise RuntimeError("listener failed")

        hub.subscribe("c", broken)
        with pytest.raises(RuntimeError):
            asyncio.run(hub.emitter("c")("event"))


class TestNotificationChannel:
    """Канал вызова: чтение через async for, закрытие прерывает отправку."""

    def test_items_are_read_in_order(self) -> None:
        async def scenario():
            channel = NotificationChannel()
            for item in ("a", "b"):
                await channel(item)
            channel.close()
            return [item async for item in channel]

        assert asyncio.run(scenario()) == ["a", "b"]

    def test_send_after_close_raises(self) -> None:
        async def scenario():
            channel = NotificationChannel()
            channel.close()
            channel.close()
            assert channel.closed
            await channel.send("late")

        with pytest.raises(ChannelClosedError):
            asyncio.run(scenario())

    def test_receive_on_closed_channel_keeps_returning_none(self) -> None:
        async def scenario():
            channel = NotificationChannel()
            channel.close()
            return await channel.receive(), await channel.receive()

        assert asyncio.run(scenario()) == (None, None)

    def test_none_is_an_ordinary_item(self) -> None:
        async def scenario():
            channel = NotificationChannel()
            for item in (None, "after"):
                await channel.send(item)
            channel.close()
            return [item async for item in channel]

        assert asyncio.run(scenario()) == [None, "after"]

    def test_receive_default_marks_closed_channel(self) -> None:
        closed = object()

        async def scenario():
            channel = NotificationChannel()
            await channel.send(None)
            channel.close()
            return await channel.receive(closed), await channel.receive(closed)

        first, second = asyncio.run(scenario())
        assert first is None
        assert second is closed
