"""Каналы доставки событий: именованные каналы процесса и закрываемые каналы вызова."""

from __future__ import annotations

import asyncio
import inspect
from collections import defaultdict
from typing import Any, AsyncIterator, Awaitable, Callable, DefaultDict, List, Union

from dockdash.docker_api.exceptions import ChannelClosedError

PULL_PROGRESS_CHANNEL = "pull-progress"

Sink = Callable[[Any], Union[None, Awaitable[None]]]


async def deliver(sink: Sink, item: Any) -> None:
    """Передаёт элемент приёмнику; поддерживает обычные и async-приёмники."""

    result = sink(item)
    if inspect.isawaitable(result):
        await result


class NotificationHub:
    """Именованные каналы уровня приложения ("pull-progress" и т.п.).

    В отличие от наблюдателей настроек, ошибка слушателя не глотается, а
    доходит до отправителя: так ретранслятор узнаёт об отказе доставки.
    """

    def __init__(self) -> None:
        self._listeners: DefaultDict[str, List[Sink]] = defaultdict(list)

    def subscribe(self, channel: str, listener: Sink) -> Callable[[], None]:
        """Регистрирует слушателя и возвращает функцию отписки."""

        if listener not in self._listeners[channel]:
            self._listeners[channel].append(listener)
        return lambda: self.unsubscribe(channel, listener)

    def unsubscribe(self, channel: str, listener: Sink) -> None:
        if listener in self._listeners.get(channel, []):
            self._listeners[channel].remove(listener)

    def listeners(self, channel: str) -> List[Sink]:
        return list(self._listeners.get(channel, []))

    async def emit(self, channel: str, payload: Any) -> None:
        for listener in self.listeners(channel):
            await deliver(listener, payload)

    def emitter(self, channel: str) -> Sink:
        """Возвращает приёмник, который публикует элементы в канал."""

        async def _emit(payload: Any) -> None:
            await self.emit(channel, payload)

        return _emit


class NotificationChannel:
    """Канал одного вызова на базе asyncio.Queue.

    Вызывающая сторона читает его через `async for`; закрытие канала
    прерывает ретрансляцию: следующая отправка поднимает ChannelClosedError.
    """

    _CLOSED = object()

    def __init__(self) -> None:
        self._queue: "asyncio.Queue[Any]" = asyncio.Queue()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    async def send(self, item: Any) -> None:
        if self._closed:
            raise ChannelClosedError("channel is closed")
        await self._queue.put(item)

    async def __call__(self, item: Any) -> None:
        await self.send(item)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._queue.put_nowait(self._CLOSED)

    async def _next(self) -> Any:
        item = await self._queue.get()
        if item is self._CLOSED:
            # маркер остаётся в очереди для остальных читателей
            self._queue.put_nowait(self._CLOSED)
        return item

    async def receive(self, default: Any = None) -> Any:
        """Возвращает следующий элемент или default, если канал закрыт и пуст."""

        item = await self._next()
        return default if item is self._CLOSED else item

    async def __aiter__(self) -> AsyncIterator[Any]:
        while True:
            item = await self._next()
            if item is self._CLOSED:
                return
            yield item
