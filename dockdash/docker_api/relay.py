"""Ретрансляция потоков демона (логи, прогресс загрузки) в приёмник вызывающей стороны.

Порядок доставки совпадает с порядком поступления. Поток завершается при
конце данных, первой ошибке демона (DaemonError) или отказе приёмника
(UnexpectedError). Таймаута нет: зависший поток держит ретранслятор, пока
вызывающая сторона не закроет свой канал или не отменит задачу.
"""

from __future__ import annotations

import logging
from contextlib import aclosing
from typing import Any, AsyncGenerator, AsyncIterator

from dockdash.docker_api.client import RuntimeClient
from dockdash.docker_api.errors import DAEMON_FAILURES, ErrorContext, classify_failure
from dockdash.docker_api.exceptions import UnexpectedError
from dockdash.docker_api.models import ProgressEvent
from dockdash.docker_api.progress import to_progress_event
from dockdash.notifications import Sink, deliver

LOGGER = logging.getLogger(__name__)


async def guard_stream(
    source: AsyncIterator[Any], context: ErrorContext
) -> AsyncGenerator[Any, None]:
    """Переводит сбои источника в DaemonError и гарантирует его закрытие."""

    try:
        while True:
            try:
                item = await source.__anext__()
            except StopAsyncIteration:
                return
            except DAEMON_FAILURES as exc:
                raise classify_failure(exc, context) from exc
            yield item
    finally:
        aclose = getattr(source, "aclose", None)
        if aclose is not None:
            await aclose()


async def progress_events(
    source: AsyncGenerator[Any, None],
) -> AsyncGenerator[ProgressEvent, None]:
    """Оставляет только записи, приводимые к ProgressEvent; остальные отбрасывает."""

    async with aclosing(source) as records:
        async for raw in records:
            event = to_progress_event(raw)
            if event is None:
                LOGGER.debug("Dropping malformed pull progress record: %r", raw)
                continue
            yield event


async def relay(items: AsyncGenerator[Any, None], sink: Sink, *, what: str) -> int:
    """Передаёт элементы в приёмник по одному и возвращает число доставленных."""

    delivered = 0
    async with aclosing(items) as stream:
        async for item in stream:
            try:
                await deliver(sink, item)
            except Exception as exc:
                raise UnexpectedError(
                    f"Failed to emit {what}: {exc}",
                    context={"what": what, "delivered": delivered},
                ) from exc
            delivered += 1
    return delivered


def log_lines(client: RuntimeClient, container_name: str) -> AsyncGenerator[str, None]:
    context = ErrorContext("fetch logs for", "container", container_name)
    return guard_stream(client.stream_logs(container_name), context)


def pull_progress(client: RuntimeClient, image_ref: str) -> AsyncGenerator[ProgressEvent, None]:
    context = ErrorContext("pull", "image", image_ref)
    return progress_events(guard_stream(client.stream_pull(image_ref), context))


async def relay_logs(client: RuntimeClient, container_name: str, sink: Sink) -> int:
    """Ретранслирует stdout/stderr контейнера (весь backlog и новые строки)."""

    delivered = await relay(log_lines(client, container_name), sink, what="log")
    LOGGER.info("Log stream of container '%s' ended after %d lines", container_name, delivered)
    return delivered


async def relay_pull_progress(client: RuntimeClient, image_ref: str, sink: Sink) -> int:
    """Ретранслирует прогресс загрузки образа; битые записи пропускаются."""

    delivered = await relay(pull_progress(client, image_ref), sink, what="progress update")
    LOGGER.info("Image '%s' pulled (%d progress events)", image_ref, delivered)
    return delivered
