"""Классификатор ошибок демона.

Сырые сбои docker-py (исключения транспорта, ответы API с HTTP-статусом и
текстом демона) сводятся к небольшому набору `ErrorKind`. Порядок правил:

1. сбой транспорта (сокет недоступен, таймаут, обрыв потока) -> UNREACHABLE;
2. HTTP-статус ответа, если для вида ресурса есть правило;
3. таблица фраз из текста демона (регистр важен, побеждает первое совпадение);
4. иначе OTHER.

Таблица фраз сохранена ради совместимости сообщений: демон не всегда
отдаёт статус, по которому можно различить случаи.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple, Union

from docker.errors import APIError, DockerException, StreamParseError
from urllib3.exceptions import HTTPError as TransportError

from dockdash.docker_api.exceptions import DaemonError, ErrorKind

PHRASE_RULES: Dict[str, Tuple[Tuple[str, ErrorKind], ...]] = {
    "container": (
        ("No such container", ErrorKind.NOT_FOUND),
        ("permission denied", ErrorKind.PERMISSION_DENIED),
    ),
    "image": (
        ("No such image", ErrorKind.NOT_FOUND),
        ("permission denied", ErrorKind.PERMISSION_DENIED),
    ),
    "volume": (
        ("No such volume", ErrorKind.NOT_FOUND),
        ("in use", ErrorKind.IN_USE),
    ),
    "network": (
        ("not found", ErrorKind.NOT_FOUND),
        ("in use", ErrorKind.IN_USE),
    ),
}

# 409 у контейнеров означает "контейнер запущен/остановлен", а не занятость
STATUS_RULES: Dict[str, Dict[int, ErrorKind]] = {
    "container": {404: ErrorKind.NOT_FOUND, 403: ErrorKind.PERMISSION_DENIED},
    "image": {404: ErrorKind.NOT_FOUND, 403: ErrorKind.PERMISSION_DENIED},
    "volume": {404: ErrorKind.NOT_FOUND, 409: ErrorKind.IN_USE},
    "network": {404: ErrorKind.NOT_FOUND, 409: ErrorKind.IN_USE},
}

RawFailure = Union[BaseException, str]

# Всё, что docker-py может поднять при вызове API или чтении потока
DAEMON_FAILURES: Tuple[type, ...] = (DockerException, OSError, TransportError, StreamParseError)


@dataclass(frozen=True, slots=True)
class ErrorContext:
    """Операция и ресурс, при работе с которыми произошёл сбой."""

    operation: str
    resource: Optional[str] = None  # container / image / volume / network
    identifier: Optional[str] = None

    def to_dict(self) -> Dict[str, Optional[str]]:
        return {
            "operation": self.operation,
            "resource": self.resource,
            "identifier": self.identifier,
        }


def raw_message(failure: RawFailure) -> str:
    """Возвращает исходный текст сбоя без изменений."""

    return failure if isinstance(failure, str) else str(failure)


def status_code_of(failure: RawFailure) -> Optional[int]:
    if isinstance(failure, APIError):
        return failure.status_code
    return None


def is_transport_failure(failure: RawFailure) -> bool:
    """True, если демон не ответил вовсе (а не отклонил запрос)."""

    # APIError наследует requests.HTTPError, а значит и OSError
    if isinstance(failure, (APIError, StreamParseError)):
        return False
    return isinstance(failure, (DockerException, OSError, TransportError))


def classify(failure: RawFailure, context: ErrorContext) -> ErrorKind:
    """Сопоставляет сырой сбой одному из видов ErrorKind."""

    if is_transport_failure(failure):
        return ErrorKind.UNREACHABLE
    if context.resource is None:
        return ErrorKind.OTHER

    status = status_code_of(failure)
    if status is not None:
        kind = STATUS_RULES.get(context.resource, {}).get(status)
        if kind is not None:
            return kind

    message = raw_message(failure)
    for phrase, kind in PHRASE_RULES.get(context.resource, ()):
        if phrase in message:
            return kind
    return ErrorKind.OTHER


def describe(kind: ErrorKind, context: ErrorContext, message: str) -> str:
    """Формирует человекочитаемое сообщение с префиксом по виду ошибки."""

    resource = context.resource or ""
    target = f"'{context.identifier}'" if context.identifier is not None else ""
    if kind is ErrorKind.NOT_FOUND:
        # образы исторически пишутся со строчной буквы
        label = resource if resource == "image" else resource.capitalize()
        return f"{label} {target} not found: {message}"
    if kind is ErrorKind.PERMISSION_DENIED:
        return (
            f"Permission denied while attempting to {context.operation} "
            f"{resource} {target}: {message}"
        )
    if kind is ErrorKind.IN_USE:
        if resource == "volume":
            return f"Volume {target} is in use and cannot be removed: {message}"
        return f"{resource.capitalize()} {target} is in use: {message}"

    subject = " ".join(part for part in (context.operation, resource, target) if part)
    if kind is ErrorKind.UNREACHABLE:
        return f"Docker daemon is unreachable while attempting to {subject}: {message}"
    return f"Failed to {subject}: {message}"


def classify_failure(failure: RawFailure, context: ErrorContext) -> DaemonError:
    """Строит DaemonError для сбоя: вид, сообщение и контекст операции."""

    kind = classify(failure, context)
    message = raw_message(failure)
    details: Dict[str, Any] = dict(context.to_dict(), kind=kind.value)
    status = status_code_of(failure)
    if status is not None:
        details["status_code"] = status
    return DaemonError(describe(kind, context, message), kind=kind, context=details)
