"""Исключения фасада: ошибки демона и ошибки собственного канала доставки."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Dict, Optional

LOGGER = logging.getLogger(__name__)


class ErrorKind(str, Enum):
    """Классы ошибок демона, различимые для вызывающей стороны."""

    NOT_FOUND = "not_found"
    PERMISSION_DENIED = "permission_denied"
    IN_USE = "in_use"
    UNREACHABLE = "unreachable"
    OTHER = "other"


class FacadeError(Exception):
    """Базовое исключение фасада с сообщением и контекстом операции."""

    wire_name = "UnexpectedError"

    def __init__(self, message: str, *, context: Optional[Dict[str, Any]] = None) -> None:
        """Сохраняет сообщение и контекст, логируя ошибку."""

        self.message = message
        self.context = context or {}
        super().__init__(message)
        LOGGER.error("%s | context=%s", message, self.context)

    def to_dict(self) -> Dict[str, str]:
        """Сериализует ошибку в форму {"<Вид>": "<сообщение>"}."""

        return {self.wire_name: self.message}


class DaemonError(FacadeError):
    """Сбой, вызванный демоном контейнеров или его транспортом."""

    wire_name = "DockerError"

    def __init__(
        self,
        message: str,
        *,
        kind: ErrorKind = ErrorKind.OTHER,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.kind = kind
        super().__init__(message, context=context)


class UnexpectedError(FacadeError):
    """Сбой в собственном пути доставки фасада (например, отказ приёмника)."""

    wire_name = "UnexpectedError"


class ConnectionSetupError(DaemonError):
    """Не удалось установить единственную сессию с демоном при запуске."""

    def __init__(self, base_url: str, reason: str) -> None:
        super().__init__(
            f"Cannot connect to Docker daemon at '{base_url or 'local default'}': {reason}",
            kind=ErrorKind.UNREACHABLE,
            context={"base_url": base_url, "reason": reason},
        )


class ValidationError(FacadeError):
    """Некорректные входные данные команды; до демона запрос не доходит."""

    def __init__(self, field: str, value: Any, reason: str) -> None:
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(
            f"Invalid value for '{field}': {reason} (value={value!r})",
            context={"field": field, "value": value, "reason": reason},
        )


class ChannelClosedError(Exception):
    """Отправка в закрытый канал уведомлений."""
