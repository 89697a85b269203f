"""Различные вспомогательные функции."""

from __future__ import annotations

_SOCKET_SCHEMES = ("unix://", "tcp://", "npipe://", "http://", "https://", "ssh://")
_WINDOWS_PIPE_PREFIX = "//./pipe/"


def normalize_socket_path(raw_value: str) -> str:
    """Возвращает адрес демона с корректной схемой (unix:// или npipe://).

    Пустая строка остаётся пустой: это значит "локальный адрес по умолчанию".
    """

    value = raw_value.strip()
    if not value:
        return value
    lowered = value.lower()
    if lowered.startswith(_SOCKET_SCHEMES):
        return value
    if lowered.replace("\\", "/").startswith(_WINDOWS_PIPE_PREFIX):
        return "npipe://" + value.replace("\\", "/")
    if value.startswith("/"):
        return f"unix://{value}"
    return value
