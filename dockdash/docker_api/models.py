"""Стабильные структуры данных, которые фасад отдаёт вызывающей стороне.

Каждый экземпляр собирается заново на каждый вызов и не изменяется.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple


@dataclass(frozen=True, slots=True)
class ContainerSummary:
    """Контейнер в том виде, в каком его последним сообщил демон."""

    name: Optional[str]
    status: Optional[str]  # человекочитаемый текст ("Up 3 minutes")
    state: Optional[str]  # created / running / paused / exited / dead / restarting / removing
    ports: Tuple[str, ...] = ()  # IP-адреса хоста, к которым привязаны порты

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "status": self.status,
            "state": self.state,
            "ports": list(self.ports),
        }


@dataclass(frozen=True, slots=True)
class ImageSummary:
    """Образ: основная ссылка repo:tag и размер в байтах."""

    repo_tag: str = ""
    size: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {"repo_tag": self.repo_tag, "size": self.size}


@dataclass(frozen=True, slots=True)
class VolumeSummary:
    """Том демона."""

    name: str
    driver: str
    mountpoint: Optional[str] = None
    labels: Optional[Mapping[str, str]] = None
    scope: Optional[str] = None
    status: Optional[Mapping[str, Any]] = None  # непрозрачные данные драйвера

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "driver": self.driver,
            "mountpoint": self.mountpoint,
            "labels": dict(self.labels) if self.labels is not None else None,
            "scope": self.scope,
            "status": dict(self.status) if self.status is not None else None,
        }


@dataclass(frozen=True, slots=True)
class NetworkSummary:
    """Сеть; все четыре идентифицирующих поля обязательны."""

    id: str
    name: str
    driver: str
    scope: str
    internal: Optional[bool] = None
    enable_ipv6: Optional[bool] = None
    labels: Optional[Mapping[str, str]] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "driver": self.driver,
            "scope": self.scope,
            "internal": self.internal,
            "enable_ipv6": self.enable_ipv6,
            "labels": dict(self.labels) if self.labels is not None else None,
        }


@dataclass(frozen=True, slots=True)
class NetworkMember:
    """Контейнер, подключённый к сети."""

    id: str
    name: str
    network_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name, "network_id": self.network_id}


@dataclass(frozen=True, slots=True)
class ProgressDetail:
    current: Optional[int] = None
    total: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"current": self.current, "total": self.total}


@dataclass(frozen=True, slots=True)
class ProgressEvent:
    """Одно событие прогресса загрузки образа."""

    status: str
    progress_detail: Optional[ProgressDetail] = None
    id: Optional[str] = None  # слой/blob, который сейчас загружается

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status,
            "progress_detail": (
                self.progress_detail.to_dict() if self.progress_detail is not None else None
            ),
            "id": self.id,
        }


@dataclass(frozen=True, slots=True)
class PortMapping:
    """Разобранная опция публикации порта "hostPort:containerPort"."""

    exposed_ports: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    port_bindings: Dict[str, List[Dict[str, str]]] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not self.exposed_ports and not self.port_bindings
