"""Проекция сырых записей контейнеров и разбор опции публикации порта."""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Optional

from dockdash.docker_api.models import ContainerSummary, PortMapping

DEFAULT_HOST_IP = "0.0.0.0"


def list_containers(records: Iterable[Mapping[str, Any]]) -> List[ContainerSummary]:
    """Возвращает список контейнеров (включая остановленные) в стабильной форме."""

    return [to_container_summary(record) for record in records]


def to_container_summary(record: Mapping[str, Any]) -> ContainerSummary:
    """Строит ContainerSummary из записи `GET /containers/json`."""

    names = record.get("Names") or []
    return ContainerSummary(
        name=strip_name_prefix(names[0]) if names else None,
        status=record.get("Status"),
        state=record.get("State"),
        ports=tuple(_bound_host_ips(record.get("Ports") or [])),
    )


def strip_name_prefix(name: str) -> str:
    """Убирает ровно один ведущий "/" из имени контейнера."""

    return name[1:] if name.startswith("/") else name


def parse_port_mapping(port_mapping: Optional[str]) -> PortMapping:
    """Разбирает "hostPort:containerPort".

    Строка, которая не делится по ":" ровно на две части, не считается
    ошибкой: контейнер создаётся без опубликованных портов.
    """

    if port_mapping is None:
        return PortMapping()
    parts = port_mapping.split(":")
    if len(parts) != 2:
        return PortMapping()

    host_port, container_port = parts
    key = f"{container_port}/tcp"
    return PortMapping(
        exposed_ports={key: {}},
        port_bindings={key: [{"HostIp": DEFAULT_HOST_IP, "HostPort": host_port}]},
    )


def _bound_host_ips(ports: Iterable[Mapping[str, Any]]) -> List[str]:
    result: List[str] = []
    for entry in ports:
        host_ip = entry.get("IP")
        if host_ip:
            result.append(host_ip)
    return result


def container_config(image: str, mapping: PortMapping) -> Dict[str, Any]:
    """Параметры `create_container` для низкоуровневого API docker-py."""

    return {
        "image": image,
        "ports": [_port_spec(key) for key in mapping.exposed_ports],
        "port_bindings": {key: list(bindings) for key, bindings in mapping.port_bindings.items()},
    }


def _port_spec(key: str) -> Any:
    port, _, protocol = key.partition("/")
    if protocol and protocol != "tcp":
        return (port, protocol)
    return port
