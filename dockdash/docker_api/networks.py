"""Проекция сырых записей сетей и участников сети."""

from __future__ import annotations

import logging
from typing import Any, Iterable, List, Mapping, Optional

from dockdash.docker_api.models import NetworkMember, NetworkSummary

LOGGER = logging.getLogger(__name__)

REQUIRED_FIELDS = ("Id", "Name", "Driver", "Scope")
UNNAMED_MEMBER = "Unnamed"


def list_networks(records: Iterable[Mapping[str, Any]]) -> List[NetworkSummary]:
    """Возвращает сети; записи без Id/Name/Driver/Scope молча отбрасываются."""

    result: List[NetworkSummary] = []
    for record in records:
        summary = to_network_summary(record)
        if summary is None:
            LOGGER.debug("Skipping incomplete network record: %s", record.get("Id"))
            continue
        result.append(summary)
    return result


def to_network_summary(record: Mapping[str, Any]) -> Optional[NetworkSummary]:
    if any(record.get(key) is None for key in REQUIRED_FIELDS):
        return None
    labels = record.get("Labels")
    return NetworkSummary(
        id=record["Id"],
        name=record["Name"],
        driver=record["Driver"],
        scope=record["Scope"],
        internal=record.get("Internal"),
        enable_ipv6=record.get("EnableIPv6"),
        labels=dict(labels) if labels is not None else None,
    )


def list_members(network: Mapping[str, Any]) -> List[NetworkMember]:
    """Возвращает контейнеры из ответа `GET /networks/{id}?verbose=true`."""

    network_id = network.get("Id")
    members = network.get("Containers") or {}
    return [
        NetworkMember(
            id=container_id,
            name=(details or {}).get("Name") or UNNAMED_MEMBER,
            network_id=network_id,
        )
        for container_id, details in members.items()
    ]
