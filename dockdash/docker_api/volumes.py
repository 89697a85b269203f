"""Проекция сырых записей томов."""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

from dockdash.docker_api.models import VolumeSummary

# Список ограничен "висячими" томами, на которые не ссылается ни один контейнер
DANGLING_FILTER: Dict[str, Any] = {"dangling": True}


def list_volumes(response: Optional[Mapping[str, Any]]) -> List[VolumeSummary]:
    """Возвращает тома из ответа `GET /volumes` (поле "Volumes" может быть null)."""

    if not response:
        return []
    return [to_volume_summary(record) for record in response.get("Volumes") or []]


def to_volume_summary(record: Mapping[str, Any]) -> VolumeSummary:
    labels = record.get("Labels")
    status = record.get("Status")
    return VolumeSummary(
        name=record.get("Name", ""),
        driver=record.get("Driver", ""),
        mountpoint=record.get("Mountpoint"),
        labels=dict(labels) if labels is not None else None,
        scope=record.get("Scope"),
        status=dict(status) if status is not None else None,
    )
