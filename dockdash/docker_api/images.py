"""Проекция сырых записей образов."""

from __future__ import annotations

from typing import Any, Iterable, List, Mapping

from dockdash.docker_api.models import ImageSummary


def list_images(records: Iterable[Mapping[str, Any]]) -> List[ImageSummary]:
    """Возвращает образы (repo:tag, размер)."""

    return [to_image_summary(record) for record in records]


def to_image_summary(record: Mapping[str, Any]) -> ImageSummary:
    repo_tags = record.get("RepoTags") or []
    return ImageSummary(
        repo_tag=repo_tags[0] if repo_tags else "",
        size=int(record.get("Size", 0) or 0),
    )
