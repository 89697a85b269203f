"""Преобразование записей прогресса `docker pull` в ProgressEvent."""

from __future__ import annotations

from typing import Any, Optional

from dockdash.docker_api.models import ProgressDetail, ProgressEvent


def to_progress_event(raw: Any) -> Optional[ProgressEvent]:
    """Возвращает ProgressEvent или None, если запись не похожа на прогресс."""

    if not isinstance(raw, dict):
        return None
    status = raw.get("status")
    if not isinstance(status, str):
        return None
    item_id = raw.get("id")
    if item_id is not None and not isinstance(item_id, str):
        return None

    detail_raw = raw.get("progressDetail", raw.get("progress_detail"))
    detail: Optional[ProgressDetail] = None
    if detail_raw is not None:
        if not isinstance(detail_raw, dict):
            return None
        current = detail_raw.get("current")
        total = detail_raw.get("total")
        if not (_optional_int(current) and _optional_int(total)):
            return None
        detail = ProgressDetail(current=current, total=total)
    return ProgressEvent(status=status, progress_detail=detail, id=item_id)


def _optional_int(value: Any) -> bool:
    return value is None or (isinstance(value, int) and not isinstance(value, bool))
