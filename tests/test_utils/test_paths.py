"""Тесты расчёта рабочей директории."""

from __future__ import annotations

from pathlib import Path

from dockdash.utils.paths import resolve_workspace


def test_workspace_from_environment(tmp_path: Path) -> None:
    assert resolve_workspace({"DOCKDASH_HOME": str(tmp_path)}) == tmp_path / ".dockdash"


def test_workspace_defaults_to_home() -> None:
    assert resolve_workspace({}) == Path.home() / ".dockdash"
