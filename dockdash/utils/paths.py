"""Централизованное описание путей приложения."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Mapping, Optional

HOME_ENV_VAR = "DOCKDASH_HOME"
WORKSPACE_DIR_NAME = ".dockdash"


def resolve_workspace(environ: Optional[Mapping[str, str]] = None) -> Path:
    """Возвращает рабочую директорию: $DOCKDASH_HOME/.dockdash или ~/.dockdash."""

    env = os.environ if environ is None else environ
    home = Path(env.get(HOME_ENV_VAR) or Path.home())
    return home / WORKSPACE_DIR_NAME
