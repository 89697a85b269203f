"""Схема config.json по умолчанию."""

from __future__ import annotations

from typing import Any, Dict

DEFAULT_CONFIG: Dict[str, Any] = {
    "version": "1.0.0",
    "daemon": {
        # пустая строка: локальный сокет/канал по умолчанию (DOCKER_HOST или /var/run/docker.sock)
        "base_url": "",
        "timeout_sec": 60,
        "api_version": "auto",
    },
    "logging": {
        "enabled": True,
        "level": "INFO",
        "max_file_size_mb": 10,
        "max_archived_files": 5,
    },
    "streams": {
        "pull_progress_channel": "pull-progress",
    },
}
