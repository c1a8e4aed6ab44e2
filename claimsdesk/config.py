"""Application configuration loaded from an ``app.env`` file."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import dotenv_values

CONFIG_FILE_NAME = "app.env"
_FALLBACK_DIRS = (".", "./", "../")
_FIELDS = {
    "DB_DRIVER": "db_driver",
    "DB_SOURCE": "db_source",
    "SERVER_ADDRESS": "server_address",
}


@dataclass(frozen=True)
class Config:
    """Settings the application needs to start."""

    db_driver: str = ""
    db_source: str = ""
    server_address: str = ""


def _find_config(directories) -> Path | None:
    for directory in directories:
        candidate = Path(directory) / CONFIG_FILE_NAME
        if candidate.is_file():
            return candidate
    return None


def load_config(path: str = "") -> Config:
    """Load ``app.env`` from *path*, falling back to the current and parent directory.

    When the file is found in *path*, environment variables override the
    keys it defines. Raises ``FileNotFoundError`` when no file is found.
    """
    found = _find_config([path]) if path else None
    use_environment = found is not None
    if found is None:
        found = _find_config(_FALLBACK_DIRS)
        if found is None:
            searched = ", ".join(([path] if path else []) + list(_FALLBACK_DIRS))
            raise FileNotFoundError(
                f"config file {CONFIG_FILE_NAME!r} not found in: {searched}"
            )

    settings = {
        key.upper(): ("" if value is None else value)
        for key, value in dotenv_values(found).items()
    }
    if use_environment:
        settings = {key: os.environ.get(key, value) for key, value in settings.items()}

    return Config(
        **{field: settings.get(key, "") for key, field in _FIELDS.items()}
    )