# src/taskboard/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app, built once at startup.
- Every value has a default, so the server starts with an empty environment.
- Each setting reads TASKBOARD_<NAME> first, then the legacy unprefixed name
  (HTTP_PORT, DATA_FILE, STORAGE_TYPE, DATABASE_URL) where one exists.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import List

logger = logging.getLogger(__name__)

ENV_PREFIX = "TASKBOARD"

STORAGE_JSON = "json"
STORAGE_SQLITE = "sqlite"
STORAGE_TYPES = (STORAGE_JSON, STORAGE_SQLITE)


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _load_dotenv_if_available() -> None:
    """Load .env locally if python-dotenv is installed. Safe no-op otherwise."""
    try:
        from dotenv import load_dotenv  # type: ignore
    except ImportError:
        return
    load_dotenv(override=False)


_load_dotenv_if_available()


def _first_env(*names: str, default: str | None = None) -> str | None:
    for n in names:
        v = os.getenv(n)
        if v is not None and v.strip() != "":
            return v
    return default


def _env_int(*names: str, default: int) -> int:
    raw = _first_env(*names)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring non-integer %s=%r, using %s", names[0], raw, default)
        return default


def _env_list(*names: str, default: List[str]) -> List[str]:
    raw = _first_env(*names)
    if raw is None:
        return list(default)
    return [p.strip() for p in raw.replace(",", " ").split() if p.strip()]


def _env_path(*names: str, default: Path) -> Path:
    raw = _first_env(*names)
    if raw is None:
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Storage ----
    data_dir: Path
    storage_type: str
    data_file: Path
    database_url: str

    # ---- HTTP ----
    http_host: str
    http_port: int
    cors_origins: List[str]

    @staticmethod
    def from_env() -> "Settings":
        app_name = _first_env(_k("APP_NAME"), default="taskboard") or "taskboard"
        log_level = (_first_env(_k("LOG_LEVEL"), default="INFO") or "INFO").upper()

        data_dir = _env_path(_k("DATA_DIR"), default=Path(".local/taskboard"))

        storage_type = (
            _first_env(_k("STORAGE_TYPE"), "STORAGE_TYPE", default=STORAGE_JSON) or STORAGE_JSON
        ).strip().lower()
        if storage_type not in STORAGE_TYPES:
            logger.warning("Unknown storage type %r, falling back to %s", storage_type, STORAGE_JSON)
            storage_type = STORAGE_JSON

        data_file = _env_path(_k("DATA_FILE"), "DATA_FILE", default=data_dir / "tasks.json")
        database_url = _first_env(
            _k("DATABASE_URL"), "DATABASE_URL", default=str(data_dir / "tasks.sqlite3")
        ) or str(data_dir / "tasks.sqlite3")

        http_host = _first_env(_k("HTTP_HOST"), default="0.0.0.0") or "0.0.0.0"
        http_port = _env_int(_k("HTTP_PORT"), "HTTP_PORT", default=8080)
        cors_origins = _env_list(_k("CORS_ORIGINS"), default=["*"])

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            storage_type=storage_type,
            data_file=data_file,
            database_url=database_url.strip(),
            http_host=http_host,
            http_port=http_port,
            cors_origins=cors_origins,
        )


_SETTINGS: Settings | None = None


def get_settings() -> Settings:
    global _SETTINGS
    if _SETTINGS is None:
        _SETTINGS = Settings.from_env()
    return _SETTINGS
