# tests/test_config_bootstrap.py

from __future__ import annotations

from dataclasses import replace
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from taskboard.cli.bootstrap import create_application, create_task_store, initialize_store
from taskboard.config import Settings
from taskboard.tasks.sqlite_store import SqliteTaskStore
from taskboard.tasks.task_store import JsonTaskStore

_ENV_NAMES = [
    "TASKBOARD_APP_NAME",
    "TASKBOARD_LOG_LEVEL",
    "TASKBOARD_DATA_DIR",
    "TASKBOARD_STORAGE_TYPE",
    "STORAGE_TYPE",
    "TASKBOARD_DATA_FILE",
    "DATA_FILE",
    "TASKBOARD_DATABASE_URL",
    "DATABASE_URL",
    "TASKBOARD_HTTP_HOST",
    "TASKBOARD_HTTP_PORT",
    "HTTP_PORT",
    "TASKBOARD_CORS_ORIGINS",
]


@pytest.fixture()
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    for name in _ENV_NAMES:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.fixture()
def settings(clean_env: pytest.MonkeyPatch, tmp_path: Path) -> Settings:
    clean_env.setenv("TASKBOARD_DATA_DIR", str(tmp_path))
    return Settings.from_env()


def test_defaults(clean_env: pytest.MonkeyPatch) -> None:
    s = Settings.from_env()
    assert s.app_name == "taskboard"
    assert s.log_level == "INFO"
    assert s.storage_type == "json"
    assert s.data_file == Path(".local/taskboard/tasks.json")
    assert s.database_url == str(Path(".local/taskboard/tasks.sqlite3"))
    assert s.http_host == "0.0.0.0"
    assert s.http_port == 8080
    assert s.cors_origins == ["*"]


def test_legacy_names_and_prefixed_precedence(clean_env: pytest.MonkeyPatch) -> None:
    clean_env.setenv("HTTP_PORT", "9000")
    clean_env.setenv("DATA_FILE", "/srv/tasks.json")
    clean_env.setenv("STORAGE_TYPE", "SQLite")
    clean_env.setenv("DATABASE_URL", "sqlite:///srv/tasks.db")
    clean_env.setenv("TASKBOARD_CORS_ORIGINS", "http://a.test, http://b.test")

    s = Settings.from_env()
    assert s.http_port == 9000
    assert s.data_file == Path("/srv/tasks.json")
    assert s.storage_type == "sqlite"
    assert s.database_url == "sqlite:///srv/tasks.db"
    assert s.cors_origins == ["http://a.test", "http://b.test"]

    clean_env.setenv("TASKBOARD_HTTP_PORT", "9100")
    assert Settings.from_env().http_port == 9100


def test_bad_values_fall_back(clean_env: pytest.MonkeyPatch) -> None:
    clean_env.setenv("TASKBOARD_STORAGE_TYPE", "postgres")
    clean_env.setenv("TASKBOARD_HTTP_PORT", "eighty")

    s = Settings.from_env()
    assert s.storage_type == "json"
    assert s.http_port == 8080


def test_create_task_store_picks_backend(settings: Settings, tmp_path: Path) -> None:
    json_store = create_task_store(settings)
    assert isinstance(json_store, JsonTaskStore)
    assert json_store.path == tmp_path / "tasks.json"

    sqlite_store = create_task_store(replace(settings, storage_type="sqlite"))
    assert isinstance(sqlite_store, SqliteTaskStore)
    assert sqlite_store.path == tmp_path / "tasks.sqlite3"


def test_initialize_failure_is_not_fatal(settings: Settings) -> None:
    settings.data_file.write_text("{broken", "utf-8")

    store = create_task_store(settings)
    assert initialize_store(store) is False
    assert store.get_all() == []


@pytest.mark.parametrize("storage_type", ["json", "sqlite"])
def test_create_application_serves_tasks(settings: Settings, storage_type: str) -> None:
    app = create_application(settings=replace(settings, storage_type=storage_type))
    client = TestClient(app)

    assert client.post("/tasks", json={"title": "Task 1"}).status_code == 201
    assert [t["title"] for t in client.get("/tasks").json()] == ["Task 1"]


@pytest.mark.parametrize(
    "content",
    [b'[{"id":"1","title":"\xff\xfe"}]', b"[" * 100000 + b"]" * 100000, b'[{"id": "1"}]'],
)
def test_unreadable_data_file_does_not_stop_startup(settings: Settings, content: bytes) -> None:
    settings.data_file.write_bytes(content)

    store = create_task_store(settings)
    assert initialize_store(store) is False
    assert store.get_all() == []
