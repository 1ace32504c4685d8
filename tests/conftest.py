# tests/conftest.py

from __future__ import annotations

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from taskboard.api.app import create_app
from taskboard.tasks.sqlite_store import SqliteTaskStore
from taskboard.tasks.task_store import JsonTaskStore


@pytest.fixture()
def data_file(tmp_path: Path) -> Path:
    return tmp_path / "data" / "tasks.json"


@pytest.fixture()
def json_store(data_file: Path) -> JsonTaskStore:
    store = JsonTaskStore(data_file)
    store.initialize()
    return store


@pytest.fixture()
def sqlite_store(tmp_path: Path) -> SqliteTaskStore:
    store = SqliteTaskStore(tmp_path / "data" / "tasks.sqlite3")
    store.initialize()
    return store


@pytest.fixture(params=["json", "sqlite"])
def store(request: pytest.FixtureRequest, tmp_path: Path):
    """
    Every backend must pass the same contract tests.

    We keep real files / real SQLite here because persistence is part of what we test.
    """
    if request.param == "json":
        s = JsonTaskStore(tmp_path / "tasks.json")
    else:
        s = SqliteTaskStore(tmp_path / "tasks.sqlite3")
    s.initialize()
    return s


@pytest.fixture()
def client(json_store: JsonTaskStore) -> TestClient:
    return TestClient(create_app(json_store))
