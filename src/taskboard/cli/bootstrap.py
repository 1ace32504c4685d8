# src/taskboard/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- picks the storage backend from settings,
- initializes it (a failure is logged and the process keeps serving),
- builds the FastAPI app around the shared store.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI

from ..api.app import create_app
from ..config import STORAGE_SQLITE, Settings, get_settings
from ..core.ports import TaskStore
from ..tasks.sqlite_store import SqliteTaskStore
from ..tasks.task_errors import PersistenceError
from ..tasks.task_store import JsonTaskStore

logger = logging.getLogger(__name__)


def create_task_store(settings: Settings) -> TaskStore:
    """Construct (but do not initialize) the backend named by settings.storage_type."""
    if settings.storage_type == STORAGE_SQLITE:
        return SqliteTaskStore(settings.database_url)
    return JsonTaskStore(settings.data_file)


def initialize_store(store: TaskStore) -> bool:
    """
    Initialize the store, tolerating storage failures.

    Returns False when initialization failed; the store is then left empty and
    the server still starts.
    """
    try:
        store.initialize()
    except PersistenceError as e:
        logger.warning("Storage initialization failed, continuing with an empty store: %s", e)
        return False
    return True


def create_application(*, settings: Settings | None = None) -> FastAPI:
    """
    Build the ready-to-serve app from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    store = create_task_store(settings)
    initialize_store(store)
    logger.info("Using %s storage (%s)", settings.storage_type, type(store).__name__)
    return create_app(store, settings)
