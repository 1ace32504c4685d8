# src/taskboard/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the HTTP layer.

Request handlers depend on the TaskStore Protocol rather than a concrete backend,
so the JSON file store and the SQLite store stay interchangeable and tests can
swap in either one.
"""

from typing import Protocol

from ..tasks.task_models import Task


class TaskStore(Protocol):
    """
    CRUD contract every storage backend implements.

    Failures are raised as taskboard.tasks.task_errors exceptions:
    ValidationError, NotFoundError, PersistenceError.
    Empty strings passed to update() mean "leave this field unchanged".
    """

    def initialize(self) -> None: ...

    def get_all(self) -> list[Task]: ...

    def create(self, title: str, description: str = "", status: str = "") -> Task: ...

    def update(
            self,
            task_id: str,
            title: str = "",
            description: str = "",
            status: str = "",
    ) -> Task: ...

    def delete(self, task_id: str) -> None: ...
