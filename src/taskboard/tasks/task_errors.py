# src/taskboard/tasks/task_errors.py

"""
Errors raised across the task store boundary.

The HTTP layer maps them onto status codes:
- ValidationError  -> 400
- NotFoundError    -> 404
- PersistenceError -> 500
"""

from __future__ import annotations


class TaskStoreError(Exception):
    """Base class for every error a task store raises."""


class ValidationError(TaskStoreError):
    """Caller-supplied data violates a field constraint."""


class NotFoundError(TaskStoreError):
    """The referenced task id does not exist."""

    def __init__(self, task_id: str, message: str = "task not found") -> None:
        super().__init__(message)
        self.task_id = task_id


class PersistenceError(TaskStoreError):
    """The storage medium failed to read or write."""
