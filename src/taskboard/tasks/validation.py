# src/taskboard/tasks/validation.py

from __future__ import annotations

from .task_errors import ValidationError
from .task_models import TaskStatus


def check_new_task(title: str, status: str) -> TaskStatus:
    """Validate create() input and return the effective status (defaults to todo)."""
    if not title:
        raise ValidationError("title required")
    if not status:
        return TaskStatus.TODO
    parsed = TaskStatus.parse(status)
    if parsed is None:
        raise ValidationError("invalid status")
    return parsed


def check_status_change(status: str) -> TaskStatus | None:
    """Validate an update() status; empty means "leave unchanged" (None)."""
    if not status:
        return None
    parsed = TaskStatus.parse(status)
    if parsed is None:
        raise ValidationError("invalid status")
    return parsed
