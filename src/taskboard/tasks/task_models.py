# src/taskboard/tasks/task_models.py

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

logger = logging.getLogger(__name__)


class TaskStatus(StrEnum):
    """Task lifecycle status (closed set)."""

    TODO = "todo"
    IN_PROGRESS = "in_progress"
    DONE = "done"

    @classmethod
    def parse(cls, raw: str | None) -> TaskStatus | None:
        """Return the matching status, or None when `raw` is not an allowed value."""
        if not raw:
            return None
        try:
            return cls(raw)
        except ValueError:
            return None

    @classmethod
    def from_db(cls, raw: str | None) -> TaskStatus:
        # Stored rows written by another tool may carry junk; keep the invariant.
        status = cls.parse(raw)
        if status is None:
            logger.warning("Unknown stored status %r, using %s", raw, cls.TODO.value)
            return cls.TODO
        return status


@dataclass(frozen=True, slots=True)
class Task:
    id: str
    title: str
    description: str
    status: TaskStatus

    def to_dict(self) -> dict[str, str]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "status": self.status.value,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Task:
        return cls(
            id=str(data.get("id", "")),
            title=str(data.get("title") or ""),
            description=str(data.get("description") or ""),
            status=TaskStatus.from_db(data.get("status")),
        )
