# src/taskboard/tasks/task_store.py

from __future__ import annotations

import contextlib
import dataclasses
import json
import logging
import os
import threading
from pathlib import Path

from .task_errors import NotFoundError, PersistenceError
from .task_models import Task
from .validation import check_new_task, check_status_change

logger = logging.getLogger(__name__)


class JsonTaskStore:
    """
    JSON file task store.

    The whole collection lives in memory and is rewritten to disk on every
    mutation (tmp file + os.replace, so a crash never leaves a half-written file).
    Reads never touch disk after initialize().

    Thread-safety:
    - one lock serializes get_all/create/update/delete and the write itself
    - a mutation only replaces the in-memory list after the write succeeded

    Ids come from a counter seeded at initialize() and never recomputed,
    so ids of deleted tasks are not handed out again.
    """

    def __init__(self, data_file: str | Path = "tasks.json") -> None:
        self._path = Path(data_file)
        self._lock = threading.Lock()
        self._tasks: list[Task] = []
        self._next_id = 1

    @property
    def path(self) -> Path:
        return self._path

    def initialize(self) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            raw = self._path.read_text("utf-8") if self._path.exists() else ""
        except (OSError, UnicodeDecodeError) as e:
            raise PersistenceError(f"cannot read {self._path}: {e}") from e

        loaded = self._decode(raw)

        with self._lock:
            self._tasks = loaded
            self._next_id = self._seed_next_id(loaded)

        logger.info(
            "JsonTaskStore ready file=%s total=%s next_id=%s",
            self._path,
            len(loaded),
            self._next_id,
        )

    # ---- low-level helpers ----

    def _decode(self, raw: str) -> list[Task]:
        if not raw.strip():
            return []
        try:
            data = json.loads(raw)
        except (json.JSONDecodeError, RecursionError) as e:
            raise PersistenceError(f"corrupt data file {self._path}: {e}") from e
        if not isinstance(data, list):
            raise PersistenceError(f"corrupt data file {self._path}: expected a JSON array")
        return [self._decode_item(i, item) for i, item in enumerate(data)]

    def _decode_item(self, index: int, item: object) -> Task:
        # Items that do not map to a valid Task make the whole file unreadable.
        if not isinstance(item, dict):
            raise PersistenceError(f"corrupt data file {self._path}: item {index} is not an object")
        task = Task.from_dict(item)
        if not task.title:
            raise PersistenceError(f"corrupt data file {self._path}: item {index} has no title")
        return task

    @staticmethod
    def _seed_next_id(tasks: list[Task]) -> int:
        max_id = 0
        for t in tasks:
            try:
                n = int(t.id)
            except ValueError:
                continue
            max_id = max(max_id, n)
        return max_id + 1

    def _write(self, tasks: list[Task]) -> None:
        """Write the full collection atomically. Must be called with the lock held."""
        payload = json.dumps([t.to_dict() for t in tasks], ensure_ascii=False, indent=2)
        tmp = self._path.with_suffix(".tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp, "w", encoding="utf-8") as f:
                f.write(payload)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp, self._path)
        except OSError as e:
            with contextlib.suppress(OSError):
                tmp.unlink()
            logger.exception("Failed to write tasks to %s", self._path)
            raise PersistenceError(f"cannot write {self._path}: {e}") from e

    def _index_of(self, task_id: str) -> int:
        for i, t in enumerate(self._tasks):
            if t.id == task_id:
                return i
        raise NotFoundError(task_id)

    # ---- public API ----

    def get_all(self) -> list[Task]:
        with self._lock:
            return list(self._tasks)

    def create(self, title: str, description: str = "", status: str = "") -> Task:
        effective = check_new_task(title, status)

        with self._lock:
            task = Task(
                id=str(self._next_id),
                title=title,
                description=description,
                status=effective,
            )
            updated = [*self._tasks, task]
            self._write(updated)
            self._tasks = updated
            self._next_id += 1

        logger.debug("Task created id=%s status=%s", task.id, task.status.value)
        return task

    def update(
        self,
        task_id: str,
        title: str = "",
        description: str = "",
        status: str = "",
    ) -> Task:
        with self._lock:
            idx = self._index_of(task_id)
            new_status = check_status_change(status)

            current = self._tasks[idx]
            changed = dataclasses.replace(
                current,
                title=title or current.title,
                description=description or current.description,
                status=new_status or current.status,
            )
            updated = list(self._tasks)
            updated[idx] = changed
            self._write(updated)
            self._tasks = updated

        logger.debug("Task updated id=%s status=%s", changed.id, changed.status.value)
        return changed

    def delete(self, task_id: str) -> None:
        with self._lock:
            idx = self._index_of(task_id)
            updated = self._tasks[:idx] + self._tasks[idx + 1:]
            self._write(updated)
            self._tasks = updated

        logger.debug("Task deleted id=%s", task_id)
