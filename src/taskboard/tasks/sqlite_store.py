# src/taskboard/tasks/sqlite_store.py

from __future__ import annotations

import contextlib
import logging
import sqlite3
from collections.abc import Iterator
from pathlib import Path

from .task_errors import NotFoundError, PersistenceError
from .task_models import Task, TaskStatus
from .validation import check_new_task, check_status_change

logger = logging.getLogger(__name__)

_SQLITE_URL_PREFIXES = ("sqlite:///", "sqlite://")
_MAX_ROW_ID = 2**63 - 1


def sqlite_path_from_url(url: str | Path) -> Path:
    """Accept either a bare path or a sqlite:///path URL."""
    s = str(url).strip()
    for prefix in _SQLITE_URL_PREFIXES:
        if s.startswith(prefix):
            s = s[len(prefix):]
            break
    return Path(s).expanduser()


class SqliteTaskStore:
    """
    SQLite task store.

    Same contract as JsonTaskStore, but concurrency is left to SQLite:
    - each method opens its own connection (no shared cursors between threads)
    - mutations run inside BEGIN IMMEDIATE so writers are serialized by the DB
    - AUTOINCREMENT guarantees ids of deleted rows are never reused
    """

    def __init__(self, db_path: str | Path = "tasks.sqlite3") -> None:
        self._db_path = sqlite_path_from_url(db_path)

    @property
    def path(self) -> Path:
        return self._db_path

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        # isolation_level=None: transactions are opened explicitly in _transaction().
        conn = sqlite3.connect(str(self._db_path), timeout=30.0, isolation_level=None)
        conn.row_factory = sqlite3.Row
        with contextlib.suppress(sqlite3.Error):
            conn.execute("PRAGMA journal_mode=WAL")
        return conn

    @contextlib.contextmanager
    def _transaction(self) -> Iterator[sqlite3.Connection]:
        try:
            conn = self._get_conn()
        except sqlite3.Error as e:
            raise PersistenceError(f"cannot open {self._db_path}: {e}") from e
        try:
            conn.execute("BEGIN IMMEDIATE")
            try:
                yield conn
            except BaseException:
                conn.execute("ROLLBACK")
                raise
            conn.execute("COMMIT")
        except sqlite3.Error as e:
            logger.exception("SQLite operation failed db=%s", self._db_path)
            raise PersistenceError(f"database error: {e}") from e
        finally:
            conn.close()

    @staticmethod
    def _row_to_task(row: sqlite3.Row) -> Task:
        return Task(
            id=str(row["id"]),
            title=str(row["title"] or ""),
            description=str(row["description"] or ""),
            status=TaskStatus.from_db(row["status"]),
        )

    @staticmethod
    def _row_id(task_id: str) -> int | None:
        # Ids are compared as strings by the file store; "01" must not hit row 1.
        if not task_id or not task_id.isdecimal():
            return None
        # SQLite INTEGER is signed 64-bit; anything larger cannot name a row.
        if len(task_id) > len(str(_MAX_ROW_ID)):
            return None
        n = int(task_id)
        if n > _MAX_ROW_ID or str(n) != task_id:
            return None
        return n

    # ---- public API ----

    def initialize(self) -> None:
        try:
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise PersistenceError(f"cannot create {self._db_path.parent}: {e}") from e

        with self._transaction() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS tasks (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    title TEXT NOT NULL,
                    description TEXT NOT NULL DEFAULT '',
                    status TEXT NOT NULL DEFAULT 'todo'
                )
                """
            )
            (total,) = conn.execute("SELECT COUNT(*) FROM tasks").fetchone()

        logger.info("SqliteTaskStore ready db=%s total=%s", self._db_path, total)

    def get_all(self) -> list[Task]:
        try:
            conn = self._get_conn()
            try:
                rows = conn.execute("SELECT * FROM tasks ORDER BY id ASC").fetchall()
            finally:
                conn.close()
        except sqlite3.Error as e:
            logger.exception("Failed to list tasks db=%s", self._db_path)
            raise PersistenceError(f"database error: {e}") from e
        return [self._row_to_task(r) for r in rows]

    def create(self, title: str, description: str = "", status: str = "") -> Task:
        effective = check_new_task(title, status)

        with self._transaction() as conn:
            cur = conn.execute(
                "INSERT INTO tasks(title, description, status) VALUES (?, ?, ?)",
                (title, description, effective.value),
            )
            rowid = cur.lastrowid
            if rowid is None:
                raise PersistenceError("SQLite did not return lastrowid for tasks insert")

        task = Task(id=str(rowid), title=title, description=description, status=effective)
        logger.debug("Task created id=%s status=%s", task.id, task.status.value)
        return task

    def update(
        self,
        task_id: str,
        title: str = "",
        description: str = "",
        status: str = "",
    ) -> Task:
        row_id = self._row_id(task_id)
        if row_id is None:
            raise NotFoundError(task_id)

        with self._transaction() as conn:
            row = conn.execute("SELECT * FROM tasks WHERE id = ?", (row_id,)).fetchone()
            if row is None:
                raise NotFoundError(task_id)
            new_status = check_status_change(status)

            current = self._row_to_task(row)
            changed = Task(
                id=current.id,
                title=title or current.title,
                description=description or current.description,
                status=new_status or current.status,
            )
            conn.execute(
                "UPDATE tasks SET title = ?, description = ?, status = ? WHERE id = ?",
                (changed.title, changed.description, changed.status.value, row_id),
            )

        logger.debug("Task updated id=%s status=%s", changed.id, changed.status.value)
        return changed

    def delete(self, task_id: str) -> None:
        row_id = self._row_id(task_id)
        if row_id is None:
            raise NotFoundError(task_id)

        with self._transaction() as conn:
            cur = conn.execute("DELETE FROM tasks WHERE id = ?", (row_id,))
            if cur.rowcount != 1:
                raise NotFoundError(task_id)

        logger.debug("Task deleted id=%s", task_id)
