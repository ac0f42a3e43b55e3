# src/tasklist/tasks/task_store.py

from __future__ import annotations

import contextlib
import logging
import sqlite3
import time
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any

from ..core.errors import NotFoundError, ValidationError
from .task_models import TITLE_MAX_LENGTH, Task

logger = logging.getLogger(__name__)

_BOOL_STRINGS = {"1": True, "0": False}


def validate_title(raw: Any) -> str:
    """
    Normalize and validate a task title.

    Whitespace is trimmed first, so a blank title counts as missing.
    Raises ValidationError with a `title` entry on failure.
    """
    if raw is None:
        raise ValidationError.single("title", "The title field is required.")
    if not isinstance(raw, str):
        raise ValidationError.single("title", "The title field must be a string.")
    title = raw.strip()
    if not title:
        raise ValidationError.single("title", "The title field is required.")
    if len(title) > TITLE_MAX_LENGTH:
        raise ValidationError.single(
            "title",
            f"The title field must not be greater than {TITLE_MAX_LENGTH} characters.",
        )
    return title


def validate_is_done(raw: Any) -> bool:
    if isinstance(raw, bool):
        return raw
    if isinstance(raw, int) and raw in (0, 1):
        return bool(raw)
    if isinstance(raw, str) and raw in _BOOL_STRINGS:
        return _BOOL_STRINGS[raw]
    raise ValidationError.single("is_done", "The is_done field must be true or false.")


class TaskStore:
    """
    SQLite task store.

    The schema is simple and migration-safe:
    - create table if missing
    - use PRAGMA table_info to detect missing columns
    - add columns with ALTER TABLE only when needed

    Thread-safety:
    - each method opens its own SQLite connection
    """

    def __init__(
        self,
        db_path: str | Path = "tasks.sqlite3",
        *,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._clock = clock
        self._ensure_schema()
        try:
            total = self.count_tasks()
        except sqlite3.Error:
            total = -1
        logger.info("TaskStore ready db=%s total=%s", self._db_path, total)

    @property
    def db_path(self) -> Path:
        return self._db_path

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        conn.row_factory = sqlite3.Row
        self._configure_conn(conn)
        return conn

    @staticmethod
    def _configure_conn(conn: sqlite3.Connection) -> None:
        with contextlib.suppress(sqlite3.Error):
            conn.execute("PRAGMA journal_mode=WAL")

    def _ensure_schema(self) -> None:
        conn = self._get_conn()
        try:
            cur = conn.cursor()

            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS tasks (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    title TEXT NOT NULL,
                    is_done INTEGER NOT NULL DEFAULT 0,
                    completed_at REAL,
                    created_at REAL NOT NULL,
                    updated_at REAL NOT NULL
                )
                """
            )

            # Migrations (safe): add missing columns.
            cur.execute("PRAGMA table_info(tasks)")
            cols = {row["name"] for row in cur.fetchall()}

            def add_col(name: str, decl: str) -> None:
                if name in cols:
                    return
                cur.execute(f"ALTER TABLE tasks ADD COLUMN {name} {decl}")
                logger.info("TaskStore migration: added column %s", name)

            add_col("is_done", "INTEGER NOT NULL DEFAULT 0")
            add_col("completed_at", "REAL")
            add_col("created_at", "REAL NOT NULL DEFAULT 0")
            add_col("updated_at", "REAL NOT NULL DEFAULT 0")

            cur.execute("CREATE INDEX IF NOT EXISTS idx_tasks_created ON tasks(created_at)")

            conn.commit()
        finally:
            conn.close()

    @staticmethod
    def _row_to_task(row: sqlite3.Row) -> Task:
        return Task(
            id=int(row["id"]),
            title=str(row["title"] or ""),
            is_done=bool(row["is_done"]),
            created_at=float(row["created_at"] or 0.0),
            updated_at=float(row["updated_at"] or 0.0),
            completed_at=float(row["completed_at"]) if row["completed_at"] is not None else None,
        )

    def _fetch_task(self, conn: sqlite3.Connection, task_id: int) -> Task:
        row = conn.execute("SELECT * FROM tasks WHERE id = ?", (int(task_id),)).fetchone()
        if row is None:
            raise NotFoundError("Task", int(task_id))
        return self._row_to_task(row)

    # ---- public API ----

    def count_tasks(self) -> int:
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute("SELECT COUNT(*) FROM tasks")
            (n,) = cur.fetchone()
            return int(n)
        finally:
            conn.close()

    def list_tasks(self) -> list[Task]:
        """All tasks, newest first."""
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute("SELECT * FROM tasks ORDER BY created_at DESC, id DESC")
            return [self._row_to_task(r) for r in cur.fetchall()]
        finally:
            conn.close()

    def get_task(self, task_id: int) -> Task:
        conn = self._get_conn()
        try:
            return self._fetch_task(conn, task_id)
        finally:
            conn.close()

    def add_task(self, title: Any) -> Task:
        clean_title = validate_title(title)
        now = self._clock()

        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute(
                """
                INSERT INTO tasks(title, is_done, completed_at, created_at, updated_at)
                VALUES (?, 0, NULL, ?, ?)
                """,
                (clean_title, now, now),
            )
            conn.commit()
            rowid = cur.lastrowid
            if rowid is None:
                raise RuntimeError("SQLite did not return lastrowid for tasks insert")
            task_id = int(rowid)
            logger.debug("Task added id=%s title_len=%s", task_id, len(clean_title))
            return Task(
                id=task_id,
                title=clean_title,
                is_done=False,
                created_at=now,
                updated_at=now,
                completed_at=None,
            )
        finally:
            conn.close()

    def update_task(self, task_id: int, patch: Mapping[str, Any]) -> Task:
        """
        Apply a partial update.

        Only keys present in `patch` are validated and written; unknown keys are ignored.
        completed_at follows is_done:
          is_done -> true  and completed_at unset -> completed_at = now
          is_done -> false                          -> completed_at = NULL
        """
        conn = self._get_conn()
        try:
            current = self._fetch_task(conn, task_id)

            errors: dict[str, list[str]] = {}
            changes: dict[str, Any] = {}

            if "title" in patch:
                try:
                    title = validate_title(patch["title"])
                except ValidationError as e:
                    errors.update(e.errors)
                else:
                    if title != current.title:
                        changes["title"] = title

            if "is_done" in patch:
                try:
                    is_done = validate_is_done(patch["is_done"])
                except ValidationError as e:
                    errors.update(e.errors)
                else:
                    if is_done != current.is_done:
                        changes["is_done"] = int(is_done)
                    if is_done and current.completed_at is None:
                        changes["completed_at"] = self._clock()
                    elif not is_done and current.completed_at is not None:
                        changes["completed_at"] = None

            if errors:
                raise ValidationError(errors)

            if not changes:
                return current

            changes["updated_at"] = self._clock()
            assignments = ", ".join(f"{name} = ?" for name in changes)
            params = [*changes.values(), int(task_id)]
            conn.execute(f"UPDATE tasks SET {assignments} WHERE id = ?", params)
            conn.commit()

            logger.debug("Task updated id=%s fields=%s", task_id, sorted(changes))
            return self._fetch_task(conn, task_id)
        finally:
            conn.close()

    def delete_task(self, task_id: int) -> None:
        conn = self._get_conn()
        try:
            cur = conn.execute("DELETE FROM tasks WHERE id = ?", (int(task_id),))
            conn.commit()
            if cur.rowcount != 1:
                raise NotFoundError("Task", int(task_id))
            logger.debug("Task deleted id=%s", task_id)
        finally:
            conn.close()
