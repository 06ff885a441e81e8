# src/sitetasks/tasks/task_store.py

from __future__ import annotations

import contextlib
import json
import logging
import sqlite3
import time
from collections.abc import Sequence
from pathlib import Path

from .fixtures import default_tasks
from .task_models import Task

logger = logging.getLogger(__name__)


class TaskStore:
    """
    SQLite key-value task store.

    The whole task list lives as one JSON array under a fixed key:
    - save() overwrites it on every call
    - load() reads it once; a missing or unreadable value falls back to
      the built-in fixture list

    A monotonic id counter is kept under "<key>.next_id" so ids of deleted
    tasks are never handed out again.

    Thread-safety:
    - each method opens its own SQLite connection
    """

    def __init__(self, db_path: str | Path = "tasks.sqlite3", *, key: str = "tasks") -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._key = key
        self._counter_key = f"{key}.next_id"
        self._ensure_schema()
        logger.info("TaskStore ready db=%s key=%s", self._db_path, self._key)

    @property
    def key(self) -> str:
        return self._key

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        conn.row_factory = sqlite3.Row
        self._configure_conn(conn)
        return conn

    @staticmethod
    def _configure_conn(conn: sqlite3.Connection) -> None:
        with contextlib.suppress(sqlite3.DatabaseError):
            conn.execute("PRAGMA journal_mode=WAL")

    def _ensure_schema(self) -> None:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS kv (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at REAL NOT NULL
                )
                """
            )
            conn.commit()
        finally:
            conn.close()

    @staticmethod
    def _select(conn: sqlite3.Connection, key: str) -> str | None:
        row = conn.execute("SELECT value FROM kv WHERE key = ?", (key,)).fetchone()
        return None if row is None else str(row["value"])

    @staticmethod
    def _upsert(conn: sqlite3.Connection, key: str, value: str) -> None:
        conn.execute(
            """
            INSERT INTO kv(key, value, updated_at) VALUES (?, ?, ?)
            ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = excluded.updated_at
            """,
            (key, value, time.time()),
        )

    def get_raw(self, key: str) -> str | None:
        conn = self._get_conn()
        try:
            return self._select(conn, key)
        finally:
            conn.close()

    def put_raw(self, key: str, value: str) -> None:
        conn = self._get_conn()
        try:
            self._upsert(conn, key, value)
            conn.commit()
        finally:
            conn.close()

    # ---- public API ----

    def load(self) -> list[Task]:
        raw = self.get_raw(self._key)
        if raw is None:
            logger.info("No stored tasks under key=%s; using default task list.", self._key)
            return default_tasks()

        try:
            data = json.loads(raw)
            if not isinstance(data, list):
                raise ValueError(f"expected a JSON array, got {type(data).__name__}")
            tasks = [Task.from_dict(item) for item in data]
        except (ValueError, TypeError, KeyError, AttributeError, OverflowError, RecursionError):
            logger.warning(
                "Stored tasks under key=%s are unreadable; using default task list.",
                self._key,
                exc_info=True,
            )
            return default_tasks()

        logger.debug("Loaded %d tasks from key=%s", len(tasks), self._key)
        return tasks

    def save(self, tasks: Sequence[Task]) -> None:
        payload = json.dumps([t.to_dict() for t in tasks], ensure_ascii=False)
        # List and counter floor commit together.
        floor = max((t.id for t in tasks), default=0) + 1
        conn = self._get_conn()
        try:
            self._upsert(conn, self._key, payload)
            # Ids seen in any saved list are never reissued.
            if floor > self._read_counter(conn):
                self._upsert(conn, self._counter_key, str(floor))
            conn.commit()
        except sqlite3.Error:
            logger.exception("Failed to save %d tasks to %s", len(tasks), self._db_path)
            raise
        finally:
            conn.close()
        logger.debug("Saved %d tasks under key=%s", len(tasks), self._key)

    def _read_counter(self, conn: sqlite3.Connection | None = None) -> int:
        raw = self.get_raw(self._counter_key) if conn is None else self._select(conn, self._counter_key)
        if raw is None:
            return 1
        try:
            return int(raw)
        except ValueError:
            logger.warning("Bad id counter %r under key=%s; resetting.", raw, self._counter_key)
            return 1

    def allocate_id(self, tasks: Sequence[Task]) -> int:
        """
        Next task id: max(stored counter, max(ids) + 1).

        On a fresh store this equals max+1 over `tasks`; once an id has been
        saved or allocated it is never handed out again, even after the task
        holding it is deleted.
        """
        next_id = max(self._read_counter(), max((t.id for t in tasks), default=0) + 1)
        self.put_raw(self._counter_key, str(next_id + 1))
        return next_id
