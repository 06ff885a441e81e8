# tests/conftest.py

from __future__ import annotations

from datetime import date
from pathlib import Path
from types import SimpleNamespace

import pytest

from sitetasks.core.state import AppState
from sitetasks.tasks.task_board import TaskBoard
from sitetasks.tasks.task_models import Task, TaskStatus
from sitetasks.tasks.task_store import TaskStore

from .fakes import FakeTaskStore


def make_task(
    task_id: int,
    start: str,
    end: str | None = None,
    *,
    status: TaskStatus = TaskStatus.NOT_STARTED,
    completion: int = 0,
    assignee: str = "",
    title: str | None = None,
) -> Task:
    return Task(
        id=task_id,
        title=title or f"Task {task_id}",
        start_date=date.fromisoformat(start),
        end_date=date.fromisoformat(end) if end else None,
        status=status,
        completion=completion,
        assignee=assignee,
    )


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and bootstrap.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="sitetasks-test",
        log_level="DEBUG",
        data_dir=tmp_path,
        tasks_db_path=tmp_path / "tasks.sqlite3",
        storage_key="tasks",
        strict_validation=False,
        today_override=date(2025, 5, 16),
    )


@pytest.fixture()
def store(settings: SimpleNamespace) -> TaskStore:
    return TaskStore(settings.tasks_db_path, key=settings.storage_key)


@pytest.fixture()
def state(settings: SimpleNamespace, store: TaskStore) -> AppState:
    """
    AppState wired with a real SQLite store.

    The store starts empty, so the board begins with the default fixture list.
    """
    return AppState(settings=settings, task_store=store, board=TaskBoard(store))


@pytest.fixture()
def fake_store() -> FakeTaskStore:
    return FakeTaskStore(
        [
            make_task(1, "2025-05-10", "2025-05-14", status=TaskStatus.COMPLETED, completion=100,
                      assignee="David Lee"),
            make_task(2, "2025-05-20", "2025-05-22", assignee="Robert Wilson"),
            make_task(3, "2025-05-12", "2025-05-18", status=TaskStatus.IN_PROGRESS, completion=45,
                      assignee="Emily Davis"),
        ]
    )
