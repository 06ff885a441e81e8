# src/sitetasks/tasks/task_api.py

from __future__ import annotations

"""
Pure task mutations.

Every function returns new values (a new Task or a new list); nothing is
modified in place. Callers replace their list with the result.
"""

from collections.abc import Iterable, Sequence
from dataclasses import replace
from datetime import date
from typing import Any

from .task_models import (
    InvalidTaskError,
    Priority,
    Subtask,
    Task,
    TaskNotFoundError,
    TaskStatus,
)


def derive_completion(status: TaskStatus, current: int) -> int:
    """100 for COMPLETED, 0 for NOT_STARTED, otherwise `current` unchanged."""
    if status == TaskStatus.COMPLETED:
        return 100
    if status == TaskStatus.NOT_STARTED:
        return 0
    return current


def update_status(
    task: Task,
    new_status: TaskStatus | str,
    explicit_completion: int | None = None,
) -> Task:
    status = TaskStatus.parse(new_status)
    if explicit_completion is None:
        completion = derive_completion(status, task.completion)
    else:
        completion = int(explicit_completion)
    return replace(task, status=status, completion=completion)


def next_task_id(existing: Iterable[Task]) -> int:
    return max((t.id for t in existing), default=0) + 1


def create_task(
    existing: Iterable[Task],
    *,
    title: str,
    start_date: date,
    end_date: date | None = None,
    status: TaskStatus | str = TaskStatus.NOT_STARTED,
    assignee: str = "",
    description: str = "",
    priority: Priority | str | None = None,
    due_date: date | None = None,
    project_id: int | None = None,
    project_name: str | None = None,
    task_id: int | None = None,
) -> Task:
    """
    Build a new task.

    The id is max(existing ids) + 1 unless `task_id` is given. Completion
    starts at 100 for COMPLETED and 0 for every other status (there is no
    prior value to carry over).
    """
    st = TaskStatus.parse(status)
    return Task(
        id=next_task_id(existing) if task_id is None else int(task_id),
        title=title,
        description=description,
        start_date=start_date,
        end_date=end_date,
        status=st,
        completion=100 if st is TaskStatus.COMPLETED else 0,
        assignee=assignee,
        priority=Priority.parse(priority),
        due_date=due_date,
        project_id=project_id,
        project_name=project_name,
    )


def edit_task(task: Task, **changes: Any) -> Task:
    """
    Apply an edit-form resubmission.

    When the status changes and no completion is supplied, completion
    follows the same rule as update_status.
    """
    if "id" in changes and changes["id"] != task.id:
        raise InvalidTaskError("Task id cannot be edited")
    changes.pop("id", None)

    if "status" in changes:
        changes["status"] = TaskStatus.parse(changes["status"])
        if "completion" not in changes and changes["status"] != task.status:
            changes["completion"] = derive_completion(changes["status"], task.completion)
    if "priority" in changes:
        changes["priority"] = Priority.parse(changes["priority"])

    try:
        return replace(task, **changes)
    except TypeError as e:
        raise InvalidTaskError(str(e)) from None


def validate_task(task: Task) -> None:
    """Strict checks (off by default): inverted range and completion range."""
    if task.end_date is not None and task.end_date < task.start_date:
        raise InvalidTaskError(
            f"Task {task.id}: end_date {task.end_date} is before start_date {task.start_date}"
        )
    if not 0 <= task.completion <= 100:
        raise InvalidTaskError(f"Task {task.id}: completion {task.completion} outside 0..100")


def _index_of(tasks: Sequence[Task], task_id: int) -> int:
    for i, t in enumerate(tasks):
        if t.id == task_id:
            return i
    raise TaskNotFoundError(task_id)


def find_task(tasks: Sequence[Task], task_id: int) -> Task:
    return tasks[_index_of(tasks, task_id)]


def add_task(tasks: Sequence[Task], task: Task) -> list[Task]:
    return [*tasks, task]


def replace_task(tasks: Sequence[Task], task: Task) -> list[Task]:
    idx = _index_of(tasks, task.id)
    out = list(tasks)
    out[idx] = task
    return out


def delete_task(tasks: Sequence[Task], task_id: int) -> list[Task]:
    return [t for t in tasks if t.id != task_id]


def assign_task(tasks: Sequence[Task], task_id: int, assignee: str) -> list[Task]:
    task = find_task(tasks, task_id)
    return replace_task(tasks, replace(task, assignee=assignee))


def add_subtask(tasks: Sequence[Task], task_id: int, subtask: Subtask) -> list[Task]:
    task = find_task(tasks, task_id)
    return replace_task(tasks, replace(task, subtasks=(*task.subtasks, subtask)))


def reorder_tasks(tasks: Sequence[Task], from_index: int, to_index: int) -> list[Task]:
    """Move one task and renumber `order` to match list positions."""
    n = len(tasks)
    if not (0 <= from_index < n and 0 <= to_index < n):
        raise IndexError(f"Reorder positions out of range (size={n})")
    out = list(tasks)
    moved = out.pop(from_index)
    out.insert(to_index, moved)
    return [t if t.order == i else replace(t, order=i) for i, t in enumerate(out)]


def filter_tasks(
    tasks: Iterable[Task],
    *,
    status: TaskStatus | str | None = None,
    assignee: str | None = None,
) -> list[Task]:
    st = TaskStatus.parse(status) if status else None
    needle = assignee.strip().lower() if assignee else ""
    out: list[Task] = []
    for t in tasks:
        if st is not None and t.status != st:
            continue
        if needle and needle not in t.assignee.lower():
            continue
        out.append(t)
    return out


def count_by_status(tasks: Iterable[Task]) -> dict[TaskStatus, int]:
    counts = {s: 0 for s in TaskStatus}
    for t in tasks:
        counts[t.status] += 1
    return counts
