# src/sitetasks/tasks/task_board.py

from __future__ import annotations

"""
TaskBoard: the one owner of the task list.

Mutations compute a new list with the pure functions in task_api, replace
the held list (never edit it in place) and persist the whole list through
the injected TaskRepo. Queries delegate to task_schedule.
"""

import logging
from collections.abc import Sequence
from dataclasses import replace
from datetime import date

from ..core.ports import TaskRepo
from . import task_api, task_schedule
from .task_models import Priority, Subtask, Task, TaskStatus
from .task_schedule import Timeframe, View

logger = logging.getLogger(__name__)


class TaskBoard:
    def __init__(self, repo: TaskRepo, *, strict: bool = False) -> None:
        self._repo = repo
        self._strict = strict
        self._tasks: list[Task] = list(repo.load())
        logger.info("TaskBoard loaded %d tasks (strict=%s)", len(self._tasks), strict)

    @property
    def tasks(self) -> list[Task]:
        """The current list. Treat as read-only; it is replaced, not mutated, on change."""
        return self._tasks

    def get(self, task_id: int) -> Task:
        return task_api.find_task(self._tasks, task_id)

    # ---- mutations ----

    def _commit(self, new_tasks: list[Task], action: str) -> None:
        self._repo.save(new_tasks)
        self._tasks = new_tasks
        logger.debug("TaskBoard %s -> %d tasks", action, len(new_tasks))

    def _check(self, task: Task) -> None:
        if self._strict:
            task_api.validate_task(task)

    def create(
        self,
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
    ) -> Task:
        task = task_api.create_task(
            self._tasks,
            title=title,
            start_date=start_date,
            end_date=end_date,
            status=status,
            assignee=assignee,
            description=description,
            priority=priority,
            due_date=due_date,
            project_id=project_id,
            project_name=project_name,
        )
        self._check(task)
        # The repo id is only taken once the task is accepted.
        task = replace(task, id=self._repo.allocate_id(self._tasks))
        self._commit(task_api.add_task(self._tasks, task), f"create id={task.id}")
        logger.info("Task created id=%s title=%r status=%s", task.id, task.title, task.status.value)
        return task

    def set_status(
        self,
        task_id: int,
        new_status: TaskStatus | str,
        explicit_completion: int | None = None,
    ) -> Task:
        updated = task_api.update_status(self.get(task_id), new_status, explicit_completion)
        self._check(updated)
        self._commit(task_api.replace_task(self._tasks, updated), f"status id={task_id}")
        logger.info(
            "Task status id=%s -> %s (completion=%s)",
            task_id,
            updated.status.value,
            updated.completion,
        )
        return updated

    def edit(self, task_id: int, **changes) -> Task:
        updated = task_api.edit_task(self.get(task_id), **changes)
        self._check(updated)
        self._commit(task_api.replace_task(self._tasks, updated), f"edit id={task_id}")
        return updated

    def assign(self, task_id: int, assignee: str) -> Task:
        self._commit(task_api.assign_task(self._tasks, task_id, assignee), f"assign id={task_id}")
        return self.get(task_id)

    def delete(self, task_id: int) -> bool:
        new_tasks = task_api.delete_task(self._tasks, task_id)
        if len(new_tasks) == len(self._tasks):
            return False
        self._commit(new_tasks, f"delete id={task_id}")
        logger.info("Task deleted id=%s", task_id)
        return True

    def add_subtask(self, task_id: int, title: str, assignee: str | None = None) -> Subtask:
        parent = self.get(task_id)
        sub = Subtask(
            id=max((s.id for s in parent.subtasks), default=0) + 1,
            title=title,
            assignee=parent.assignee if assignee is None else assignee,
        )
        self._commit(task_api.add_subtask(self._tasks, task_id, sub), f"subtask id={task_id}")
        return sub

    def reorder(self, from_index: int, to_index: int) -> None:
        self._commit(task_api.reorder_tasks(self._tasks, from_index, to_index), "reorder")

    # ---- queries ----

    def on_date(self, day: date) -> list[Task]:
        return task_schedule.select_for_date(self._tasks, day)

    def in_week(self, day: date) -> list[Task]:
        return task_schedule.select_for_week(self._tasks, task_schedule.week_of(day))

    def in_month(self, year: int, month: int) -> list[Task]:
        return task_schedule.select_for_month(self._tasks, year, month)

    def upcoming(self, timeframe: Timeframe | str, reference_date: date) -> list[Task]:
        return task_schedule.select_upcoming(self._tasks, timeframe, reference_date)

    def in_view(self, view: View | str, anchor: date) -> list[Task]:
        return task_schedule.select_for_view(self._tasks, view, anchor)

    def filter(
        self,
        *,
        status: TaskStatus | str | None = None,
        assignee: str | None = None,
    ) -> list[Task]:
        return task_api.filter_tasks(self._tasks, status=status, assignee=assignee)

    def counts(self, tasks: Sequence[Task] | None = None) -> dict[TaskStatus, int]:
        return task_api.count_by_status(self._tasks if tasks is None else tasks)

    def timeline(self) -> list[Task]:
        return task_schedule.sort_for_timeline(self._tasks)
