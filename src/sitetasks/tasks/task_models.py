# src/sitetasks/tasks/task_models.py

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import StrEnum
from typing import Any


class InvalidTaskError(ValueError):
    """Raised when a task fails strict validation or an illegal edit is requested."""


class TaskNotFoundError(KeyError):
    """Raised when an operation targets a task id that is not in the list."""


_LABEL_NORMALIZE = re.compile(r"[\s_\-]+")


class TaskStatus(StrEnum):
    """
    Task lifecycle status.

    Notes:
    - No transition graph is enforced: any status may move to any other.
    - "Pending" and "Overdue" are accepted on input as aliases for
      NOT_STARTED and DELAYED (labels used by older task exports).
    """

    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    DELAYED = "delayed"
    ON_HOLD = "on_hold"

    @classmethod
    def parse(cls, raw: str | TaskStatus) -> TaskStatus:
        if isinstance(raw, TaskStatus):
            return raw
        # camelCase -> snake_case before folding separators
        text = re.sub(r"(?<=[a-z])(?=[A-Z])", "_", str(raw).strip())
        key = _LABEL_NORMALIZE.sub("_", text).lower()
        if key in _STATUS_ALIASES:
            return _STATUS_ALIASES[key]
        try:
            return cls(key)
        except ValueError:
            raise ValueError(f"Unknown task status: {raw!r}") from None


_STATUS_ALIASES: dict[str, TaskStatus] = {
    "pending": TaskStatus.NOT_STARTED,
    "todo": TaskStatus.NOT_STARTED,
    "overdue": TaskStatus.DELAYED,
    "done": TaskStatus.COMPLETED,
    "hold": TaskStatus.ON_HOLD,
}


class Priority(StrEnum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @classmethod
    def parse(cls, raw: str | Priority | None) -> Priority:
        if raw is None or raw == "":
            return cls.MEDIUM
        if isinstance(raw, Priority):
            return raw
        try:
            return cls(str(raw).strip().lower())
        except ValueError:
            raise ValueError(f"Unknown priority: {raw!r}") from None


_DISPLAY_FORMATS = ("%b %d, %Y", "%B %d, %Y")


def parse_date(raw: str | date | datetime) -> date:
    """
    Parse a calendar date.

    Accepts date/datetime objects, ISO strings (time of day is dropped) and
    the display form "May 14, 2025".
    """
    if isinstance(raw, datetime):
        return raw.date()
    if isinstance(raw, date):
        return raw

    text = str(raw).strip()
    if not text:
        raise ValueError("Empty date")

    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        pass

    for fmt in _DISPLAY_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue

    raise ValueError(f"Unrecognized date: {raw!r}")


def _opt_date(raw: Any) -> date | None:
    if raw is None or raw == "":
        return None
    return parse_date(raw)


def _pick(data: dict[str, Any], *keys: str, default: Any = None) -> Any:
    for k in keys:
        if k in data:
            return data[k]
    return default


@dataclass(frozen=True, slots=True)
class Subtask:
    id: int
    title: str
    status: TaskStatus = TaskStatus.NOT_STARTED
    completion: int = 0
    assignee: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "status": self.status.value,
            "completion": self.completion,
            "assignee": self.assignee,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Subtask:
        return cls(
            id=int(data["id"]),
            title=str(data.get("title", "")),
            status=TaskStatus.parse(data.get("status", TaskStatus.NOT_STARTED)),
            completion=int(_pick(data, "completion", "progress", default=0)),
            assignee=str(data.get("assignee", "")),
        )


@dataclass(frozen=True, slots=True)
class Task:
    """
    A scheduled construction task.

    The task window is [start_date, end_date]; an open-ended task
    (end_date=None) occupies only its start date.

    Instances are immutable: every update goes through dataclasses.replace
    so list holders can detect the change by identity.
    """

    id: int
    title: str
    start_date: date
    end_date: date | None = None
    status: TaskStatus = TaskStatus.NOT_STARTED
    completion: int = 0
    assignee: str = ""
    description: str = ""

    priority: Priority = Priority.MEDIUM
    due_date: date | None = None
    project_id: int | None = None
    project_name: str | None = None
    subtasks: tuple[Subtask, ...] = field(default_factory=tuple)
    order: int | None = None

    @property
    def window_end(self) -> date:
        return self.end_date if self.end_date is not None else self.start_date

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat() if self.end_date else None,
            "status": self.status.value,
            "completion": self.completion,
            "assignee": self.assignee,
            "priority": self.priority.value,
            "due_date": self.due_date.isoformat() if self.due_date else None,
            "project_id": self.project_id,
            "project_name": self.project_name,
            "subtasks": [s.to_dict() for s in self.subtasks],
            "order": self.order,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Task:
        """Build a Task from a stored dict (snake_case or camelCase keys)."""
        project_id = _pick(data, "project_id", "projectId")
        order = data.get("order")
        return cls(
            id=int(data["id"]),
            title=str(data.get("title", "")),
            description=str(data.get("description", "") or ""),
            start_date=parse_date(_pick(data, "start_date", "startDate")),
            end_date=_opt_date(_pick(data, "end_date", "endDate")),
            status=TaskStatus.parse(data.get("status", TaskStatus.NOT_STARTED)),
            completion=int(_pick(data, "completion", "progress", default=0)),
            assignee=str(data.get("assignee", "") or ""),
            priority=Priority.parse(data.get("priority")),
            due_date=_opt_date(_pick(data, "due_date", "dueDate")),
            project_id=int(project_id) if project_id is not None else None,
            project_name=_pick(data, "project_name", "projectName"),
            subtasks=tuple(Subtask.from_dict(s) for s in data.get("subtasks") or ()),
            order=int(order) if order is not None else None,
        )
