# src/sitetasks/tasks/task_schedule.py

from __future__ import annotations

"""
Schedule queries over a task list.

Every query is a stable filter: results keep the relative order of the
input, and the input list is never modified. Comparisons are whole-date;
an open-ended task (no end_date) occupies only its start date.
"""

import calendar
from collections.abc import Iterable, Sequence
from datetime import date, timedelta
from enum import StrEnum

from .task_models import Task


class Timeframe(StrEnum):
    TODAY = "today"
    WEEK = "week"
    MONTH = "month"


class View(StrEnum):
    DAY = "day"
    WEEK = "week"
    MONTH = "month"


def add_months(day: date, months: int) -> date:
    """Calendar month arithmetic; the day is clamped to the target month's length."""
    idx = day.year * 12 + (day.month - 1) + months
    year, month0 = divmod(idx, 12)
    month = month0 + 1
    last = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last))


def month_bounds(year: int, month: int) -> tuple[date, date]:
    last = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last)


def week_of(day: date) -> list[date]:
    """The Monday-start week (7 consecutive dates) that contains `day`."""
    monday = day - timedelta(days=day.weekday())
    return [monday + timedelta(days=i) for i in range(7)]


def _covers(task: Task, day: date) -> bool:
    return task.start_date <= day <= task.window_end


def select_for_date(tasks: Iterable[Task], day: date) -> list[Task]:
    return [t for t in tasks if _covers(t, day)]


def select_for_week(tasks: Sequence[Task], week: Sequence[date]) -> list[Task]:
    """
    Union of select_for_date over each day of `week`, deduplicated by id.

    A task spanning several days of the week is returned once, in its
    input position.
    """
    days = list(week)
    seen: set[int] = set()
    out: list[Task] = []
    for t in tasks:
        if t.id in seen:
            continue
        if any(_covers(t, d) for d in days):
            seen.add(t.id)
            out.append(t)
    return out


def select_for_month(tasks: Iterable[Task], year: int, month: int) -> list[Task]:
    """
    Tasks that (a) start in the month, (b) end in the month, or
    (c) start before the month and end after it.
    """
    first, last = month_bounds(year, month)
    out: list[Task] = []
    for t in tasks:
        start, end = t.start_date, t.window_end
        starts_in = first <= start <= last
        ends_in = first <= end <= last
        spans = start < first and end > last
        if starts_in or ends_in or spans:
            out.append(t)
    return out


def _in_window(tasks: Iterable[Task], lo: date, hi: date) -> list[Task]:
    out: list[Task] = []
    for t in tasks:
        start, end = t.start_date, t.window_end
        if lo <= start <= hi or lo <= end <= hi or (start <= lo and end >= hi):
            out.append(t)
    return out


def select_upcoming(
    tasks: Iterable[Task],
    timeframe: Timeframe | str,
    reference_date: date,
) -> list[Task]:
    """
    Tasks relevant to a named window starting at `reference_date`.

    - today: start == ref, end == ref, or ref inside [start, end]
    - week:  window [ref, ref + 7 days]
    - month: window [ref, ref + 1 calendar month]

    For week/month a task matches when its start or end falls inside the
    window, or its range covers the whole window.
    """
    tf = Timeframe(timeframe)
    if tf is Timeframe.TODAY:
        return _in_window(tasks, reference_date, reference_date)
    if tf is Timeframe.WEEK:
        return _in_window(tasks, reference_date, reference_date + timedelta(days=7))
    return _in_window(tasks, reference_date, add_months(reference_date, 1))


def select_for_view(tasks: Sequence[Task], view: View | str, anchor: date) -> list[Task]:
    v = View(view)
    if v is View.DAY:
        return select_for_date(tasks, anchor)
    if v is View.WEEK:
        return select_for_week(tasks, week_of(anchor))
    return select_for_month(tasks, anchor.year, anchor.month)


def duration_days(task: Task) -> int:
    end = task.end_date or task.due_date or task.start_date
    return (end - task.start_date).days


def sort_for_timeline(tasks: Iterable[Task]) -> list[Task]:
    return sorted(tasks, key=lambda t: t.start_date)
