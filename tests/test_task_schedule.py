# tests/test_task_schedule.py

from __future__ import annotations

from datetime import date, timedelta

import pytest

from sitetasks.tasks.task_models import TaskStatus
from sitetasks.tasks.task_schedule import (
    Timeframe,
    add_months,
    duration_days,
    select_for_date,
    select_for_month,
    select_for_view,
    select_for_week,
    select_upcoming,
    sort_for_timeline,
    week_of,
)

from .conftest import make_task


def _ids(tasks) -> list[int]:
    return [t.id for t in tasks]


def test_select_for_date_inclusive_bounds() -> None:
    tasks = [make_task(1, "2025-05-10", "2025-05-14")]
    assert _ids(select_for_date(tasks, date(2025, 5, 10))) == [1]
    assert _ids(select_for_date(tasks, date(2025, 5, 14))) == [1]
    assert select_for_date(tasks, date(2025, 5, 9)) == []
    assert select_for_date(tasks, date(2025, 5, 15)) == []


def test_select_for_date_open_ended_task_is_single_day() -> None:
    tasks = [make_task(1, "2025-05-10")]
    assert _ids(select_for_date(tasks, date(2025, 5, 10))) == [1]
    assert select_for_date(tasks, date(2025, 5, 11)) == []


def test_select_for_date_empty_input() -> None:
    assert select_for_date([], date(2025, 5, 10)) == []


def test_select_for_date_matches_range_predicate_for_every_day() -> None:
    tasks = [
        make_task(1, "2025-05-01", "2025-05-03"),
        make_task(2, "2025-05-02"),
        make_task(3, "2025-05-03", "2025-05-09"),
    ]
    day = date(2025, 4, 28)
    for _ in range(16):
        expected = [t.id for t in tasks if t.start_date <= day <= (t.end_date or t.start_date)]
        assert _ids(select_for_date(tasks, day)) == expected
        day += timedelta(days=1)


def test_week_of_is_monday_start() -> None:
    week = week_of(date(2025, 5, 16))  # a Friday
    assert week[0] == date(2025, 5, 12)
    assert week[0].weekday() == 0
    assert week[-1] == date(2025, 5, 18)
    assert len(week) == 7


def test_select_for_week_deduplicates_and_keeps_order() -> None:
    tasks = [
        make_task(3, "2025-05-01", "2025-05-31"),  # spans all 7 days
        make_task(1, "2025-05-14"),
        make_task(2, "2025-05-20", "2025-05-22"),  # next week
        make_task(4, "2025-05-18", "2025-05-25"),  # touches Sunday only
    ]
    result = select_for_week(tasks, week_of(date(2025, 5, 14)))
    assert _ids(result) == [3, 1, 4]
    assert len(set(_ids(result))) == len(result)


def test_select_for_month_task_spanning_whole_month() -> None:
    tasks = [make_task(1, "2025-04-20", "2025-08-15")]
    assert _ids(select_for_month(tasks, 2025, 5)) == [1]


def test_select_for_month_start_or_end_inside() -> None:
    tasks = [
        make_task(1, "2025-05-31", "2025-06-10"),  # starts in May
        make_task(2, "2025-04-25", "2025-05-01"),  # ends in May
        make_task(3, "2025-04-01", "2025-04-30"),  # April only
        make_task(4, "2025-06-01"),                # June only
        make_task(5, "2025-05-15"),                # open-ended in May
    ]
    assert _ids(select_for_month(tasks, 2025, 5)) == [1, 2, 5]


def test_select_for_month_handles_february_length() -> None:
    tasks = [make_task(1, "2024-02-29"), make_task(2, "2024-03-01")]
    assert _ids(select_for_month(tasks, 2024, 2)) == [1]


def test_upcoming_week_scenario_excludes_finished_window() -> None:
    tasks = [
        make_task(1, "2025-05-10", "2025-05-14", status=TaskStatus.COMPLETED, completion=100),
        make_task(2, "2025-05-20", "2025-05-22", status=TaskStatus.parse("Pending")),
    ]
    assert _ids(select_upcoming(tasks, "week", date(2025, 5, 16))) == [2]


def test_upcoming_today() -> None:
    ref = date(2025, 5, 16)
    tasks = [
        make_task(1, "2025-05-16", "2025-05-20"),  # starts today
        make_task(2, "2025-05-10", "2025-05-16"),  # ends today
        make_task(3, "2025-05-01", "2025-05-31"),  # covers today
        make_task(4, "2025-05-17", "2025-05-18"),  # tomorrow
    ]
    assert _ids(select_upcoming(tasks, Timeframe.TODAY, ref)) == [1, 2, 3]


def test_upcoming_week_window_edges() -> None:
    ref = date(2025, 5, 16)
    tasks = [
        make_task(1, "2025-05-23"),                # exactly ref + 7
        make_task(2, "2025-05-24"),                # ref + 8
        make_task(3, "2025-05-01", "2025-05-16"),  # ends on ref
        make_task(4, "2025-05-16", "2025-06-30"),  # covers whole window
        make_task(5, "2025-05-01", "2025-05-15"),  # finished before ref
    ]
    assert _ids(select_upcoming(tasks, Timeframe.WEEK, ref)) == [1, 3, 4]


def test_upcoming_month_uses_calendar_months() -> None:
    ref = date(2025, 1, 31)
    tasks = [
        make_task(1, "2025-02-28"),  # Jan 31 + 1 month clamps to Feb 28
        make_task(2, "2025-03-01"),  # a fixed 30-day offset would include this
        make_task(3, "2025-03-02"),
    ]
    assert _ids(select_upcoming(tasks, Timeframe.MONTH, ref)) == [1]


def test_upcoming_rejects_unknown_timeframe() -> None:
    with pytest.raises(ValueError):
        select_upcoming([], "fortnight", date(2025, 5, 16))


def test_upcoming_preserves_input_order() -> None:
    tasks = [make_task(9, "2025-05-20"), make_task(2, "2025-05-17"), make_task(5, "2025-05-18")]
    assert _ids(select_upcoming(tasks, "week", date(2025, 5, 16))) == [9, 2, 5]


def test_add_months() -> None:
    assert add_months(date(2024, 1, 31), 1) == date(2024, 2, 29)
    assert add_months(date(2025, 12, 15), 1) == date(2026, 1, 15)
    assert add_months(date(2025, 3, 31), -1) == date(2025, 2, 28)


def test_select_for_view_dispatch() -> None:
    tasks = [make_task(1, "2025-05-12"), make_task(2, "2025-05-28")]
    anchor = date(2025, 5, 14)
    assert select_for_view(tasks, "day", anchor) == []
    assert _ids(select_for_view(tasks, "week", anchor)) == [1]
    assert _ids(select_for_view(tasks, "month", anchor)) == [1, 2]


def test_timeline_sort_and_duration() -> None:
    tasks = [
        make_task(1, "2025-05-20", "2025-05-22"),
        make_task(2, "2025-05-10"),
        make_task(3, "2025-05-10", "2025-05-31"),
    ]
    assert _ids(sort_for_timeline(tasks)) == [2, 3, 1]
    assert duration_days(tasks[0]) == 2
    assert duration_days(tasks[1]) == 0
