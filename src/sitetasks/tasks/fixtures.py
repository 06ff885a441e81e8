# src/sitetasks/tasks/fixtures.py

"""Built-in task list used when nothing has been persisted yet (or storage is unreadable)."""

from __future__ import annotations

from datetime import date

from .task_models import Priority, Task, TaskStatus


def default_tasks() -> list[Task]:
    return [
        Task(
            id=1,
            title="Complete foundation inspection for Building B",
            description="Verify concrete curing and structural integrity",
            start_date=date(2025, 5, 10),
            end_date=date(2025, 5, 14),
            status=TaskStatus.COMPLETED,
            completion=100,
            assignee="David Lee",
            priority=Priority.HIGH,
            due_date=date(2025, 5, 14),
        ),
        Task(
            id=2,
            title="Install electrical conduits on 3rd floor",
            description="Run main electrical conduits according to plan E-301",
            start_date=date(2025, 5, 12),
            end_date=date(2025, 5, 18),
            status=TaskStatus.IN_PROGRESS,
            completion=65,
            assignee="Robert Wilson",
            priority=Priority.MEDIUM,
            due_date=date(2025, 5, 18),
        ),
        Task(
            id=3,
            title="Order additional steel reinforcement",
            description="Place order for additional rebar for the east wing",
            start_date=date(2025, 5, 15),
            end_date=date(2025, 5, 17),
            status=TaskStatus.IN_PROGRESS,
            completion=30,
            assignee="Emily Davis",
            priority=Priority.HIGH,
            due_date=date(2025, 5, 17),
        ),
        Task(
            id=4,
            title="Review updated architectural drawings",
            description="Check revisions to the lobby layout and fire egress",
            start_date=date(2025, 5, 19),
            end_date=date(2025, 5, 20),
            status=TaskStatus.NOT_STARTED,
            completion=0,
            assignee="Jennifer Chen",
            priority=Priority.MEDIUM,
            due_date=date(2025, 5, 20),
        ),
        Task(
            id=5,
            title="Conduct safety training for new workers",
            description="Fall protection and scaffold safety briefing",
            start_date=date(2025, 5, 15),
            end_date=date(2025, 5, 15),
            status=TaskStatus.DELAYED,
            completion=0,
            assignee="Michael Robinson",
            priority=Priority.HIGH,
            due_date=date(2025, 5, 15),
        ),
        Task(
            id=6,
            title="Schedule concrete delivery for Level 4",
            description="Coordinate pour window with the batching plant",
            start_date=date(2025, 5, 21),
            end_date=date(2025, 5, 22),
            status=TaskStatus.NOT_STARTED,
            completion=0,
            assignee="Sarah Johnson",
            priority=Priority.LOW,
            due_date=date(2025, 5, 22),
        ),
    ]
