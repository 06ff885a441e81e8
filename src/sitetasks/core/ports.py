# src/sitetasks/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The board depends on a Protocol instead of the concrete SQLite store.
This keeps storage swappable and lets tests run against an in-memory fake.
"""

from collections.abc import Sequence
from typing import Protocol

from ..tasks.task_models import Task


class TaskRepo(Protocol):
    """Whole-list task persistence: read once at startup, overwrite on every mutation."""

    def load(self) -> list[Task]: ...

    def save(self, tasks: Sequence[Task]) -> None: ...

    def allocate_id(self, tasks: Sequence[Task]) -> int: ...
