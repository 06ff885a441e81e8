# src/sitetasks/core/state.py

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any

from ..tasks.task_board import TaskBoard
from .ports import TaskRepo


@dataclass
class AppState:
    # Settings (or a test SimpleNamespace) kept on the state for easy access.
    settings: Any

    task_store: TaskRepo
    board: TaskBoard

    def today(self) -> date:
        override = getattr(self.settings, "today_override", None)
        return override or date.today()
