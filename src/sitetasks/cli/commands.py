# src/sitetasks/cli/commands.py

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable, Sequence
from datetime import date
from typing import cast

from ..core.state import AppState
from ..tasks.task_models import Task, TaskNotFoundError, TaskStatus, parse_date
from ..tasks.task_schedule import Timeframe, duration_days, week_of

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by the console connector (/help, /week, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except (TypeError, ValueError):
            nparams = 3

        try:
            if nparams >= 3:
                h3 = cast(CommandHandler3, handler)
                return h3(state, args, emit)
            h2 = cast(CommandHandler2, handler)
            return h2(state, args)
        except TaskNotFoundError as e:
            return f"Task {e.args[0]} not found."
        except (ValueError, IndexError, OverflowError) as e:
            logger.debug("Command /%s rejected: %s", name, e)
            return f"Error: {e}"

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def format_task(task: Task) -> str:
    end = task.end_date.isoformat() if task.end_date else "open"
    who = f" @ {task.assignee}" if task.assignee else ""
    return (
        f"#{task.id} [{task.status.value}] {task.title} "
        f"({task.start_date.isoformat()} .. {end}) {task.completion}%{who}"
    )


def _render(title: str, tasks: Sequence[Task]) -> str:
    if not tasks:
        return f"{title}: no tasks."
    lines = [f"{title}: {len(tasks)} task(s)"]
    lines.extend(f"  {format_task(t)}" for t in tasks)
    return "\n".join(lines)


def _task_id(raw: str) -> int:
    try:
        return int(raw.lstrip("#"))
    except ValueError:
        raise ValueError(f"Bad task id: {raw!r}") from None


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_list(state: AppState, args: list[str]) -> str:
    """
    /list                          -> all tasks + per-status counts
    /list status=delayed           -> only delayed
    /list assignee=lee             -> assignee contains "lee"
    """
    status: str | None = None
    assignee: str | None = None
    for arg in args:
        key, sep, value = arg.partition("=")
        if not sep:
            raise ValueError(f"Expected key=value, got {arg!r}")
        key = key.lower()
        if key == "status":
            status = value
        elif key == "assignee":
            assignee = value.replace("_", " ")
        else:
            raise ValueError(f"Unknown filter: {key}")

    tasks = state.board.filter(status=status, assignee=assignee)
    counts = state.board.counts(tasks)
    summary = ", ".join(f"{s.value}={n}" for s, n in counts.items())
    return _render("Tasks", tasks) + f"\n  ({summary})"


def cmd_day(state: AppState, args: list[str]) -> str:
    day = parse_date(" ".join(args)) if args else state.today()
    return _render(f"Tasks on {day.isoformat()}", state.board.on_date(day))


def cmd_week(state: AppState, args: list[str]) -> str:
    day = parse_date(" ".join(args)) if args else state.today()
    week = week_of(day)
    return _render(
        f"Week {week[0].isoformat()} .. {week[-1].isoformat()}",
        state.board.in_week(day),
    )


def cmd_month(state: AppState, args: list[str]) -> str:
    """/month 2025-05 (defaults to the current month)."""
    if args:
        year_s, sep, month_s = args[0].partition("-")
        if not sep:
            raise ValueError("Usage: /month YYYY-MM")
        year, month = int(year_s), int(month_s)
        if not 1 <= month <= 12:
            raise ValueError(f"Bad month: {month}")
    else:
        today = state.today()
        year, month = today.year, today.month
    return _render(f"Month {year:04d}-{month:02d}", state.board.in_month(year, month))


def cmd_upcoming(state: AppState, args: list[str]) -> str:
    """/upcoming today|week|month [date]"""
    if not args:
        raise ValueError("Usage: /upcoming today|week|month [date]")
    try:
        timeframe = Timeframe(args[0].lower())
    except ValueError:
        raise ValueError(f"Unknown timeframe: {args[0]}") from None
    ref = parse_date(" ".join(args[1:])) if len(args) > 1 else state.today()
    return _render(
        f"Upcoming ({timeframe.value} from {ref.isoformat()})",
        state.board.upcoming(timeframe, ref),
    )


def cmd_add(state: AppState, args: list[str]) -> str:
    """/add <title> | <assignee> | <start> [| <end> [| <status>]]"""
    fields = [f.strip() for f in " ".join(args).split("|")]
    if len(fields) < 3 or not fields[0]:
        raise ValueError("Usage: /add <title> | <assignee> | <start> [| <end> [| <status>]]")

    end: date | None = None
    if len(fields) > 3 and fields[3]:
        end = parse_date(fields[3])
    status = TaskStatus.parse(fields[4]) if len(fields) > 4 and fields[4] else TaskStatus.NOT_STARTED

    task = state.board.create(
        title=fields[0],
        assignee=fields[1],
        start_date=parse_date(fields[2]),
        end_date=end,
        status=status,
    )
    return f"Created {format_task(task)}"


def cmd_status(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /status <id> <status> [completion]

    An explicit completion outside 0..100 is still applied (unless strict
    mode rejects it) but a warning line goes out through `emit`.
    """
    if len(args) < 2:
        raise ValueError("Usage: /status <id> <status> [completion]")
    task_id = _task_id(args[0])
    completion: int | None = None
    status_words = args[1:]
    if len(status_words) > 1 and status_words[-1].rstrip("%").lstrip("-").isdigit():
        completion = int(status_words[-1].rstrip("%"))
        status_words = status_words[:-1]
    task = state.board.set_status(task_id, " ".join(status_words), completion)
    if emit is not None and not 0 <= task.completion <= 100:
        emit(f"Warning: task {task.id} completion {task.completion}% is outside 0..100.")
    return f"Updated {format_task(task)}"


def cmd_assign(state: AppState, args: list[str]) -> str:
    if len(args) < 2:
        raise ValueError("Usage: /assign <id> <name>")
    task = state.board.assign(_task_id(args[0]), " ".join(args[1:]))
    return f"Assigned {format_task(task)}"


def cmd_delete(state: AppState, args: list[str]) -> str:
    if len(args) != 1:
        raise ValueError("Usage: /delete <id>")
    task_id = _task_id(args[0])
    if not state.board.delete(task_id):
        return f"Task {task_id} not found."
    return f"Deleted task {task_id}."


def cmd_subtask(state: AppState, args: list[str]) -> str:
    if len(args) < 2:
        raise ValueError("Usage: /subtask <id> <title>")
    task_id = _task_id(args[0])
    sub = state.board.add_subtask(task_id, " ".join(args[1:]))
    return f"Added subtask {sub.id} to task {task_id}: {sub.title} @ {sub.assignee or '-'}"


def cmd_move(state: AppState, args: list[str]) -> str:
    """/move <from> <to> (1-based positions in the list)"""
    if len(args) != 2:
        raise ValueError("Usage: /move <from> <to>")
    src, dst = int(args[0]) - 1, int(args[1]) - 1
    state.board.reorder(src, dst)
    return _render("Tasks", state.board.tasks)


def cmd_timeline(state: AppState, args: list[str]) -> str:
    tasks = state.board.timeline()
    if not tasks:
        return "Timeline: no tasks."
    lines = ["Timeline:"]
    for t in tasks:
        lines.append(f"  {format_task(t)} [{duration_days(t)}d]")
    return "\n".join(lines)


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register(
    "list", cmd_list, help_text="List tasks: /list [status=<s>] [assignee=<name>]."
)
registry.register("day", cmd_day, help_text="Tasks active on a date: /day 2025-05-15.")
registry.register("week", cmd_week, help_text="Tasks in the Monday-start week of a date.")
registry.register("month", cmd_month, help_text="Tasks touching a month: /month 2025-05.")
registry.register(
    "upcoming", cmd_upcoming, help_text="Upcoming tasks: /upcoming today|week|month [date]."
)
registry.register(
    "add", cmd_add, help_text="Create: /add title | assignee | start [| end [| status]]."
)
registry.register(
    "status", cmd_status, help_text="Set status: /status <id> <status> [completion]."
)
registry.register("assign", cmd_assign, help_text="Reassign: /assign <id> <name>.")
registry.register("delete", cmd_delete, help_text="Delete: /delete <id>.", aliases=["rm"])
registry.register("subtask", cmd_subtask, help_text="Add subtask: /subtask <id> <title>.")
registry.register("move", cmd_move, help_text="Reorder: /move <from> <to> (1-based).")
registry.register("timeline", cmd_timeline, help_text="Tasks by start date with durations.")
