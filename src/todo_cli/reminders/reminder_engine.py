# src/todo_cli/reminders/reminder_engine.py

"""
Reminder derivation.

Pure functions over a snapshot of tasks and a "now" timestamp:
- derive() turns pending tasks into prioritized, human-readable notices,
- summarize() renders the one-line daily summary.

Nothing here is persisted; results are recomputed on every call.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import date, datetime
from enum import IntEnum

from ..tasks.task_models import Task, TaskStatus

HOUR = 3600
DAY = 24 * HOUR

STALE_AFTER_SECONDS = 7 * DAY
LOOKAHEAD_SECONDS = 7 * DAY


class ReminderLevel(IntEnum):
    INFO = 0
    WARNING = 1
    CRITICAL = 2


@dataclass(slots=True, frozen=True)
class Reminder:
    message: str
    emoji: str
    level: ReminderLevel


def is_overdue(task: Task, now_ts: float) -> bool:
    """Pending, has a due time, and no time left (due exactly now counts)."""
    return task.is_pending and task.due_at is not None and task.due_at - now_ts <= 0


def local_date(ts: float) -> date:
    return datetime.fromtimestamp(ts).date()


def is_due_on(task: Task, day: date) -> bool:
    return task.due_at is not None and local_date(task.due_at) == day


def _due_reminder(task: Task, due_at: float, now_ts: float) -> Reminder | None:
    remaining = due_at - now_ts

    if remaining <= 0:
        overdue = -remaining
        days = int(overdue // DAY)
        if days > 0:
            message = f"'{task.title}' is {days} day(s) overdue!"
        else:
            message = f"'{task.title}' is {int(overdue // HOUR)} hour(s) overdue!"
        return Reminder(message=message, emoji="🚨", level=ReminderLevel.CRITICAL)

    if remaining < DAY:
        hours = int(remaining // HOUR)
        if hours < 1:
            message = f"'{task.title}' is due in less than an hour!"
        else:
            message = f"'{task.title}' is due in {hours} hour(s)!"
        return Reminder(message=message, emoji="⏰", level=ReminderLevel.WARNING)

    if remaining < 2 * DAY:
        return Reminder(
            message=f"'{task.title}' is due tomorrow!",
            emoji="📅",
            level=ReminderLevel.INFO,
        )

    if remaining < LOOKAHEAD_SECONDS:
        days = int(remaining // DAY)
        return Reminder(
            message=f"'{task.title}' is due in {days} day(s)!",
            emoji="📋",
            level=ReminderLevel.INFO,
        )

    return None


def _stale_reminder(task: Task, now_ts: float) -> Reminder | None:
    age = now_ts - task.created_at
    if age <= STALE_AFTER_SECONDS:
        return None
    days = int(age // DAY)
    return Reminder(
        message=(
            f"'{task.title}' has been pending for {days} day(s)"
            " - consider setting a due date!"
        ),
        emoji="💭",
        level=ReminderLevel.INFO,
    )


def derive(tasks: Iterable[Task], now_ts: float) -> list[Reminder]:
    """
    Build reminders for pending tasks, most severe first.

    Dated tasks are scanned first, then undated ones; the final sort is stable,
    so reminders of equal level keep that order.
    """
    pending = [t for t in tasks if t.status is TaskStatus.PENDING]
    reminders: list[Reminder] = []

    for task in pending:
        if task.due_at is not None:
            r = _due_reminder(task, task.due_at, now_ts)
            if r is not None:
                reminders.append(r)

    for task in pending:
        if task.due_at is None:
            r = _stale_reminder(task, now_ts)
            if r is not None:
                reminders.append(r)

    reminders.sort(key=lambda r: r.level, reverse=True)
    return reminders


def summarize(tasks: Sequence[Task], now_ts: float) -> str:
    today = local_date(now_ts)

    pending = sum(1 for t in tasks if t.status is TaskStatus.PENDING)
    completed_today = sum(
        1
        for t in tasks
        if t.status is TaskStatus.COMPLETED and local_date(t.updated_at) == today
    )
    due_today = sum(1 for t in tasks if t.is_pending and is_due_on(t, today))
    overdue = sum(1 for t in tasks if is_overdue(t, now_ts))

    return (
        f"📊 Daily Summary: {pending} pending, {completed_today} completed today, "
        f"{due_today} due today, {overdue} overdue"
    )
