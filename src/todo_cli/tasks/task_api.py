# src/todo_cli/tasks/task_api.py

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from ..core.errors import NotFoundError, ValidationError
from ..reminders.reminder_engine import is_due_on, is_overdue, local_date
from .task_models import Task, TaskPriority, TaskStatus
from .task_store import TaskStore

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class TaskCounts:
    pending: int
    completed: int
    overdue: int
    total: int


def filter_tasks(
    tasks: Iterable[Task],
    *,
    status: TaskStatus | None = None,
    priority: TaskPriority | None = None,
) -> list[Task]:
    out = list(tasks)
    if status is not None:
        out = [t for t in out if t.status is status]
    if priority is not None:
        out = [t for t in out if t.priority is priority]
    return out


def sort_for_display(tasks: Iterable[Task]) -> list[Task]:
    """Pending first, then high priority first, then earliest due (undated last)."""
    return sorted(
        tasks,
        key=lambda t: (
            not t.is_pending,
            -t.priority.rank,
            t.due_at is None,
            t.due_at or 0.0,
            t.created_at,
        ),
    )


def overdue_tasks(tasks: Iterable[Task], now_ts: float) -> list[Task]:
    return [t for t in tasks if is_overdue(t, now_ts)]


def due_today(tasks: Iterable[Task], now_ts: float) -> list[Task]:
    """Tasks of any status whose due date falls on today's local date."""
    today = local_date(now_ts)
    return [t for t in tasks if is_due_on(t, today)]


def task_counts(tasks: Iterable[Task], now_ts: float) -> TaskCounts:
    items = list(tasks)
    return TaskCounts(
        pending=sum(1 for t in items if t.status is TaskStatus.PENDING),
        completed=sum(1 for t in items if t.status is TaskStatus.COMPLETED),
        overdue=sum(1 for t in items if is_overdue(t, now_ts)),
        total=len(items),
    )


def resolve_task(store: TaskStore, owner_id: str, ref: str) -> Task:
    """
    Find one of the owner's tasks by full id or by a unique id prefix.

    Another owner's task is reported exactly like a missing one.
    """
    ref = (ref or "").strip()
    if not ref:
        raise ValidationError("Todo id cannot be empty")

    owned = store.list_for_owner(owner_id)
    exact = [t for t in owned if t.id == ref]
    if exact:
        return exact[0]

    matches = [t for t in owned if t.id.startswith(ref)]
    if not matches:
        raise NotFoundError("Todo not found")
    if len(matches) > 1:
        logger.debug("Ambiguous todo ref=%s matches=%d", ref, len(matches))
        raise ValidationError(f"Ambiguous todo id '{ref}': {len(matches)} todos match")
    return matches[0]
