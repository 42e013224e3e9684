# tests/test_task_api.py

from __future__ import annotations

from datetime import datetime

import pytest

from todo_cli.core.errors import NotFoundError, ValidationError
from todo_cli.tasks.task_api import (
    due_today,
    filter_tasks,
    overdue_tasks,
    resolve_task,
    sort_for_display,
    task_counts,
)
from todo_cli.tasks.task_models import Task, TaskPriority, TaskStatus
from todo_cli.tasks.task_store import TaskStore

from .fakes import FakeClock, InMemoryStorage


def _ids(tasks: list[Task]) -> list[str]:
    return [t.title for t in tasks]


def test_filter_and_sort(task_store: TaskStore) -> None:
    low = task_store.create("low", priority=TaskPriority.LOW, owner_id="u1")
    high = task_store.create("high", priority=TaskPriority.HIGH, owner_id="u1")
    task_store.create("med-due", priority=TaskPriority.MEDIUM, due_at=10.0**10, owner_id="u1")
    task_store.create("med", priority=TaskPriority.MEDIUM, owner_id="u1")
    task_store.complete(high.id)

    todos = task_store.list_for_owner("u1")

    assert _ids(sort_for_display(todos)) == ["med-due", "med", "low", "high"]
    assert _ids(filter_tasks(todos, status=TaskStatus.COMPLETED)) == ["high"]
    assert [t.id for t in filter_tasks(todos, priority=TaskPriority.LOW)] == [low.id]


def test_overdue_today_and_counts(task_store: TaskStore, clock: FakeClock) -> None:
    clock.now = datetime(2027, 3, 10, 12, 0, 0).timestamp()
    task_store.create("late", due_at=clock.now - 60, owner_id="u1")
    task_store.create("now", due_at=clock.now, owner_id="u1")
    done = task_store.create("done-late", due_at=clock.now - 60, owner_id="u1")
    task_store.create("later", due_at=clock.now + 30 * 86400, owner_id="u1")
    task_store.complete(done.id)

    todos = task_store.list_for_owner("u1")

    assert sorted(_ids(overdue_tasks(todos, clock.now))) == ["late", "now"]
    # "today" lists every status, completed included.
    assert sorted(_ids(due_today(todos, clock.now))) == ["done-late", "late", "now"]
    counts = task_counts(todos, clock.now)
    assert (counts.pending, counts.completed, counts.overdue, counts.total) == (3, 1, 2, 4)


def test_resolve_by_full_id_and_prefix(task_store: TaskStore) -> None:
    task = task_store.create("mine", owner_id="alice")

    assert resolve_task(task_store, "alice", task.id).id == task.id
    assert resolve_task(task_store, "alice", task.short_id).id == task.id


def test_resolve_hides_other_owners(task_store: TaskStore) -> None:
    theirs = task_store.create("theirs", owner_id="bob")

    with pytest.raises(NotFoundError):
        resolve_task(task_store, "alice", theirs.id)


def test_resolve_rejects_empty_and_ambiguous(storage: InMemoryStorage, clock: FakeClock) -> None:
    for task_id, title in [("abc11111-0000", "one"), ("abc22222-0000", "two")]:
        storage.todos[task_id] = Task(
            id=task_id,
            title=title,
            description=None,
            status=TaskStatus.PENDING,
            priority=TaskPriority.MEDIUM,
            due_at=None,
            created_at=clock.now,
            updated_at=clock.now,
            user_id="alice",
        )
    store = TaskStore(storage, clock=clock)

    with pytest.raises(ValidationError):
        resolve_task(store, "alice", "  ")
    with pytest.raises(ValidationError, match="Ambiguous"):
        resolve_task(store, "alice", "abc")
    assert resolve_task(store, "alice", "abc2").title == "two"
    with pytest.raises(NotFoundError):
        resolve_task(store, "alice", "zzz")
