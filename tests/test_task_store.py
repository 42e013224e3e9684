# tests/test_task_store.py

from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from pathlib import Path

import pytest

from todo_cli.core.errors import NotFoundError, ValidationError
from todo_cli.storage.json_storage import JsonStorage
from todo_cli.tasks.task_models import TaskPriority, TaskStatus, parse_due_date
from todo_cli.tasks.task_store import TaskStore

from .fakes import FakeClock, InMemoryStorage


def test_create_then_get(task_store: TaskStore, storage: InMemoryStorage, clock: FakeClock) -> None:
    due = parse_due_date("2027-01-20")
    task = task_store.create("Write report", "Q4 numbers", TaskPriority.HIGH, due, owner_id="u1")

    got = task_store.get(task.id)
    assert got == task
    assert got.status is TaskStatus.PENDING
    assert got.created_at == got.updated_at == clock.now
    assert datetime.fromtimestamp(got.due_at).time().isoformat() == "23:59:59"

    assert task.id in storage.todos
    assert storage.mirror == [("append", task.id)]


def test_create_rejects_empty_title(task_store: TaskStore, storage: InMemoryStorage) -> None:
    with pytest.raises(ValidationError):
        task_store.create("   ", owner_id="u1")
    assert storage.save_calls == 0
    assert task_store.count() == 0


def test_list_for_owner_never_leaks(task_store: TaskStore) -> None:
    a1 = task_store.create("a1", owner_id="alice")
    task_store.create("b1", owner_id="bob")
    a2 = task_store.create("a2", owner_id="alice")

    alice = task_store.list_for_owner("alice")
    assert {t.id for t in alice} == {a1.id, a2.id}
    assert all(t.user_id == "alice" for t in alice)
    assert task_store.list_for_owner("carol") == []


def test_get_unknown_is_not_found(task_store: TaskStore) -> None:
    with pytest.raises(NotFoundError, match="Todo not found"):
        task_store.get("nope")


def test_complete_is_idempotent_but_touches_updated_at(
    task_store: TaskStore, storage: InMemoryStorage, clock: FakeClock
) -> None:
    task = task_store.create("Pay rent", owner_id="u1")

    clock.advance(10)
    task_store.complete(task.id)
    first = task_store.get(task.id)
    assert first.status is TaskStatus.COMPLETED
    assert first.updated_at == clock.now

    clock.advance(10)
    task_store.complete(task.id)
    second = task_store.get(task.id)
    assert second.status is TaskStatus.COMPLETED
    assert second.updated_at == clock.now > first.updated_at

    assert storage.todos[task.id].status is TaskStatus.COMPLETED
    assert storage.mirror[-2:] == [("update", task.id), ("update", task.id)]


def test_complete_unknown_is_not_found(task_store: TaskStore) -> None:
    with pytest.raises(NotFoundError):
        task_store.complete("nope")


def test_update_replaces_metadata_but_keeps_status(task_store: TaskStore, clock: FakeClock) -> None:
    task = task_store.create("Draft", owner_id="u1")
    task_store.complete(task.id)
    clock.advance(5)

    edited = task_store.get(task.id)
    edited.title = "Final"
    edited.description = "v2"
    edited.priority = TaskPriority.LOW
    edited.status = TaskStatus.PENDING  # ignored: edit never reopens
    edited.user_id = "someone-else"  # ignored: ownership is fixed
    task_store.update(edited)

    got = task_store.get(task.id)
    assert (got.title, got.description, got.priority) == ("Final", "v2", TaskPriority.LOW)
    assert got.status is TaskStatus.COMPLETED
    assert got.user_id == "u1"
    assert got.updated_at == clock.now


def test_update_unknown_is_not_found(task_store: TaskStore) -> None:
    task = task_store.create("x", owner_id="u1")
    task_store.delete(task.id)
    with pytest.raises(NotFoundError):
        task_store.update(task)


def test_delete_removes_record_and_mirror_entry(task_store: TaskStore, storage: InMemoryStorage) -> None:
    task = task_store.create("Old", owner_id="u1")

    removed = task_store.delete(task.id)

    assert removed.id == task.id
    assert task.id not in storage.todos
    assert storage.mirror[-1] == ("remove", task.id)
    with pytest.raises(NotFoundError):
        task_store.get(task.id)


def test_delete_unknown_leaves_mapping_unchanged(task_store: TaskStore, storage: InMemoryStorage) -> None:
    task_store.create("Keep", owner_id="u1")
    before = dict(storage.todos)
    saves = storage.save_calls

    with pytest.raises(NotFoundError):
        task_store.delete("nope")

    assert storage.todos == before
    assert storage.save_calls == saves
    assert task_store.count() == 1


def test_mirror_failure_is_reported_but_not_fatal(
    task_store: TaskStore, storage: InMemoryStorage, mirror_errors: list[str]
) -> None:
    storage.fail_mirror = True

    task = task_store.create("Still saved", owner_id="u1")
    task_store.complete(task.id)

    assert storage.todos[task.id].status is TaskStatus.COMPLETED
    assert len(mirror_errors) == 2
    assert "append" in mirror_errors[0]


def test_structured_save_failure_propagates(task_store: TaskStore, storage: InMemoryStorage) -> None:
    kept = task_store.create("Kept", owner_id="u1")
    storage.fail_saves = True

    with pytest.raises(OSError):
        task_store.create("Doomed", owner_id="u1")
    with pytest.raises(OSError):
        task_store.complete(kept.id)
    with pytest.raises(OSError):
        task_store.update(replace(kept, title="Renamed"))
    with pytest.raises(OSError):
        task_store.delete(kept.id)

    # The working copy still matches what is on disk.
    [only] = task_store.list_for_owner("u1")
    assert only == kept
    assert only.status is TaskStatus.PENDING
    assert storage.mirror == [("append", kept.id)]

    storage.fail_saves = False
    task_store.create("Next", owner_id="u1")
    assert sorted(t.title for t in storage.todos.values()) == ["Kept", "Next"]


def test_undecodable_mirror_file_does_not_block_mutations(
    tmp_path: Path, clock: FakeClock, mirror_errors: list[str]
) -> None:
    js = JsonStorage.in_dir(tmp_path)
    js.markdown_path.write_bytes(b"# Todos\n\xff\xfe garbage\n")
    store = TaskStore(js, clock=clock, on_mirror_error=mirror_errors.append)

    task = store.create("Persisted anyway", owner_id="u1")
    store.complete(task.id)
    store.delete(task.id)

    assert js.load_todos() == {}
    assert len(mirror_errors) == 3
    assert "append" in mirror_errors[0]
    assert "not valid UTF-8" in mirror_errors[0]


def test_store_loads_existing_tasks(storage: InMemoryStorage, clock: FakeClock) -> None:
    first = TaskStore(storage, clock=clock)
    task = first.create("Persisted", owner_id="u1")

    second = TaskStore(storage, clock=clock)
    assert second.get(task.id).title == "Persisted"
