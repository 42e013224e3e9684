# tests/test_task_models.py

from __future__ import annotations

from datetime import datetime

import pytest

from todo_cli.core.errors import DateParseError, PriorityParseError, StatusParseError, ValidationError
from todo_cli.tasks.task_models import Task, TaskPriority, TaskStatus, parse_due_date


@pytest.mark.parametrize("raw", ["p", "P", "pending", "Pending"])
def test_status_parse_pending(raw: str) -> None:
    assert TaskStatus.parse(raw) is TaskStatus.PENDING


@pytest.mark.parametrize("raw", ["c", "complete", "completed", "DONE"])
def test_status_parse_completed(raw: str) -> None:
    assert TaskStatus.parse(raw) is TaskStatus.COMPLETED


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("l", TaskPriority.LOW),
        ("Low", TaskPriority.LOW),
        ("m", TaskPriority.MEDIUM),
        ("med", TaskPriority.MEDIUM),
        ("MEDIUM", TaskPriority.MEDIUM),
        ("h", TaskPriority.HIGH),
        ("high", TaskPriority.HIGH),
    ],
)
def test_priority_parse(raw: str, expected: TaskPriority) -> None:
    assert TaskPriority.parse(raw) is expected


def test_parse_errors_are_typed() -> None:
    with pytest.raises(StatusParseError, match="Invalid status: open"):
        TaskStatus.parse("open")
    with pytest.raises(PriorityParseError, match="Invalid priority: urgent"):
        TaskPriority.parse("urgent")
    with pytest.raises(ValidationError):
        TaskPriority.parse("")


def test_priority_is_ordered() -> None:
    assert TaskPriority.LOW.rank < TaskPriority.MEDIUM.rank < TaskPriority.HIGH.rank


def test_parse_due_date_normalizes_to_end_of_day() -> None:
    ts = parse_due_date("2026-10-20")
    assert datetime.fromtimestamp(ts) == datetime(2026, 10, 20, 23, 59, 59)


@pytest.mark.parametrize("raw", ["", "tomorrow", "2026-13-01", "20/10/2026"])
def test_parse_due_date_rejects_garbage(raw: str) -> None:
    with pytest.raises(DateParseError):
        parse_due_date(raw)


def test_task_from_dict_is_tolerant() -> None:
    task = Task.from_dict(
        {"id": "t1", "title": "Buy milk", "status": "bogus", "created_at": 10, "user_id": "u1"}
    )
    assert task.status is TaskStatus.PENDING
    assert task.priority is TaskPriority.MEDIUM
    assert task.updated_at == 10.0
    assert task.due_at is None
    assert Task.from_dict(task.to_dict()) == task
