# src/todo_cli/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, time as dt_time
from enum import StrEnum
from typing import Any

from ..core.errors import DateParseError, PriorityParseError, StatusParseError

DUE_DATE_FORMAT = "%Y-%m-%d"


class TaskStatus(StrEnum):
    """Two-state lifecycle: pending -> completed (no way back)."""

    PENDING = "pending"
    COMPLETED = "completed"

    @classmethod
    def parse(cls, raw: str) -> TaskStatus:
        key = (raw or "").strip().lower()
        if key in ("p", "pending"):
            return cls.PENDING
        if key in ("c", "complete", "completed", "done"):
            return cls.COMPLETED
        raise StatusParseError(f"Invalid status: {raw}. Use 'pending' or 'completed'")

    @classmethod
    def from_db(cls, raw: str | None) -> TaskStatus:
        if not raw:
            return cls.PENDING
        try:
            return cls(raw)
        except ValueError:
            return cls.PENDING


class TaskPriority(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def rank(self) -> int:
        return _PRIORITY_RANK[self]

    @property
    def label(self) -> str:
        return self.value.capitalize()

    @classmethod
    def parse(cls, raw: str) -> TaskPriority:
        key = (raw or "").strip().lower()
        if key in ("l", "low"):
            return cls.LOW
        if key in ("m", "med", "medium"):
            return cls.MEDIUM
        if key in ("h", "high"):
            return cls.HIGH
        raise PriorityParseError(f"Invalid priority: {raw}. Use 'low', 'medium', or 'high'")

    @classmethod
    def from_db(cls, raw: str | None) -> TaskPriority:
        if not raw:
            return cls.MEDIUM
        try:
            return cls(raw)
        except ValueError:
            return cls.MEDIUM


_PRIORITY_RANK = {TaskPriority.LOW: 0, TaskPriority.MEDIUM: 1, TaskPriority.HIGH: 2}


def parse_due_date(raw: str) -> float:
    """
    Parse a date-only "YYYY-MM-DD" string into a local end-of-day timestamp.

    The time of day is pinned to 23:59:59 so a task due "today" stays on time
    until the day is over.
    """
    try:
        day = datetime.strptime((raw or "").strip(), DUE_DATE_FORMAT).date()
    except ValueError:
        raise DateParseError(f"Invalid due date: {raw}. Use YYYY-MM-DD") from None
    return datetime.combine(day, dt_time(23, 59, 59)).timestamp()


@dataclass(slots=True)
class Task:
    id: str
    title: str
    description: str | None
    status: TaskStatus
    priority: TaskPriority
    due_at: float | None
    created_at: float
    updated_at: float
    user_id: str

    @property
    def short_id(self) -> str:
        return self.id[:8]

    @property
    def is_pending(self) -> bool:
        return self.status is TaskStatus.PENDING

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "status": self.status.value,
            "priority": self.priority.value,
            "due_at": self.due_at,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
            "user_id": self.user_id,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Task:
        created_at = float(data.get("created_at") or 0.0)
        due_raw = data.get("due_at")
        return cls(
            id=str(data["id"]),
            title=str(data.get("title") or ""),
            description=data.get("description") or None,
            status=TaskStatus.from_db(data.get("status")),
            priority=TaskPriority.from_db(data.get("priority")),
            due_at=float(due_raw) if due_raw is not None else None,
            created_at=created_at,
            updated_at=float(data.get("updated_at") or created_at),
            user_id=str(data["user_id"]),
        )
