# src/todo_cli/tasks/task_store.py

from __future__ import annotations

import logging
import time
import uuid
from collections.abc import Callable
from dataclasses import replace

from ..core.errors import NotFoundError, ValidationError
from ..core.ports import Clock, Storage
from .task_models import Task, TaskPriority, TaskStatus

logger = logging.getLogger(__name__)

MirrorErrorHandler = Callable[[str], None]


class TaskStore:
    """
    In-memory task mapping backed by a Storage port.

    - the mapping loaded at construction is the working copy for the process
    - every mutation rewrites the whole collection, then syncs the Markdown mirror
    - a failed save leaves the working copy untouched
    - mirror failures are logged and reported, never rolled back

    Ownership checks belong to the caller: ids are global, list_for_owner is the
    only multi-record read.
    """

    def __init__(
        self,
        storage: Storage,
        *,
        clock: Clock = time.time,
        on_mirror_error: MirrorErrorHandler | None = None,
    ) -> None:
        self._storage = storage
        self._clock = clock
        self._on_mirror_error = on_mirror_error
        self._todos: dict[str, Task] = storage.load_todos()
        logger.debug("TaskStore ready total=%d", len(self._todos))

    # ---- low-level helpers ----

    def _persist(self, todos: dict[str, Task]) -> None:
        # The working copy only changes once the save went through.
        self._storage.save_todos(todos)
        self._todos = todos

    def _sync_mirror(self, action: str, fn: Callable[[Task], None], task: Task) -> None:
        try:
            fn(task)
        except OSError as e:
            logger.warning("Markdown mirror %s failed for task id=%s: %s", action, task.id, e)
            if self._on_mirror_error is not None:
                self._on_mirror_error(f"Markdown mirror could not be updated ({action}): {e}")

    def _require(self, task_id: str) -> Task:
        task = self._todos.get(task_id)
        if task is None:
            raise NotFoundError("Todo not found")
        return task

    # ---- public API ----

    def count(self) -> int:
        return len(self._todos)

    def create(
        self,
        title: str,
        description: str | None = None,
        priority: TaskPriority = TaskPriority.MEDIUM,
        due_at: float | None = None,
        *,
        owner_id: str,
    ) -> Task:
        if not title or not title.strip():
            raise ValidationError("Title cannot be empty")

        now = self._clock()
        task = Task(
            id=str(uuid.uuid4()),
            title=title.strip(),
            description=(description or "").strip() or None,
            status=TaskStatus.PENDING,
            priority=priority,
            due_at=due_at,
            created_at=now,
            updated_at=now,
            user_id=owner_id,
        )

        self._persist({**self._todos, task.id: task})
        self._sync_mirror("append", self._storage.append_to_markdown, task)

        logger.debug(
            "Task added id=%s owner=%s priority=%s due_at=%s",
            task.id,
            owner_id,
            priority.value,
            due_at,
        )
        return replace(task)

    def list_for_owner(self, owner_id: str) -> list[Task]:
        return [replace(t) for t in self._todos.values() if t.user_id == owner_id]

    def get(self, task_id: str) -> Task:
        return replace(self._require(task_id))

    def complete(self, task_id: str) -> Task:
        task = self._require(task_id)
        done = replace(task, status=TaskStatus.COMPLETED, updated_at=self._clock())

        self._persist({**self._todos, done.id: done})
        self._sync_mirror("update", self._storage.update_markdown_todo, done)

        logger.debug("Task completed id=%s", done.id)
        return replace(done)

    def update(self, task: Task) -> Task:
        """
        Replace a stored record with edited metadata.

        Status and ownership are carried over from the stored record; edit never
        reopens a task or moves it to another user.
        """
        current = self._require(task.id)
        if not task.title or not task.title.strip():
            raise ValidationError("Title cannot be empty")

        updated = replace(
            task,
            title=task.title.strip(),
            description=(task.description or "").strip() or None,
            status=current.status,
            user_id=current.user_id,
            created_at=current.created_at,
            updated_at=self._clock(),
        )

        self._persist({**self._todos, updated.id: updated})
        self._sync_mirror("update", self._storage.update_markdown_todo, updated)

        logger.debug("Task updated id=%s", updated.id)
        return replace(updated)

    def delete(self, task_id: str) -> Task:
        removed = self._require(task_id)
        self._persist({k: v for k, v in self._todos.items() if k != task_id})
        self._sync_mirror("remove", self._storage.remove_from_markdown, removed)

        logger.debug("Task deleted id=%s", task_id)
        return removed
