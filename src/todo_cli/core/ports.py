# src/todo_cli/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

AuthManager and TaskStore depend on these Protocols instead of concrete classes,
so the file-backed adapter can be swapped for an in-memory fake in tests.
"""

from typing import Callable, Protocol, Sequence

from ..auth.auth_models import Session, User
from ..tasks.task_models import Task

Clock = Callable[[], float]
# Returns "now" as POSIX seconds; time.time in production.


class Storage(Protocol):
    """
    Durable load/save of the three collections plus the Markdown mirror.

    Loads never raise: a missing or unreadable file yields an empty collection.
    Saves raise OSError on failure.
    """

    def load_users(self) -> dict[str, User]: ...
    def save_users(self, users: dict[str, User]) -> None: ...

    def load_session(self) -> Session | None: ...
    def save_session(self, session: Session) -> None: ...
    def clear_session(self) -> None: ...

    def load_todos(self) -> dict[str, Task]: ...
    def save_todos(self, todos: dict[str, Task]) -> None: ...

    # Human-readable mirror (best-effort, not the source of truth)
    def append_to_markdown(self, task: Task) -> None: ...
    def update_markdown_todo(self, task: Task) -> None: ...
    def remove_from_markdown(self, task: Task) -> None: ...


class Prompter(Protocol):
    """Interactive input used by the CLI shell (terminal in production, scripted in tests)."""

    def text(self, prompt: str, *, default: str | None = None, allow_empty: bool = False) -> str: ...
    def password(self, prompt: str, *, confirm: bool = False) -> str: ...
    def select(self, prompt: str, items: Sequence[str], *, default: int | None = None) -> int: ...
