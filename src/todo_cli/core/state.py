# src/todo_cli/core/state.py

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from ..auth.auth_manager import AuthManager
from ..tasks.task_store import TaskStore
from .ports import Clock, Prompter, Storage


@dataclass
class AppState:
    """Everything a command needs, built once per process by the bootstrap."""

    # Settings object (config.Settings in production, a namespace in tests).
    settings: Any

    storage: Storage
    auth: AuthManager
    tasks: TaskStore
    prompter: Prompter
    clock: Clock

    # User-visible side channel for non-fatal problems (stderr in production).
    warn: Callable[[str], None] = field(default=lambda _msg: None)

    def now(self) -> float:
        return self.clock()
