# src/todo_cli/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- takes settings once (injectable for tests),
- ensures the local data directory exists,
- wires the JSON storage adapter into AuthManager and TaskStore,
- returns an AppState for the command layer.
"""

from __future__ import annotations

import logging
import sys
import time

from ..auth.auth_manager import AuthManager
from ..config import get_settings
from ..core.ports import Clock, Prompter, Storage
from ..core.state import AppState
from ..storage.json_storage import JsonStorage
from ..tasks.task_store import TaskStore
from .prompts import TerminalPrompter

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    for path in (
        settings.users_path,
        settings.session_path,
        settings.todos_path,
        settings.markdown_path,
    ):
        path.parent.mkdir(parents=True, exist_ok=True)


def _warn_stderr(message: str) -> None:
    print(f"⚠️  {message}", file=sys.stderr)


def create_storage(settings) -> JsonStorage:
    return JsonStorage(
        users_path=settings.users_path,
        session_path=settings.session_path,
        todos_path=settings.todos_path,
        markdown_path=settings.markdown_path,
    )


def create_initial_state(
    *,
    settings=None,
    storage: Storage | None = None,
    prompter: Prompter | None = None,
    clock: Clock = time.time,
) -> AppState:
    """
    Create AppState from the provided settings.

    Storage and prompter are injectable so tests can run the whole command
    layer without touching the terminal (or, with a fake, the disk).
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    if storage is None:
        _ensure_local_dirs(settings)
        storage = create_storage(settings)

    warn = _warn_stderr

    auth = AuthManager(
        storage,
        clock=clock,
        session_ttl_seconds=settings.session_ttl_seconds,
        bcrypt_rounds=settings.bcrypt_rounds,
    )
    tasks = TaskStore(storage, clock=clock, on_mirror_error=warn)

    logger.debug("State ready data_dir=%s todos=%d", settings.data_dir, tasks.count())
    return AppState(
        settings=settings,
        storage=storage,
        auth=auth,
        tasks=tasks,
        prompter=prompter if prompter is not None else TerminalPrompter(),
        clock=clock,
        warn=warn,
    )
