# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from todo_cli.auth.auth_manager import AuthManager
from todo_cli.cli.bootstrap import create_initial_state
from todo_cli.core.state import AppState
from todo_cli.tasks.task_store import TaskStore

from .fakes import FakeClock, FakePrompter, InMemoryStorage

# bcrypt's minimum cost keeps the suite fast.
TEST_BCRYPT_ROUNDS = 4


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with the bootstrap.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the developer's environment and .env.
    """
    return SimpleNamespace(
        app_name="todo-test",
        log_level="WARNING",
        data_dir=tmp_path,
        users_path=tmp_path / "users.json",
        session_path=tmp_path / "session.json",
        todos_path=tmp_path / "todos.json",
        markdown_path=tmp_path / "todos.md",
        session_ttl_days=7,
        session_ttl_seconds=7 * 24 * 3600,
        bcrypt_rounds=TEST_BCRYPT_ROUNDS,
    )


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def storage() -> InMemoryStorage:
    return InMemoryStorage()


@pytest.fixture()
def auth(storage: InMemoryStorage, clock: FakeClock) -> AuthManager:
    return AuthManager(storage, clock=clock, bcrypt_rounds=TEST_BCRYPT_ROUNDS)


@pytest.fixture()
def mirror_errors() -> list[str]:
    return []


@pytest.fixture()
def task_store(storage: InMemoryStorage, clock: FakeClock, mirror_errors: list[str]) -> TaskStore:
    return TaskStore(storage, clock=clock, on_mirror_error=mirror_errors.append)


@pytest.fixture()
def prompter() -> FakePrompter:
    return FakePrompter()


@pytest.fixture()
def state(
    settings: SimpleNamespace,
    storage: InMemoryStorage,
    prompter: FakePrompter,
    clock: FakeClock,
) -> AppState:
    """AppState wired with the in-memory storage, a scripted prompter and a fake clock."""
    return create_initial_state(settings=settings, storage=storage, prompter=prompter, clock=clock)
