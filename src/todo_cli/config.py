# src/todo_cli/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- Nothing is read from disk at import time except an optional .env.
- Data files live under one directory unless overridden one by one.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "TODO"

# A local .env (gitignored) only fills in what the real environment leaves unset.
load_dotenv(override=False)


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Local data paths ----
    data_dir: Path
    users_path: Path
    session_path: Path
    todos_path: Path
    markdown_path: Path

    # ---- Auth ----
    session_ttl_days: int
    bcrypt_rounds: int

    @property
    def session_ttl_seconds(self) -> int:
        return self.session_ttl_days * 24 * 3600

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "todo") or "todo"
        log_level = _env(_k("LOG_LEVEL"), "WARNING")

        data_dir = _env_path(_k("DATA_DIR"), Path("~/.todo-cli").expanduser())
        users_path = _env_path(_k("USERS_PATH"), data_dir / "users.json")
        session_path = _env_path(_k("SESSION_PATH"), data_dir / "session.json")
        todos_path = _env_path(_k("TODOS_PATH"), data_dir / "todos.json")
        markdown_path = _env_path(_k("MARKDOWN_PATH"), data_dir / "todos.md")

        session_ttl_days = max(1, _env_int(_k("SESSION_TTL_DAYS"), 7))
        # bcrypt accepts 4..31 rounds.
        bcrypt_rounds = min(31, max(4, _env_int(_k("BCRYPT_ROUNDS"), 12)))

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            users_path=users_path,
            session_path=session_path,
            todos_path=todos_path,
            markdown_path=markdown_path,
            session_ttl_days=session_ttl_days,
            bcrypt_rounds=bcrypt_rounds,
        )


_SETTINGS: Settings | None = None


def get_settings() -> Settings:
    global _SETTINGS
    if _SETTINGS is None:
        _SETTINGS = Settings.from_env()
    return _SETTINGS
