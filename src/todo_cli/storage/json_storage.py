# src/todo_cli/storage/json_storage.py

"""
File-backed Storage adapter.

Layout (all under the data dir, ignored by git):
- users.json    {user_id: user}
- session.json  {user_id, created_at, expires_at}
- todos.json    {todo_id: todo}
- todos.md      human-readable mirror, one delimited block per todo

Writes go through a .tmp sibling + os.replace, so each save is atomic.
Loads are tolerant: missing or corrupt files give an empty collection.
"""

from __future__ import annotations

import contextlib
import json
import logging
import os
import re
from collections.abc import Callable
from datetime import datetime
from pathlib import Path
from typing import Any, TypeVar

from ..auth.auth_models import Session, User
from ..tasks.task_models import Task, TaskStatus

logger = logging.getLogger(__name__)

T = TypeVar("T")

MARKDOWN_HEADER = "# Todos\n\n"
_BLOCK_START = "<!-- todo:{id} -->"
_BLOCK_END = "<!-- /todo:{id} -->"


def _write_atomic(path: Path, text: str, *, private: bool = False) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(path.suffix + ".tmp")
    tmp.write_text(text, "utf-8")
    os.replace(tmp, path)
    if private:
        with contextlib.suppress(OSError):
            # Best-effort: password hashes and session data stay owner-readable only.
            os.chmod(path, 0o600)


def _read_json(path: Path) -> Any | None:
    if not path.exists():
        return None
    try:
        return json.loads(path.read_text("utf-8"))
    except (OSError, ValueError):
        logger.warning("Failed to read %s; starting empty.", path, exc_info=True)
        return None


def _load_mapping(path: Path, parse: Callable[[dict[str, Any]], T]) -> dict[str, T]:
    data = _read_json(path)
    if not isinstance(data, dict):
        if data is not None:
            logger.warning("Unexpected JSON shape in %s; starting empty.", path)
        return {}

    out: dict[str, T] = {}
    for key, raw in data.items():
        if not isinstance(key, str) or not isinstance(raw, dict):
            continue
        try:
            out[key] = parse(raw)
        except (KeyError, TypeError, ValueError):
            logger.warning("Skipping malformed record id=%s in %s", key, path)
    return out


def render_markdown_block(task: Task) -> str:
    box = "x" if task.status is TaskStatus.COMPLETED else " "
    meta = [f"priority: {task.priority.label}"]
    if task.due_at is not None:
        meta.append("due: " + datetime.fromtimestamp(task.due_at).strftime("%Y-%m-%d %H:%M"))
    meta.append("created: " + datetime.fromtimestamp(task.created_at).strftime("%Y-%m-%d %H:%M"))

    lines = [
        _BLOCK_START.format(id=task.id),
        f"- [{box}] **{task.title}** ({', '.join(meta)})",
    ]
    if task.description:
        lines.extend(f"  {line}" for line in task.description.splitlines())
    lines.append(f"  id: `{task.id}`")
    lines.append(_BLOCK_END.format(id=task.id))
    return "\n".join(lines) + "\n"


def _block_pattern(task_id: str) -> re.Pattern[str]:
    start = re.escape(_BLOCK_START.format(id=task_id))
    end = re.escape(_BLOCK_END.format(id=task_id))
    return re.compile(rf"{start}\n.*?{end}\n?", re.DOTALL)


class JsonStorage:
    def __init__(
        self,
        *,
        users_path: str | Path,
        session_path: str | Path,
        todos_path: str | Path,
        markdown_path: str | Path,
    ) -> None:
        self.users_path = Path(users_path)
        self.session_path = Path(session_path)
        self.todos_path = Path(todos_path)
        self.markdown_path = Path(markdown_path)

    @classmethod
    def in_dir(cls, data_dir: str | Path) -> JsonStorage:
        d = Path(data_dir)
        return cls(
            users_path=d / "users.json",
            session_path=d / "session.json",
            todos_path=d / "todos.json",
            markdown_path=d / "todos.md",
        )

    # ---- users ----

    def load_users(self) -> dict[str, User]:
        users = _load_mapping(self.users_path, User.from_dict)
        logger.debug("Loaded %d users from %s", len(users), self.users_path)
        return users

    def save_users(self, users: dict[str, User]) -> None:
        payload = {uid: u.to_dict() for uid, u in users.items()}
        _write_atomic(self.users_path, json.dumps(payload, ensure_ascii=False, indent=2), private=True)

    # ---- session ----

    def load_session(self) -> Session | None:
        data = _read_json(self.session_path)
        if not isinstance(data, dict):
            return None
        try:
            return Session.from_dict(data)
        except (KeyError, TypeError, ValueError):
            logger.warning("Ignoring malformed session file %s", self.session_path)
            return None

    def save_session(self, session: Session) -> None:
        _write_atomic(self.session_path, json.dumps(session.to_dict(), indent=2), private=True)

    def clear_session(self) -> None:
        self.session_path.unlink(missing_ok=True)

    # ---- todos ----

    def load_todos(self) -> dict[str, Task]:
        todos = _load_mapping(self.todos_path, Task.from_dict)
        logger.debug("Loaded %d todos from %s", len(todos), self.todos_path)
        return todos

    def save_todos(self, todos: dict[str, Task]) -> None:
        payload = {tid: t.to_dict() for tid, t in todos.items()}
        _write_atomic(self.todos_path, json.dumps(payload, ensure_ascii=False, indent=2))

    # ---- markdown mirror ----

    def _read_markdown(self) -> str:
        if not self.markdown_path.exists():
            return MARKDOWN_HEADER
        try:
            return self.markdown_path.read_text("utf-8")
        except UnicodeDecodeError as e:
            # Mirror callers only expect I/O failures.
            raise OSError(f"{self.markdown_path} is not valid UTF-8: {e}") from e

    def append_to_markdown(self, task: Task) -> None:
        text = self._read_markdown()
        if text and not text.endswith("\n"):
            text += "\n"
        _write_atomic(self.markdown_path, text + render_markdown_block(task))

    def update_markdown_todo(self, task: Task) -> None:
        text = self._read_markdown()
        pattern = _block_pattern(task.id)
        block = render_markdown_block(task)
        if pattern.search(text):
            new_text = pattern.sub(lambda _m: block, text, count=1)
        else:
            # Entry missing (mirror edited by hand or created before the mirror existed).
            new_text = (text if text.endswith("\n") else text + "\n") + block
        _write_atomic(self.markdown_path, new_text)

    def remove_from_markdown(self, task: Task) -> None:
        if not self.markdown_path.exists():
            return
        text = self._read_markdown()
        new_text = _block_pattern(task.id).sub("", text, count=1)
        if new_text != text:
            _write_atomic(self.markdown_path, new_text)
