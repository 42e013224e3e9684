# src/todo_cli/cli/commands.py

from __future__ import annotations

import logging
from argparse import Namespace
from collections.abc import Callable
from dataclasses import dataclass, replace
from datetime import datetime

from ..auth.auth_models import User
from ..core.errors import AuthenticationError
from ..core.state import AppState
from ..reminders.reminder_engine import derive, is_overdue, summarize
from ..tasks.task_api import (
    due_today,
    filter_tasks,
    overdue_tasks,
    resolve_task,
    sort_for_display,
    task_counts,
)
from ..tasks.task_models import Task, TaskPriority, TaskStatus, parse_due_date

CommandHandler = Callable[[AppState, Namespace], str]

logger = logging.getLogger(__name__)

RULE = "─" * 80
PRIORITY_CHOICES = [p.label for p in TaskPriority]

_STATUS_EMOJI = {TaskStatus.PENDING: "⏳", TaskStatus.COMPLETED: "✅"}
_PRIORITY_EMOJI = {TaskPriority.LOW: "🟢", TaskPriority.MEDIUM: "🟡", TaskPriority.HIGH: "🔴"}


@dataclass(slots=True, frozen=True)
class Command:
    name: str
    handler: CommandHandler
    help_text: str
    requires_auth: bool


class CommandRegistry:
    """Subcommand registry shared by the argparse entrypoint and the interactive menu."""

    def __init__(self) -> None:
        self._commands: dict[str, Command] = {}
        self._aliases: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        *,
        requires_auth: bool = False,
        aliases: list[str] | None = None,
    ) -> None:
        key = name.lower()
        self._commands[key] = Command(key, handler, help_text, requires_auth)
        for alias in aliases or []:
            self._aliases[alias.lower()] = key

    def get(self, name: str) -> Command | None:
        key = name.lower()
        return self._commands.get(self._aliases.get(key, key))

    def commands(self) -> list[Command]:
        return list(self._commands.values())

    def handle(self, state: AppState, name: str, args: Namespace | None = None) -> str:
        """
        Run one command and return its text output.

        Commands that need a login fail fast with AuthenticationError when the
        session is missing or expired.
        """
        command = self.get(name)
        if command is None:
            return f"Unknown command: {name}. Use --help to list available commands."

        if command.requires_auth:
            ensure_authenticated(state)

        logger.debug("Running command %s", command.name)
        return command.handler(state, args if args is not None else Namespace())


registry = CommandRegistry()


# ---- helpers ----


def ensure_authenticated(state: AppState) -> User:
    if not state.auth.is_authenticated():
        raise AuthenticationError("Please login first using: todo login")
    return state.auth.current_user()


def _arg(args: Namespace, name: str) -> str | None:
    return getattr(args, name, None)


def _fmt_ts(ts: float) -> str:
    return datetime.fromtimestamp(ts).strftime("%Y-%m-%d %H:%M")


def format_task(task: Task, now_ts: float) -> str:
    done_mark = " ✨" if task.status is TaskStatus.COMPLETED else ""
    lines = [
        f"{_STATUS_EMOJI[task.status]} {_PRIORITY_EMOJI[task.priority]} "
        f"{task.short_id} [{task.title}]{done_mark}"
    ]
    if task.description:
        lines.append(f"   📝 {task.description}")
    if task.due_at is not None:
        if is_overdue(task, now_ts):
            lines.append(f"   ⚠️  Due: {_fmt_ts(task.due_at)} (OVERDUE)")
        else:
            lines.append(f"   📅 Due: {_fmt_ts(task.due_at)}")
    lines.append(f"   🕒 Created: {_fmt_ts(task.created_at)}")
    return "\n".join(lines)


def _format_list(header: str, tasks: list[Task], now_ts: float) -> str:
    parts = [header, RULE]
    for task in tasks:
        parts.append(format_task(task, now_ts))
        parts.append("")
    return "\n".join(parts).rstrip("\n")


def format_reminders(state: AppState, user: User) -> str:
    now_ts = state.now()
    todos = state.tasks.list_for_owner(user.id)
    reminders = derive(todos, now_ts)

    lines: list[str] = []
    if reminders:
        lines.append(f"🔔 You have {len(reminders)} reminders:")
        lines.extend(f"  {r.emoji} {r.message}" for r in reminders)
    lines.append(summarize(todos, now_ts))
    return "\n".join(lines)


def _pick_task(
    state: AppState,
    user: User,
    ref: str | None,
    verb: str,
    *,
    pending_only: bool = False,
) -> Task | None:
    if ref:
        return resolve_task(state.tasks, user.id, ref)

    todos = sort_for_display(state.tasks.list_for_owner(user.id))
    if pending_only:
        todos = [t for t in todos if t.is_pending]
    if not todos:
        return None

    items = [f"{t.short_id} - {t.title}" for t in todos]
    idx = state.prompter.select(f"Select todo to {verb}", items)
    return todos[idx]


def _prompt_priority(state: AppState, default: TaskPriority = TaskPriority.MEDIUM) -> TaskPriority:
    idx = state.prompter.select("Priority", PRIORITY_CHOICES, default=default.rank)
    return list(TaskPriority)[idx]


# ---- account commands ----


def cmd_register(state: AppState, args: Namespace) -> str:
    username = _arg(args, "username") or state.prompter.text("Username")
    email = _arg(args, "email") or state.prompter.text("Email")
    password = state.prompter.password("Password", confirm=True)

    state.auth.register(username, email, password)
    return "✅ Registration successful! You can now login."


def cmd_login(state: AppState, args: Namespace) -> str:
    username = _arg(args, "username") or state.prompter.text("Username")
    password = state.prompter.password("Password")

    user = state.auth.login(username, password)
    return f"✅ Welcome back, {user.username}! 👋\n{format_reminders(state, user)}"


def cmd_logout(state: AppState, args: Namespace) -> str:
    state.auth.logout()
    return "✅ Logged out successfully! 👋"


def cmd_status(state: AppState, args: Namespace) -> str:
    if not state.auth.is_authenticated():
        return "❌ Not logged in"

    user = state.auth.current_user()
    counts = task_counts(state.tasks.list_for_owner(user.id), state.now())
    return "\n".join(
        [
            "👤 User Status",
            f"Username: {user.username}",
            f"Email: {user.email}",
            "",
            "📊 Todo Statistics",
            f"Pending: {counts.pending}",
            f"Completed: {counts.completed}",
            f"Overdue: {counts.overdue}",
            f"Total: {counts.total}",
        ]
    )


# ---- task commands ----


def cmd_add(state: AppState, args: Namespace) -> str:
    user = ensure_authenticated(state)
    prompter = state.prompter

    title = _arg(args, "title")
    if title is None:
        title = prompter.text("Todo title")

    description = _arg(args, "description")
    if description is None:
        description = prompter.text("Description (optional)", allow_empty=True)

    raw_priority = _arg(args, "priority")
    priority = TaskPriority.parse(raw_priority) if raw_priority else _prompt_priority(state)

    raw_due = _arg(args, "due_date")
    if raw_due is None:
        raw_due = prompter.text("Due date (YYYY-MM-DD, optional)", allow_empty=True)
    due_at = parse_due_date(raw_due) if raw_due else None

    task = state.tasks.create(title, description or None, priority, due_at, owner_id=user.id)
    return f"✅ Todo added successfully!\n{format_task(task, state.now())}"


def cmd_list(state: AppState, args: Namespace) -> str:
    user = ensure_authenticated(state)

    raw_status = _arg(args, "status")
    raw_priority = _arg(args, "priority")
    status = TaskStatus.parse(raw_status) if raw_status else None
    priority = TaskPriority.parse(raw_priority) if raw_priority else None

    todos = filter_tasks(state.tasks.list_for_owner(user.id), status=status, priority=priority)
    if not todos:
        return "ℹ️ No todos found!"
    return _format_list("📋 Your Todos", sort_for_display(todos), state.now())


def cmd_complete(state: AppState, args: Namespace) -> str:
    user = ensure_authenticated(state)
    task = _pick_task(state, user, _arg(args, "id"), "complete", pending_only=True)
    if task is None:
        return "ℹ️ No pending todos found!"

    state.tasks.complete(task.id)
    return "✅ Todo completed! 🎉"


def cmd_delete(state: AppState, args: Namespace) -> str:
    user = ensure_authenticated(state)
    task = _pick_task(state, user, _arg(args, "id"), "delete")
    if task is None:
        return "ℹ️ No todos found!"

    state.tasks.delete(task.id)
    return "✅ Todo deleted!"


def cmd_edit(state: AppState, args: Namespace) -> str:
    user = ensure_authenticated(state)
    task = _pick_task(state, user, _arg(args, "id"), "edit")
    if task is None:
        return "ℹ️ No todos found!"

    title = _arg(args, "title")
    description = _arg(args, "description")
    raw_priority = _arg(args, "priority")

    if title is None and description is None and raw_priority is None:
        # Nothing given on the command line: prompt for every field.
        title = state.prompter.text("Title", default=task.title)
        description = state.prompter.text(
            "Description", default=task.description or "", allow_empty=True
        )
        priority = _prompt_priority(state, task.priority)
    else:
        priority = TaskPriority.parse(raw_priority) if raw_priority else task.priority

    edited = replace(
        task,
        title=task.title if title is None else title,
        description=task.description if description is None else (description or None),
        priority=priority,
    )
    state.tasks.update(edited)
    return "✅ Todo updated successfully!"


def cmd_overdue(state: AppState, args: Namespace) -> str:
    user = ensure_authenticated(state)
    now_ts = state.now()
    todos = sort_for_display(overdue_tasks(state.tasks.list_for_owner(user.id), now_ts))
    if not todos:
        return "✅ No overdue todos! 🎉"
    return _format_list(f"⚠️ {len(todos)} Overdue Todos", todos, now_ts)


def cmd_today(state: AppState, args: Namespace) -> str:
    user = ensure_authenticated(state)
    now_ts = state.now()
    todos = sort_for_display(due_today(state.tasks.list_for_owner(user.id), now_ts))
    if not todos:
        return "ℹ️ No todos due today! 🎉"
    return _format_list(f"📅 {len(todos)} Todos Due Today", todos, now_ts)


def cmd_reminders(state: AppState, args: Namespace) -> str:
    user = ensure_authenticated(state)
    return format_reminders(state, user)


registry.register("register", cmd_register, help_text="Register a new user.")
registry.register("login", cmd_login, help_text="Login to your account.")
registry.register("logout", cmd_logout, help_text="Logout from current session.")
registry.register("add", cmd_add, help_text="Add a new todo item.", requires_auth=True)
registry.register("list", cmd_list, help_text="List your todos.", requires_auth=True, aliases=["ls"])
registry.register("complete", cmd_complete, help_text="Complete a todo.", requires_auth=True, aliases=["done"])
registry.register("delete", cmd_delete, help_text="Delete a todo.", requires_auth=True, aliases=["rm"])
registry.register("edit", cmd_edit, help_text="Edit a todo.", requires_auth=True)
registry.register("overdue", cmd_overdue, help_text="Show overdue todos.", requires_auth=True)
registry.register("today", cmd_today, help_text="Show todos due today.", requires_auth=True)
registry.register("reminders", cmd_reminders, help_text="Check for reminders.", requires_auth=True)
registry.register("status", cmd_status, help_text="Show user status.")
