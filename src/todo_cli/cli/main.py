# src/todo_cli/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, then either:
- runs the single subcommand given on the command line, or
- enters the interactive menu loop when no subcommand is given.

Exit codes: 0 on success, 1 on any reported error, 130 on Ctrl+C.
"""

from __future__ import annotations

import argparse
import logging
import sys
from argparse import Namespace

from ..config import get_settings
from ..core.errors import TodoError
from ..core.state import AppState
from ..logging_setup import setup_logging
from .bootstrap import create_initial_state
from .commands import format_reminders, registry

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_INTERRUPTED = 130

MENU = [
    ("Add Todo", "add"),
    ("List Todos", "list"),
    ("Complete Todo", "complete"),
    ("Edit Todo", "edit"),
    ("Delete Todo", "delete"),
    ("Show Overdue", "overdue"),
    ("Show Today", "today"),
    ("Reminders", "reminders"),
    ("Status", "status"),
    ("Logout", "logout"),
    ("Exit", None),
]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="todo",
        description="A CLI todo application with user authentication",
    )
    sub = parser.add_subparsers(dest="command", metavar="COMMAND")

    def add(name: str) -> argparse.ArgumentParser:
        command = registry.get(name)
        if command is None:
            raise KeyError(f"No registered command named {name!r}")
        return sub.add_parser(name, help=command.help_text, description=command.help_text)

    p = add("register")
    p.add_argument("-u", "--username")
    p.add_argument("-e", "--email")

    p = add("login")
    p.add_argument("-u", "--username")

    add("logout")

    p = add("add")
    p.add_argument("-t", "--title")
    p.add_argument("-d", "--description")
    p.add_argument("-p", "--priority", help="low | medium | high")
    p.add_argument("--due-date", dest="due_date", help="YYYY-MM-DD")

    p = add("list")
    p.add_argument("-s", "--status", help="pending | completed")
    p.add_argument("-p", "--priority", help="low | medium | high")

    for name in ("complete", "delete"):
        p = add(name)
        p.add_argument("id", nargs="?", help="Todo id or its first characters")

    p = add("edit")
    p.add_argument("id", nargs="?", help="Todo id or its first characters")
    p.add_argument("-t", "--title")
    p.add_argument("-d", "--description")
    p.add_argument("-p", "--priority", help="low | medium | high")

    for name in ("overdue", "today", "reminders", "status"):
        add(name)

    return parser


def run_command(state: AppState, name: str, args: Namespace) -> int:
    try:
        output = registry.handle(state, name, args)
    except TodoError as e:
        logger.info("Command %s failed: %s", name, e)
        print(f"❌ {e}", file=sys.stderr)
        return EXIT_ERROR
    except OSError:
        logger.exception("Storage error while running %s", name)
        print("❌ Storage error: could not read or write the data files.", file=sys.stderr)
        return EXIT_ERROR

    if output:
        print(output)
    return EXIT_OK


def interactive_mode(state: AppState) -> int:
    print("🚀 Welcome to Todo CLI")

    if not state.auth.is_authenticated():
        choice = state.prompter.select("What would you like to do?", ["Login", "Register", "Exit"])
        if choice == 2:
            return EXIT_OK
        name = "login" if choice == 0 else "register"
        code = run_command(state, name, Namespace())
        if code != EXIT_OK or not state.auth.is_authenticated():
            return code
    else:
        try:
            print(format_reminders(state, state.auth.current_user()))
        except TodoError as e:
            print(f"❌ {e}", file=sys.stderr)
            return EXIT_ERROR

    labels = [label for label, _ in MENU]
    while True:
        idx = state.prompter.select("What would you like to do?", labels)
        _, name = MENU[idx]
        if name is None:
            return EXIT_OK

        # Errors inside the menu are shown and the loop goes on.
        run_command(state, name, Namespace())
        if name == "logout" or not state.auth.is_authenticated():
            return EXIT_OK


def main(argv: list[str] | None = None, *, state: AppState | None = None) -> int:
    args = build_parser().parse_args(argv)

    if state is None:
        settings = get_settings()

        level_name = str(getattr(settings, "log_level", "WARNING")).upper()
        console_level = getattr(logging, level_name, logging.WARNING)
        try:
            setup_logging(log_dir=settings.data_dir, console_level=console_level)
            logger.info("Starting %s...", settings.app_name)
            state = create_initial_state(settings=settings)
        except OSError:
            logger.exception("Failed to prepare data dir %s", settings.data_dir)
            print(f"❌ Cannot use data directory {settings.data_dir}", file=sys.stderr)
            return EXIT_ERROR

    try:
        if args.command is None:
            return interactive_mode(state)
        return run_command(state, args.command, args)
    except (KeyboardInterrupt, EOFError):
        print()
        logger.info("Interrupted.")
        return EXIT_INTERRUPTED


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
