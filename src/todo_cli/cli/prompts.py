# src/todo_cli/cli/prompts.py

from __future__ import annotations

import getpass
from collections.abc import Sequence


class TerminalPrompter:
    """
    Prompter backed by the terminal (input / getpass).

    EOFError and KeyboardInterrupt are left to the caller: the menu loop treats
    them as "quit", one-shot commands exit.
    """

    def text(self, prompt: str, *, default: str | None = None, allow_empty: bool = False) -> str:
        suffix = f" [{default}]" if default else ""
        while True:
            raw = input(f"{prompt}{suffix}: ").strip()
            if not raw and default is not None:
                return default
            if raw or allow_empty:
                return raw
            print("A value is required.")

    def password(self, prompt: str, *, confirm: bool = False) -> str:
        while True:
            first = getpass.getpass(f"{prompt}: ")
            if not confirm:
                return first
            second = getpass.getpass("Confirm password: ")
            if first == second:
                return first
            print("Passwords don't match")

    def select(self, prompt: str, items: Sequence[str], *, default: int | None = None) -> int:
        if not items:
            raise ValueError("select() needs at least one item")

        print(prompt)
        for i, item in enumerate(items, start=1):
            marker = "*" if default is not None and i - 1 == default else " "
            print(f" {marker}{i}. {item}")

        hint = f" [{default + 1}]" if default is not None else ""
        while True:
            raw = input(f"> Choose 1-{len(items)}{hint}: ").strip()
            if not raw and default is not None:
                return default
            if raw.isdigit() and 1 <= int(raw) <= len(items):
                return int(raw) - 1
            print(f"Please enter a number between 1 and {len(items)}.")
