# src/todo_cli/core/errors.py

"""
Error taxonomy shared by the core and the CLI.

- ValidationError: bad input, nothing was mutated
- NotFoundError: unknown id, nothing was mutated
- AuthenticationError: bad credentials, missing or expired session
- IntegrityError: persisted records contradict each other
"""

from __future__ import annotations


class TodoError(Exception):
    """Base class for errors reported to the user."""


class ValidationError(TodoError, ValueError):
    pass


class StatusParseError(ValidationError):
    pass


class PriorityParseError(ValidationError):
    pass


class DateParseError(ValidationError):
    pass


class NotFoundError(TodoError, LookupError):
    pass


class AuthenticationError(TodoError):
    pass


class IntegrityError(TodoError):
    pass
