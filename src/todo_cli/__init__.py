"""Local command-line to-do manager with accounts, sessions and reminders."""

__version__ = "0.1.0"
