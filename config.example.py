# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
Use a local .env (gitignored) for per-machine overrides.

This file exists to make the repo self-documenting even without opening .env.example.
"""

ENV_VARS = {
    # App / logging
    "TODO_APP_NAME": "App display name used in logs (default: todo).",
    "TODO_LOG_LEVEL": "Console logging level (default: WARNING). The log file always gets DEBUG.",
    # Paths
    "TODO_DATA_DIR": "Local data directory (default: ~/.todo-cli).",
    "TODO_USERS_PATH": "Users JSON path (default: <data_dir>/users.json).",
    "TODO_SESSION_PATH": "Session JSON path (default: <data_dir>/session.json).",
    "TODO_TODOS_PATH": "Todos JSON path (default: <data_dir>/todos.json).",
    "TODO_MARKDOWN_PATH": "Human-readable mirror (default: <data_dir>/todos.md).",
    # Auth
    "TODO_SESSION_TTL_DAYS": "Days a login stays valid (default: 7).",
    "TODO_BCRYPT_ROUNDS": "bcrypt cost factor, 4..31 (default: 12).",
}
