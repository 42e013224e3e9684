"""
Task subsystem.

Components:
- task_models.py: data structures (Task, TaskStatus, TaskPriority) and value parsing
- task_store.py: owner-scoped record store that keeps the Markdown mirror in sync
- task_api.py: filtering/sorting helpers used by the CLI views
"""
