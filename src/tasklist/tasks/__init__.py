"""
Task subsystem.

Components:
- task_models.py: data structures (Task, TaskFilter) and wire timestamp helpers
- task_store.py: SQLite-backed storage + validation
"""
