# src/tasklist/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used across the app.

The HTTP layer depends on TaskRepo rather than on the SQLite store, and the
client store depends on TaskApi rather than on httpx. Both stay swappable in tests.
"""

from collections.abc import Awaitable, Callable, Mapping
from typing import Any, Protocol

from ..tasks.task_models import Task

ConfirmFn = Callable[[str], "bool | Awaitable[bool]"]
# Asked before destructive client actions; receives the prompt text.


class TaskRepo(Protocol):
    """Server-side persistence for tasks."""

    def list_tasks(self) -> list[Task]: ...
    def get_task(self, task_id: int) -> Task: ...
    def add_task(self, title: Any) -> Task: ...
    def update_task(self, task_id: int, patch: Mapping[str, Any]) -> Task: ...
    def delete_task(self, task_id: int) -> None: ...
    def count_tasks(self) -> int: ...


class TaskApi(Protocol):
    """Client-side transport to the /tasks resource."""

    async def list_tasks(self) -> list[Task]: ...
    async def create_task(self, title: str) -> Task: ...
    async def update_task(self, task_id: int, patch: Mapping[str, Any]) -> Task: ...
    async def delete_task(self, task_id: int) -> None: ...
