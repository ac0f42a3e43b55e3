# src/tasklist/client/store.py

"""
Client-side task state.

TaskClientStore keeps a cached copy of the server's task list and mirrors
user actions to the API. Local state changes only after the server confirms:
- add_task prepends the task the server returned
- toggle_task / update_title replace the local entry by id with the server copy
- delete_task removes the local entry once the server deleted it

Every action returns an ActionResult. Mutation failures are logged and leave
the local state untouched; fetch failures also set `error` for display.
Overlapping actions are not de-duplicated: the last response to arrive wins.
"""

from __future__ import annotations

import inspect
import logging
from dataclasses import dataclass

from ..core.ports import ConfirmFn, TaskApi
from ..tasks.task_models import Task, TaskFilter

logger = logging.getLogger(__name__)

DEFAULT_LOAD_ERROR_MESSAGE = "Failed to load tasks"
DEFAULT_DELETE_PROMPT = "Delete task?"


@dataclass(slots=True, frozen=True)
class ActionResult:
    ok: bool
    task: Task | None = None
    error: str | None = None
    skipped: bool = False

    @classmethod
    def success(cls, task: Task | None = None) -> ActionResult:
        return cls(ok=True, task=task)

    @classmethod
    def skip(cls, reason: str) -> ActionResult:
        return cls(ok=False, skipped=True, error=reason)

    @classmethod
    def failure(cls, error: Exception | str) -> ActionResult:
        if isinstance(error, Exception):
            return cls(ok=False, error=str(error) or error.__class__.__name__)
        return cls(ok=False, error=error)


class TaskClientStore:
    def __init__(
        self,
        api: TaskApi,
        *,
        confirm: ConfirmFn,
        load_error_message: str = DEFAULT_LOAD_ERROR_MESSAGE,
        delete_prompt: str = DEFAULT_DELETE_PROMPT,
    ) -> None:
        self._api = api
        self._confirm = confirm
        self._load_error_message = load_error_message
        self._delete_prompt = delete_prompt

        self.tasks: list[Task] = []
        self.loading: bool = False
        self.error: str = ""
        self.filter: TaskFilter = TaskFilter.ALL

    # ---- derived state ----

    @property
    def filtered_tasks(self) -> list[Task]:
        return [t for t in self.tasks if t.matches(self.filter)]

    def set_filter(self, value: str | TaskFilter) -> None:
        self.filter = TaskFilter.parse(value)

    def find(self, task_id: int) -> Task | None:
        for t in self.tasks:
            if t.id == task_id:
                return t
        return None

    def _replace(self, updated: Task) -> None:
        for i, t in enumerate(self.tasks):
            if t.id == updated.id:
                self.tasks[i] = updated
                return

    async def _confirmed(self, prompt: str) -> bool:
        answer = self._confirm(prompt)
        if inspect.isawaitable(answer):
            answer = await answer
        return bool(answer)

    # ---- actions ----

    async def fetch_tasks(self) -> ActionResult:
        self.loading = True
        self.error = ""
        try:
            tasks = await self._api.list_tasks()
        except Exception as e:
            logger.warning("fetch_tasks failed: %s", e)
            self.error = self._load_error_message
            return ActionResult.failure(e)
        else:
            self.tasks = list(tasks)
            return ActionResult.success()
        finally:
            self.loading = False

    async def add_task(self, title: str) -> ActionResult:
        clean = (title or "").strip()
        if not clean:
            return ActionResult.skip("blank title")
        try:
            created = await self._api.create_task(clean)
        except Exception as e:
            logger.exception("add_task failed")
            return ActionResult.failure(e)
        self.tasks.insert(0, created)
        return ActionResult.success(created)

    async def toggle_task(self, task: Task) -> ActionResult:
        try:
            updated = await self._api.update_task(task.id, {"is_done": not task.is_done})
        except Exception as e:
            logger.exception("toggle_task failed id=%s", task.id)
            return ActionResult.failure(e)
        self._replace(updated)
        return ActionResult.success(updated)

    async def update_title(self, task: Task, new_title: str) -> ActionResult:
        title = (new_title or "").strip()
        if not title:
            return ActionResult.skip("blank title")
        try:
            updated = await self._api.update_task(task.id, {"title": title})
        except Exception as e:
            logger.exception("update_title failed id=%s", task.id)
            return ActionResult.failure(e)
        self._replace(updated)
        return ActionResult.success(updated)

    async def delete_task(self, task: Task) -> ActionResult:
        if not await self._confirmed(self._delete_prompt):
            return ActionResult.skip("not confirmed")
        try:
            await self._api.delete_task(task.id)
        except Exception as e:
            logger.exception("delete_task failed id=%s", task.id)
            return ActionResult.failure(e)
        self.tasks = [t for t in self.tasks if t.id != task.id]
        return ActionResult.success(task)
