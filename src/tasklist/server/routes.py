"""Task CRUD routes."""

import logging
from typing import Any

from fastapi import APIRouter, Depends, Request, Response

from tasklist.core.ports import TaskRepo
from tasklist.server.schemas import CreateTaskRequest, UpdateTaskRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tasks", tags=["tasks"])


def get_task_store(request: Request) -> TaskRepo:
    return request.app.state.task_store


# Sync handlers: the store does blocking SQLite I/O, FastAPI runs these in its threadpool.


@router.get("")
def list_tasks(store: TaskRepo = Depends(get_task_store)) -> list[dict[str, Any]]:
    """All tasks, newest first."""
    return [t.to_json() for t in store.list_tasks()]


@router.post("", status_code=201)
def create_task(
    payload: CreateTaskRequest | None = None,
    store: TaskRepo = Depends(get_task_store),
) -> dict[str, Any]:
    title = payload.title if payload is not None else None
    task = store.add_task(title)
    logger.info("Task created id=%s", task.id)
    return task.to_json()


@router.put("/{task_id}")
def update_task(
    task_id: int,
    payload: UpdateTaskRequest | None = None,
    store: TaskRepo = Depends(get_task_store),
) -> dict[str, Any]:
    patch = payload.to_patch() if payload is not None else {}
    task = store.update_task(task_id, patch)
    logger.info("Task updated id=%s fields=%s", task_id, sorted(patch))
    return task.to_json()


@router.delete("/{task_id}", status_code=204)
def delete_task(task_id: int, store: TaskRepo = Depends(get_task_store)) -> Response:
    store.delete_task(task_id)
    logger.info("Task deleted id=%s", task_id)
    return Response(status_code=204)
