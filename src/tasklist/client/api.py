# src/tasklist/client/api.py

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import httpx

from ..tasks.task_models import Task

logger = logging.getLogger(__name__)


class TaskApiError(RuntimeError):
    """
    A /tasks request failed.

    status_code is None for transport failures (connection refused, timeout, ...).
    errors carries the field-level messages of a 422 response.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        errors: dict[str, list[str]] | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.errors = errors or {}

    @property
    def is_not_found(self) -> bool:
        return self.status_code == 404

    @property
    def is_validation_error(self) -> bool:
        return self.status_code == 422


def _error_from_response(resp: httpx.Response) -> TaskApiError:
    message = f"HTTP {resp.status_code}"
    errors: dict[str, list[str]] = {}
    try:
        body = resp.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        if isinstance(body.get("message"), str) and body["message"].strip():
            message = body["message"]
        raw_errors = body.get("errors")
        if isinstance(raw_errors, dict):
            errors = {
                str(k): [str(m) for m in v] if isinstance(v, list) else [str(v)]
                for k, v in raw_errors.items()
            }
    return TaskApiError(message, status_code=resp.status_code, errors=errors)


class TaskApiClient:
    """
    Async HTTP client for the /tasks resource.

    Pass `client` to reuse an existing httpx.AsyncClient (it is then not closed
    by aclose()); otherwise one is created from base_url/timeout/transport.
    """

    def __init__(
        self,
        base_url: str = "http://127.0.0.1:8000",
        *,
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            timeout=httpx.Timeout(timeout),
            transport=transport,
            headers={"Accept": "application/json"},
        )

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> TaskApiClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def _request(self, method: str, path: str, json: Any = None) -> httpx.Response:
        try:
            resp = await self._client.request(method, path, json=json)
        except httpx.HTTPError as e:
            logger.debug("%s %s transport error: %s", method, path, e.__class__.__name__)
            raise TaskApiError(f"{method} {path} failed: {e.__class__.__name__}") from e

        if resp.is_error:
            raise _error_from_response(resp)
        return resp

    @staticmethod
    def _task_from(resp: httpx.Response) -> Task:
        data = resp.json()
        if not isinstance(data, dict):
            raise TaskApiError("Unexpected response: expected a task object.", status_code=resp.status_code)
        return Task.from_json(data)

    async def list_tasks(self) -> list[Task]:
        resp = await self._request("GET", "/tasks")
        data = resp.json()
        if not isinstance(data, list):
            raise TaskApiError("Unexpected response: expected a list of tasks.", status_code=resp.status_code)
        return [Task.from_json(item) for item in data]

    async def create_task(self, title: str) -> Task:
        resp = await self._request("POST", "/tasks", json={"title": title})
        return self._task_from(resp)

    async def update_task(self, task_id: int, patch: Mapping[str, Any]) -> Task:
        resp = await self._request("PUT", f"/tasks/{int(task_id)}", json=dict(patch))
        return self._task_from(resp)

    async def delete_task(self, task_id: int) -> None:
        await self._request("DELETE", f"/tasks/{int(task_id)}")
