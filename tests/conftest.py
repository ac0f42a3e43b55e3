# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import httpx
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from tasklist.client.api import TaskApiClient
from tasklist.client.store import TaskClientStore
from tasklist.server.app import create_app
from tasklist.tasks.task_store import TaskStore

from .fakes import FakeClock


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with the server, client and CLI.

    A SimpleNamespace rather than the real config keeps unit tests isolated
    from the developer's environment and .env file.
    """
    return SimpleNamespace(
        app_name="tasklist-test",
        log_level="DEBUG",
        log_to_file=False,
        data_dir=tmp_path,
        tasks_db_path=tmp_path / "tasks.sqlite3",
        host="127.0.0.1",
        port=8000,
        cors_origins=[],
        api_url="http://testserver",
        http_timeout_seconds=5.0,
        load_error_message="Failed to load tasks",
    )


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def store(settings: SimpleNamespace, clock: FakeClock) -> TaskStore:
    """Real SQLite store in tmp_path; its behavior is part of what we test."""
    return TaskStore(settings.tasks_db_path, clock=clock)


@pytest.fixture()
def app(settings: SimpleNamespace, store: TaskStore) -> FastAPI:
    return create_app(settings=settings, store=store)


@pytest.fixture()
def client(app: FastAPI) -> TestClient:
    return TestClient(app)


@pytest.fixture()
def api(app: FastAPI) -> TaskApiClient:
    """Async API client talking to the in-process app (no sockets)."""
    return TaskApiClient("http://testserver", transport=httpx.ASGITransport(app=app))


@pytest.fixture()
def confirmations() -> list[str]:
    """Prompts passed to the confirm callback, in order."""
    return []


@pytest.fixture()
def client_store(api: TaskApiClient, confirmations: list[str]) -> TaskClientStore:
    def confirm(prompt: str) -> bool:
        confirmations.append(prompt)
        return True

    return TaskClientStore(api, confirm=confirm)
