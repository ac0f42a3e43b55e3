# src/tasklist/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires the HTTP client and the client store into ClientState,
- builds the server application for `tasklist serve`.
"""

from __future__ import annotations

import logging

import httpx
from fastapi import FastAPI

from ..client.api import TaskApiClient
from ..client.store import TaskClientStore
from ..config import get_settings
from ..core.ports import ConfirmFn
from ..core.state import ClientState
from ..server.app import create_app
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.tasks_db_path.parent.mkdir(parents=True, exist_ok=True)


def create_server_app(*, settings=None) -> FastAPI:
    """
    Build the backend app from settings.

    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)
    return create_app(settings=settings, store=TaskStore(settings.tasks_db_path))


def create_client_state(
    *,
    confirm: ConfirmFn,
    settings=None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> ClientState:
    """
    Create ClientState from the provided settings.

    `transport` lets tests route requests to an in-process app.
    """
    if settings is None:
        settings = get_settings()

    api = TaskApiClient(
        settings.api_url,
        timeout=float(getattr(settings, "http_timeout_seconds", 10.0)),
        transport=transport,
    )
    store = TaskClientStore(
        api,
        confirm=confirm,
        load_error_message=str(getattr(settings, "load_error_message", "") or "Failed to load tasks"),
    )
    logger.debug("Client state ready api_url=%s", settings.api_url)
    return ClientState(settings=settings, api=api, store=store)
