# src/tasklist/core/state.py

from __future__ import annotations

from dataclasses import dataclass

from ..client.api import TaskApiClient
from ..client.store import TaskClientStore


@dataclass(slots=True)
class ClientState:
    """Everything a client-side session needs, wired once by the bootstrap."""

    # Settings object (real Settings or a test namespace).
    settings: object

    api: TaskApiClient
    store: TaskClientStore

    async def aclose(self) -> None:
        await self.api.aclose()
