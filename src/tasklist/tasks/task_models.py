# src/tasklist/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import StrEnum
from typing import Any

TITLE_MAX_LENGTH = 255


class TaskFilter(StrEnum):
    """Client-side view selector over the cached task list."""

    ALL = "all"
    ACTIVE = "active"
    DONE = "done"

    @classmethod
    def parse(cls, raw: str | TaskFilter | None) -> TaskFilter:
        if isinstance(raw, TaskFilter):
            return raw
        if not raw:
            return cls.ALL
        try:
            return cls(str(raw).strip().lower())
        except ValueError:
            raise ValueError(f"Unknown task filter: {raw!r}") from None


@dataclass(slots=True, frozen=True)
class Task:
    id: int
    title: str
    is_done: bool
    created_at: float
    updated_at: float
    completed_at: float | None = None

    def matches(self, task_filter: TaskFilter) -> bool:
        if task_filter is TaskFilter.ACTIVE:
            return not self.is_done
        if task_filter is TaskFilter.DONE:
            return self.is_done
        return True

    def to_json(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "is_done": self.is_done,
            "created_at": format_timestamp(self.created_at),
            "updated_at": format_timestamp(self.updated_at),
            "completed_at": format_timestamp(self.completed_at),
        }

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> Task:
        """Build a Task from the wire shape returned by the API."""
        completed_at = parse_timestamp(data.get("completed_at"))
        return cls(
            id=int(data["id"]),
            title=str(data.get("title") or ""),
            is_done=bool(data.get("is_done", False)),
            created_at=parse_timestamp(data.get("created_at")) or 0.0,
            updated_at=parse_timestamp(data.get("updated_at")) or 0.0,
            completed_at=completed_at,
        )


def format_timestamp(ts: float | None) -> str | None:
    """Epoch seconds -> ISO-8601 UTC string with microseconds and a `Z` suffix."""
    if ts is None:
        return None
    dt = datetime.fromtimestamp(ts, tz=timezone.utc)
    return dt.isoformat(timespec="microseconds").replace("+00:00", "Z")


def parse_timestamp(raw: str | float | int | None) -> float | None:
    if raw is None or raw == "":
        return None
    if isinstance(raw, (int, float)):
        return float(raw)
    dt = datetime.fromisoformat(str(raw).strip())
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.timestamp()
