# tests/test_task_models.py

from __future__ import annotations

import pytest

from tasklist.tasks.task_models import Task, TaskFilter, format_timestamp, parse_timestamp


def test_timestamp_format_is_utc_with_z_suffix() -> None:
    assert format_timestamp(0.0) == "1970-01-01T00:00:00.000000Z"
    assert format_timestamp(None) is None


def test_timestamp_parse_accepts_z_and_offsets() -> None:
    assert parse_timestamp("1970-01-01T00:00:01.500000Z") == pytest.approx(1.5)
    assert parse_timestamp("1970-01-01T01:00:00+01:00") == pytest.approx(0.0)
    assert parse_timestamp(None) is None
    assert parse_timestamp("") is None


def test_task_json_shape() -> None:
    task = Task(id=7, title="Buy milk", is_done=True, created_at=0.0, updated_at=1.0, completed_at=1.0)

    data = task.to_json()

    assert data == {
        "id": 7,
        "title": "Buy milk",
        "is_done": True,
        "created_at": "1970-01-01T00:00:00.000000Z",
        "updated_at": "1970-01-01T00:00:01.000000Z",
        "completed_at": "1970-01-01T00:00:01.000000Z",
    }
    assert Task.from_json(data) == task


def test_from_json_tolerates_missing_optional_fields() -> None:
    task = Task.from_json({"id": "3", "title": "t", "is_done": False})
    assert task.id == 3
    assert task.completed_at is None
    assert task.created_at == 0.0


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        (None, TaskFilter.ALL),
        ("", TaskFilter.ALL),
        ("Active", TaskFilter.ACTIVE),
        (" done ", TaskFilter.DONE),
        (TaskFilter.ALL, TaskFilter.ALL),
    ],
)
def test_filter_parse(raw, expected) -> None:
    assert TaskFilter.parse(raw) is expected


def test_filter_parse_rejects_unknown() -> None:
    with pytest.raises(ValueError):
        TaskFilter.parse("later")


def test_matches() -> None:
    open_task = Task(id=1, title="a", is_done=False, created_at=0.0, updated_at=0.0)
    done_task = Task(id=2, title="b", is_done=True, created_at=0.0, updated_at=0.0, completed_at=0.0)

    assert open_task.matches(TaskFilter.ACTIVE) and not open_task.matches(TaskFilter.DONE)
    assert done_task.matches(TaskFilter.DONE) and not done_task.matches(TaskFilter.ACTIVE)
    assert open_task.matches(TaskFilter.ALL) and done_task.matches(TaskFilter.ALL)
