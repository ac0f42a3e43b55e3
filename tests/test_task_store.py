# tests/test_task_store.py

from __future__ import annotations

import sqlite3
from pathlib import Path

import pytest

from tasklist.core.errors import NotFoundError, ValidationError
from tasklist.tasks.task_store import TaskStore

from .fakes import FakeClock


def test_add_then_list_contains_new_task(store: TaskStore) -> None:
    task = store.add_task("Buy milk")

    assert task.id > 0
    assert task.is_done is False
    assert task.completed_at is None
    assert task.created_at == task.updated_at

    tasks = store.list_tasks()
    assert [(t.id, t.title, t.is_done) for t in tasks] == [(task.id, "Buy milk", False)]


def test_list_is_newest_first(store: TaskStore) -> None:
    first = store.add_task("first")
    second = store.add_task("second")
    third = store.add_task("third")

    assert [t.id for t in store.list_tasks()] == [third.id, second.id, first.id]


def test_list_breaks_created_at_ties_by_id(tmp_path: Path) -> None:
    frozen = TaskStore(tmp_path / "tasks.sqlite3", clock=lambda: 1_700_000_000.0)
    a = frozen.add_task("a")
    b = frozen.add_task("b")

    assert [t.id for t in frozen.list_tasks()] == [b.id, a.id]


def test_title_is_trimmed(store: TaskStore) -> None:
    task = store.add_task("   Water plants  ")
    assert task.title == "Water plants"
    assert store.get_task(task.id).title == "Water plants"


@pytest.mark.parametrize(
    ("title", "message"),
    [
        (None, "The title field is required."),
        ("", "The title field is required."),
        ("   ", "The title field is required."),
        ("x" * 256, "The title field must not be greater than 255 characters."),
        (42, "The title field must be a string."),
    ],
)
def test_add_rejects_invalid_title_and_persists_nothing(store: TaskStore, title, message) -> None:
    with pytest.raises(ValidationError) as exc_info:
        store.add_task(title)

    assert exc_info.value.errors == {"title": [message]}
    assert store.count_tasks() == 0


def test_title_of_exactly_255_chars_is_accepted(store: TaskStore) -> None:
    task = store.add_task("é" * 255)
    assert len(task.title) == 255


def test_done_sets_completed_at_and_undone_clears_it(store: TaskStore) -> None:
    task = store.add_task("Buy milk")

    done = store.update_task(task.id, {"is_done": True})
    assert done.is_done is True
    assert done.completed_at is not None
    assert done.updated_at > task.updated_at

    undone = store.update_task(task.id, {"is_done": False})
    assert undone.is_done is False
    assert undone.completed_at is None


def test_repeated_done_keeps_first_completed_at(store: TaskStore) -> None:
    task = store.add_task("Buy milk")
    done = store.update_task(task.id, {"is_done": True})

    again = store.update_task(task.id, {"is_done": True})

    assert again.completed_at == done.completed_at
    assert again.updated_at == done.updated_at


def test_redone_after_undone_gets_new_completed_at(store: TaskStore) -> None:
    task = store.add_task("Buy milk")
    first = store.update_task(task.id, {"is_done": True})
    store.update_task(task.id, {"is_done": False})

    second = store.update_task(task.id, {"is_done": True})

    assert second.completed_at is not None
    assert second.completed_at > first.completed_at


def test_update_title_only_leaves_done_state(store: TaskStore) -> None:
    task = store.add_task("Buy milk")
    done = store.update_task(task.id, {"is_done": True})

    renamed = store.update_task(task.id, {"title": " Buy oat milk "})

    assert renamed.title == "Buy oat milk"
    assert renamed.is_done is True
    assert renamed.completed_at == done.completed_at


def test_update_accepts_boolean_like_values(store: TaskStore) -> None:
    task = store.add_task("t")
    assert store.update_task(task.id, {"is_done": 1}).is_done is True
    assert store.update_task(task.id, {"is_done": "0"}).is_done is False
    assert store.update_task(task.id, {"is_done": "1"}).is_done is True
    assert store.update_task(task.id, {"is_done": False}).is_done is False


def test_update_rejects_other_boolean_spellings(store: TaskStore) -> None:
    task = store.add_task("t")
    for value in ("true", "false", "yes", " 1", 1.0, 2, [True]):
        with pytest.raises(ValidationError) as exc:
            store.update_task(task.id, {"is_done": value})
        assert exc.value.errors == {"is_done": ["The is_done field must be true or false."]}
    assert store.get_task(task.id).is_done is False


def test_empty_patch_returns_task_unchanged(store: TaskStore) -> None:
    task = store.add_task("t")

    same = store.update_task(task.id, {})

    assert same == task


def test_update_rejects_invalid_fields_and_changes_nothing(store: TaskStore) -> None:
    task = store.add_task("keep me")

    with pytest.raises(ValidationError) as exc_info:
        store.update_task(task.id, {"title": None, "is_done": "maybe", "other": 1})

    assert set(exc_info.value.errors) == {"title", "is_done"}
    assert store.get_task(task.id) == task


def test_update_unknown_id_is_not_found_even_with_bad_patch(store: TaskStore) -> None:
    with pytest.raises(NotFoundError):
        store.update_task(999, {"title": ""})


def test_delete_removes_task(store: TaskStore) -> None:
    keep = store.add_task("keep")
    drop = store.add_task("drop")

    store.delete_task(drop.id)

    assert [t.id for t in store.list_tasks()] == [keep.id]
    with pytest.raises(NotFoundError):
        store.get_task(drop.id)


def test_delete_unknown_id_leaves_list_unaffected(store: TaskStore) -> None:
    task = store.add_task("keep")

    with pytest.raises(NotFoundError):
        store.delete_task(task.id + 100)

    assert [t.id for t in store.list_tasks()] == [task.id]


def test_schema_migration_adds_missing_columns(tmp_path: Path) -> None:
    db = tmp_path / "old.sqlite3"
    conn = sqlite3.connect(str(db))
    conn.execute(
        "CREATE TABLE tasks (id INTEGER PRIMARY KEY AUTOINCREMENT, title TEXT NOT NULL, "
        "created_at REAL NOT NULL, updated_at REAL NOT NULL)"
    )
    conn.execute("INSERT INTO tasks(title, created_at, updated_at) VALUES ('legacy', 1.0, 1.0)")
    conn.commit()
    conn.close()

    store = TaskStore(db, clock=FakeClock())

    [legacy] = store.list_tasks()
    assert legacy.title == "legacy"
    assert legacy.is_done is False
    assert legacy.completed_at is None

    done = store.update_task(legacy.id, {"is_done": True})
    assert done.completed_at is not None
