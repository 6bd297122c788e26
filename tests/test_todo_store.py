# tests/test_todo_store.py

from __future__ import annotations

import dataclasses
import json

import pytest

from taskboard.storage.collection import JsonCollection
from taskboard.todos.todo_models import SortBy, SubTask, Todo, TodoStatus
from taskboard.todos.todo_store import TodoStore
from taskboard.todos.views import sort_todos

from .conftest import make_todo
from .fakes import FakeBlobStore, FakeClock


def _store(blob: FakeBlobStore | None = None, clock=None) -> TodoStore:
    return TodoStore(JsonCollection(blob, "todos"), clock=clock)


def test_fields_roundtrip_through_save_and_load() -> None:
    blob = FakeBlobStore()
    store = _store(blob)
    todo = make_todo(
        1,
        project_id="work",
        weight=5,
        due_date="2024-04-01",
        expected_start_date="2024-03-01",
        sub_tasks=[SubTask(id=1, text="draft"), SubTask(id=2, text="review", done=True)],
        expanded=True,
    )
    store.add(todo)

    fresh = _store(blob)
    fresh.load()

    assert fresh.all() == [todo]
    loaded = fresh.get(1)
    assert loaded is not None
    assert loaded.project_id == "work"
    assert loaded.weight == 5
    assert loaded.sub_tasks == todo.sub_tasks


def test_persisted_layout_uses_camel_case_keys() -> None:
    blob = FakeBlobStore()
    _store(blob).add(make_todo(1, due_date="2024-04-01"))

    (doc,) = json.loads(blob.items["todos"])
    assert doc["projectId"] == "personal"
    assert doc["dueDate"] == "2024-04-01"
    assert doc["status"] == "not-started"
    assert doc["subTasks"] == []
    assert "expanded" not in doc


def test_load_without_persisted_state_keeps_empty() -> None:
    store = _store(FakeBlobStore())
    store.load()
    assert store.all() == []


def test_add_appends_in_order_and_persists_each_time() -> None:
    blob = FakeBlobStore()
    store = _store(blob)
    store.add(make_todo(2))
    store.add(make_todo(1))

    assert [t.id for t in store.all()] == [2, 1]
    assert blob.writes["todos"] == 2


@pytest.mark.parametrize("weight", [0, 6])
def test_add_rejects_weight_out_of_range(weight: int) -> None:
    with pytest.raises(ValueError):
        _store().add(make_todo(1, weight=weight))


def test_update_changes_only_given_fields_and_bumps_updated_at() -> None:
    store = _store(FakeBlobStore(), clock=FakeClock("2024-02-01T10:00:00.000000Z"))
    original = make_todo(1, description="keep me", due_date="2024-05-05")
    store.add(original)

    updated = store.update(1, status="done")

    assert updated is not None
    assert updated.status is TodoStatus.DONE
    assert updated.updated_at > original.updated_at
    assert dataclasses.replace(updated, status=original.status, updated_at=original.updated_at) == original


def test_update_stamp_strictly_increases_when_clock_stands_still() -> None:
    store = _store(clock=FakeClock("2024-01-01T09:00:00.000000Z"))
    store.add(make_todo(1))

    first = store.update(1, text="a")
    second = store.update(1, text="b")

    assert first is not None and second is not None
    assert first.updated_at == "2024-01-01T09:00:00.000001Z"
    assert second.updated_at == "2024-01-01T09:00:00.000002Z"


def test_update_cannot_override_updated_at() -> None:
    store = _store(clock=FakeClock("2024-02-01T10:00:00.000000Z"))
    store.add(make_todo(1))
    updated = store.update(1, updated_at="1999-01-01T00:00:00.000000Z")
    assert updated is not None
    assert updated.updated_at == "2024-02-01T10:00:00.000000Z"


def test_update_unknown_id_is_noop() -> None:
    blob = FakeBlobStore()
    store = _store(blob)
    store.add(make_todo(1))

    assert store.update(99, text="x") is None
    assert store.all() == [make_todo(1)]
    assert blob.writes["todos"] == 1


def test_update_rejects_unknown_fields() -> None:
    store = _store()
    store.add(make_todo(1))
    with pytest.raises(ValueError):
        store.update(1, colour="red")


def test_delete_and_unknown_delete() -> None:
    store = _store()
    store.add(make_todo(1))
    store.add(make_todo(2))

    store.delete(1)
    store.delete(42)

    assert [t.id for t in store.all()] == [2]


def test_delete_by_project_removes_exactly_that_project() -> None:
    store = _store()
    store.add(make_todo(1, project_id="a"))
    store.add(make_todo(2, project_id="b"))
    store.add(make_todo(3, project_id="a"))
    store.add(make_todo(4, project_id="c"))

    assert store.delete_by_project("a") == 2
    assert [(t.id, t.project_id) for t in store.all()] == [(2, "b"), (4, "c")]


def test_save_replaces_everything() -> None:
    blob = FakeBlobStore()
    store = _store(blob)
    store.add(make_todo(1))
    store.save([make_todo(5), make_todo(6)])

    fresh = _store(blob)
    fresh.load()
    assert [t.id for t in fresh.all()] == [5, 6]


def test_memory_only_store_still_works() -> None:
    store = _store(None)
    store.add(make_todo(1))
    store.update(1, weight=4)
    store.load()  # nothing persisted: keeps memory
    assert [(t.id, t.weight) for t in store.all()] == [(1, 4)]


def test_subscribers_see_every_mutation() -> None:
    store = _store()
    seen: list[list[int]] = []
    unsubscribe = store.subscribe(lambda todos: seen.append([t.id for t in todos]))

    store.add(make_todo(1))
    store.add(make_todo(2))
    store.delete(1)
    unsubscribe()
    store.add(make_todo(3))

    assert seen == [[], [1], [1, 2], [2]]


def test_loaded_unknown_status_falls_back_to_not_started() -> None:
    blob = FakeBlobStore(
        items={"todos": '[{"id": 1, "text": "x", "projectId": "personal", "status": "blocked"}]'}
    )
    store = _store(blob)
    store.load()
    todo = store.get(1)
    assert isinstance(todo, Todo)
    assert todo.status is TodoStatus.NOT_STARTED


def test_add_normalizes_plain_string_status_and_weight() -> None:
    blob = FakeBlobStore()
    store = _store(blob)
    store.add(make_todo(1, status="done", weight="4"))

    todo = store.get(1)
    assert todo is not None
    assert todo.status is TodoStatus.DONE
    assert todo.weight == 4
    assert json.loads(blob.items["todos"])[0]["status"] == "done"


def test_string_weight_update_is_stored_as_int_and_sortable() -> None:
    store = _store()
    store.add(make_todo(1, weight=2))
    store.add(make_todo(2, weight=3))

    updated = store.update(1, weight="5")

    assert updated is not None and updated.weight == 5
    assert [t.id for t in sort_todos(store.all(), SortBy.WEIGHT)] == [1, 2]


@pytest.mark.parametrize("weight", [True, 3.7, "heavy", None])
def test_non_integer_weights_are_rejected(weight) -> None:
    store = _store()
    store.add(make_todo(1))
    with pytest.raises(ValueError):
        store.update(1, weight=weight)
    with pytest.raises(ValueError):
        store.add(make_todo(2, weight=weight))
