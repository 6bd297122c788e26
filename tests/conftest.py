# tests/conftest.py

from __future__ import annotations

from datetime import date
from pathlib import Path
from types import SimpleNamespace

import pytest

from taskboard.core.state import AppState
from taskboard.storage.collection import PROJECTS_KEY, TODOS_KEY, JsonCollection
from taskboard.todos.project_store import ProjectStore
from taskboard.todos.todo_models import GroupBy, SortBy, Todo, TodoStatus
from taskboard.todos.todo_store import TodoStore

from .fakes import FakeBlobStore

TODAY = date(2024, 3, 15)


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the CLI.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the environment.
    """
    return SimpleNamespace(
        app_name="taskboard-test",
        log_level="DEBUG",
        data_dir=tmp_path,
        store_dir=tmp_path / "store",
        persist=True,
        default_sort=SortBy.CREATED_AT,
        default_group=GroupBy.NONE,
        week_days=7,
    )


@pytest.fixture()
def blob_store() -> FakeBlobStore:
    return FakeBlobStore()


@pytest.fixture()
def state(settings: SimpleNamespace, blob_store: FakeBlobStore) -> AppState:
    """
    AppState wired with an in-memory blob store and a fixed "today".
    """
    return AppState(
        settings=settings,
        todos=TodoStore(JsonCollection(blob_store, TODOS_KEY)),
        projects=ProjectStore(JsonCollection(blob_store, PROJECTS_KEY)),
        today=lambda: TODAY,
    )


def make_todo(todo_id: int, **overrides) -> Todo:
    fields = dict(
        id=todo_id,
        text=f"todo {todo_id}",
        project_id="personal",
        created_at=f"2024-01-{todo_id:02d}T09:00:00.000000Z",
        updated_at=f"2024-01-{todo_id:02d}T09:00:00.000000Z",
        status=TodoStatus.NOT_STARTED,
        weight=3,
    )
    fields.update(overrides)
    return Todo(**fields)
