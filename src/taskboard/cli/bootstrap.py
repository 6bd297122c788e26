# src/taskboard/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires the blob store, collections and stores into AppState.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.observable import Observable
from ..core.ports import BlobStore
from ..core.state import AppState, Selection
from ..storage.blob_store import JsonFileBlobStore
from ..storage.collection import PROJECTS_KEY, TODOS_KEY, JsonCollection
from ..todos.project_store import ProjectStore
from ..todos.todo_store import TodoStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    if settings.persist:
        settings.store_dir.mkdir(parents=True, exist_ok=True)


def create_initial_state(*, settings=None, store: BlobStore | None = None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings(). If store is None and persistence is on,
    a JsonFileBlobStore under settings.store_dir is used.
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    if store is None and settings.persist:
        store = JsonFileBlobStore(settings.store_dir)
    if not settings.persist:
        store = None
        logger.info("Persistence disabled; running memory-only.")

    selection = Observable(
        Selection(sort_by=settings.default_sort, group_by=settings.default_group)
    )

    state = AppState(
        settings=settings,
        todos=TodoStore(JsonCollection(store, TODOS_KEY)),
        projects=ProjectStore(JsonCollection(store, PROJECTS_KEY)),
        selection=selection,
    )
    state.load()
    logger.info(
        "State ready todos=%d projects=%d persist=%s",
        len(state.todos),
        len(state.projects.all()),
        settings.persist,
    )
    return state
