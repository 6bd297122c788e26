# src/taskboard/todos/todo_store.py

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Callable, Iterable
from typing import Any

from ..core.observable import Observable
from ..core.ports import Listener, Unsubscribe
from ..storage.collection import JsonCollection
from .todo_models import MAX_WEIGHT, MIN_WEIGHT, Todo, TodoStatus, later_ts, now_iso

logger = logging.getLogger(__name__)

_TODO_FIELDS = frozenset(f.name for f in dataclasses.fields(Todo))


def _check_weight(weight: Any) -> int:
    """Return weight as an int; bools and non-integral values are rejected."""
    if isinstance(weight, bool):
        raise ValueError(f"weight must be a number, got {weight!r}")
    try:
        value = int(weight)
    except (TypeError, ValueError):
        raise ValueError(f"weight must be a number, got {weight!r}") from None
    if value != weight and str(value) != str(weight).strip():
        raise ValueError(f"weight must be a whole number, got {weight!r}")
    if not MIN_WEIGHT <= value <= MAX_WEIGHT:
        raise ValueError(f"weight must be within {MIN_WEIGHT}..{MAX_WEIGHT}, got {weight!r}")
    return value


class TodoStore:
    """
    Ordered in-memory todo list, persisted after every mutation.

    Mutations never edit a list in place: each one builds a new list (and new
    Todo objects for the touched items), persists it and publishes it to
    subscribers. Unknown ids on update/delete are no-ops.
    """

    def __init__(self, collection: JsonCollection, *, clock: Callable[[], str] | None = None) -> None:
        self._collection = collection
        self._clock = clock or now_iso
        self._items: Observable[list[Todo]] = Observable([])

    # ---- low-level helpers ----

    def _commit(self, todos: list[Todo]) -> None:
        self._collection.save([t.to_dict() for t in todos])
        self._items.set(todos)

    # ---- public API ----

    def subscribe(self, listener: Listener[list[Todo]]) -> Unsubscribe:
        return self._items.subscribe(listener)

    def all(self) -> list[Todo]:
        return list(self._items.get())

    def get(self, todo_id: int) -> Todo | None:
        for t in self._items.get():
            if t.id == todo_id:
                return t
        return None

    def __len__(self) -> int:
        return len(self._items.get())

    def load(self) -> None:
        """Replace the in-memory list with the persisted one, if any."""
        raw = self._collection.load()
        if raw is None:
            logger.debug("No persisted todos; keeping %d in memory.", len(self))
            return
        todos = [Todo.from_dict(d) for d in raw]
        self._items.set(todos)
        logger.info("Loaded %d todos from %s", len(todos), self._collection.key)

    def save(self, todos: Iterable[Todo]) -> None:
        self._commit(list(todos))

    def add(self, todo: Todo) -> None:
        todo = dataclasses.replace(
            todo, weight=_check_weight(todo.weight), status=TodoStatus.parse(todo.status)
        )
        self._commit([*self._items.get(), todo])
        logger.debug("Todo added id=%s project=%s", todo.id, todo.project_id)

    def update(self, todo_id: int, **changes: Any) -> Todo | None:
        unknown = set(changes) - _TODO_FIELDS
        if unknown:
            raise ValueError(f"unknown todo field(s): {', '.join(sorted(unknown))}")
        if "weight" in changes:
            changes["weight"] = _check_weight(changes["weight"])
        if "status" in changes:
            changes["status"] = TodoStatus.parse(changes["status"])

        updated: Todo | None = None
        out: list[Todo] = []
        for t in self._items.get():
            if t.id == todo_id:
                stamp = later_ts(self._clock(), t.updated_at)
                t = dataclasses.replace(t, **{**changes, "updated_at": stamp})
                updated = t
            out.append(t)

        if updated is None:
            logger.debug("Todo update ignored, unknown id=%s", todo_id)
            return None

        self._commit(out)
        logger.debug("Todo updated id=%s fields=%s", todo_id, sorted(changes))
        return updated

    def delete(self, todo_id: int) -> None:
        before = self._items.get()
        out = [t for t in before if t.id != todo_id]
        if len(out) == len(before):
            logger.debug("Todo delete ignored, unknown id=%s", todo_id)
        self._commit(out)

    def delete_by_project(self, project_id: str) -> int:
        before = self._items.get()
        out = [t for t in before if t.project_id != project_id]
        removed = len(before) - len(out)
        self._commit(out)
        logger.debug("Todos deleted project=%s count=%d", project_id, removed)
        return removed
