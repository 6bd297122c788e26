# src/taskboard/core/state.py

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from datetime import date
from typing import Any

from ..todos.project_store import ProjectStore
from ..todos.todo_models import PERSONAL_PROJECT_ID, GroupBy, SortBy, Todo
from ..todos.todo_store import TodoStore
from ..todos.views import DEFAULT_WEEK_DAYS, visible_todos
from .observable import Observable
from .ports import Listener, Unsubscribe

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Selection:
    current_project_id: str = PERSONAL_PROJECT_ID
    sort_by: SortBy = SortBy.CREATED_AT
    group_by: GroupBy = GroupBy.NONE


@dataclass
class AppState:
    """
    Application state owned by the composition root (cli/bootstrap.py).

    Inputs: the two stores and the selection. The visible todo list is
    derived from them and pushed to subscribers whenever any input changes.
    """

    settings: Any
    todos: TodoStore
    projects: ProjectStore
    selection: Observable[Selection] = field(default_factory=lambda: Observable(Selection()))
    today: Callable[[], date] = date.today

    _view: Observable[list[Todo]] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._view = Observable(self.visible_todos())
        # Observable.subscribe calls back right away; the first recompute is harmless.
        self.todos.subscribe(self._recompute)
        self.projects.subscribe(self._recompute)
        self.selection.subscribe(self._recompute)

    # ---- derivation ----

    def _week_days(self) -> int:
        return int(getattr(self.settings, "week_days", DEFAULT_WEEK_DAYS))

    def visible_todos(self, today: date | None = None) -> list[Todo]:
        sel = self.selection.get()
        return visible_todos(
            self.todos.all(),
            sel.current_project_id,
            sel.group_by,
            sel.sort_by,
            today=today or self.today(),
            week_days=self._week_days(),
        )

    def _recompute(self, _changed: object) -> None:
        self._view.set(self.visible_todos())

    def subscribe(self, listener: Listener[list[Todo]]) -> Unsubscribe:
        return self._view.subscribe(listener)

    # ---- lifecycle ----

    def load(self) -> None:
        self.projects.load()
        self.todos.load()

    # ---- selection ----

    def select_project(self, project_id: str) -> None:
        if not project_id:
            raise ValueError("project_id is required")
        self.selection.set(replace(self.selection.get(), current_project_id=project_id))

    def set_sort(self, sort_by: SortBy | str) -> None:
        self.selection.set(replace(self.selection.get(), sort_by=SortBy.parse(sort_by)))

    def set_group(self, group_by: GroupBy | str) -> None:
        self.selection.set(replace(self.selection.get(), group_by=GroupBy.parse(group_by)))

    # ---- cross-store operations ----

    def remove_project(self, project_id: str, *, cascade: bool = False) -> int:
        """
        Delete a project. Its todos stay (orphaned) unless cascade=True.

        Returns how many todos were removed.
        """
        self.projects.delete(project_id)
        removed = self.todos.delete_by_project(project_id) if cascade else 0

        if self.selection.get().current_project_id == project_id:
            personal = next((p for p in self.projects.all() if p.is_personal), None)
            self.select_project(personal.id if personal else PERSONAL_PROJECT_ID)

        logger.info("Project removed id=%s cascade=%s todos_removed=%d", project_id, cascade, removed)
        return removed
