# src/taskboard/todos/project_store.py

from __future__ import annotations

import logging
from collections.abc import Iterable

from ..core.observable import Observable
from ..core.ports import Listener, Unsubscribe
from ..storage.collection import JsonCollection
from .todo_models import Project, default_projects

logger = logging.getLogger(__name__)


class ProjectStore:
    """
    Ordered in-memory project list, persisted after every mutation.

    Starts with the default "Personal" project. Deleting a project does not
    touch todos; callers that want a cascade use TodoStore.delete_by_project.
    """

    def __init__(self, collection: JsonCollection) -> None:
        self._collection = collection
        self._items: Observable[list[Project]] = Observable(default_projects())

    def _commit(self, projects: list[Project]) -> None:
        self._collection.save([p.to_dict() for p in projects])
        self._items.set(projects)

    def subscribe(self, listener: Listener[list[Project]]) -> Unsubscribe:
        return self._items.subscribe(listener)

    def all(self) -> list[Project]:
        return list(self._items.get())

    def find(self, project_id: str) -> Project | None:
        for p in self._items.get():
            if p.id == project_id:
                return p
        return None

    def get_by_id(self, project_id: str) -> Project | None:
        """
        Look the project up in the persisted collection, not in memory.

        Returns None when persistence is unavailable or nothing was saved yet,
        even if the project exists in memory.
        """
        raw = self._collection.load()
        if raw is None:
            return None
        for d in raw:
            if d.get("id") == project_id:
                return Project.from_dict(d)
        return None

    def load(self) -> None:
        if not self._collection.available:
            return
        raw = self._collection.load()
        if raw is None:
            self._items.set(default_projects())
            logger.info("No persisted projects; seeded defaults.")
            return
        projects = [Project.from_dict(d) for d in raw]
        self._items.set(projects)
        logger.info("Loaded %d projects from %s", len(projects), self._collection.key)

    def save(self, projects: Iterable[Project]) -> None:
        self._commit(list(projects))

    def add(self, project: Project) -> None:
        if not project.id or not project.id.strip():
            raise ValueError("project id is required")
        if self.find(project.id) is not None:
            raise ValueError(f"project {project.id!r} already exists")
        self._commit([*self._items.get(), project])
        logger.debug("Project added id=%s name=%s", project.id, project.name)

    def delete(self, project_id: str) -> None:
        before = self._items.get()
        out = [p for p in before if p.id != project_id]
        if len(out) == len(before):
            logger.debug("Project delete ignored, unknown id=%s", project_id)
        self._commit(out)
