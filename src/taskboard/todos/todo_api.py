# src/taskboard/todos/todo_api.py

from __future__ import annotations

import logging
import re
from datetime import date

from ..core.state import AppState
from .todo_models import DEFAULT_WEIGHT, Project, SubTask, Todo, TodoStatus, now_iso

logger = logging.getLogger(__name__)

_SLUG_RE = re.compile(r"[^a-z0-9]+")

DEFAULT_PROJECT_COLOR = "#10B981"


def next_todo_id(state: AppState) -> int:
    return max((t.id for t in state.todos.all()), default=0) + 1


def create_todo(
    state: AppState,
    text: str,
    *,
    description: str = "",
    weight: int = DEFAULT_WEIGHT,
    due_date: str | None = None,
    expected_start_date: str | None = None,
    expected_end_date: str | None = None,
    project_id: str | None = None,
) -> Todo:
    """
    Convenience helper: build a full Todo for the current project and add it.
    The store itself only accepts complete objects.
    """
    if not text or not text.strip():
        raise ValueError("text is required")

    stamp = now_iso()
    todo = Todo(
        id=next_todo_id(state),
        text=text.strip(),
        description=description,
        status=TodoStatus.NOT_STARTED,
        weight=int(weight),
        project_id=project_id or state.selection.get().current_project_id,
        due_date=due_date,
        expected_start_date=expected_start_date,
        expected_end_date=expected_end_date,
        sub_tasks=[],
        created_at=stamp,
        updated_at=stamp,
    )
    state.todos.add(todo)
    return todo


def set_status(
    state: AppState, todo_id: int, status: TodoStatus | str, *, today: date | None = None
) -> Todo | None:
    """
    Change status and fill the actual start/end dates on the way.
    Dates already set are kept.
    """
    todo = state.todos.get(todo_id)
    if todo is None:
        return None

    new_status = TodoStatus.parse(status)
    day = (today or state.today()).isoformat()
    changes: dict[str, object] = {"status": new_status}

    if new_status in (TodoStatus.IN_PROGRESS, TodoStatus.DONE) and not todo.actual_start_date:
        changes["actual_start_date"] = day
    if new_status is TodoStatus.DONE and not todo.actual_end_date:
        changes["actual_end_date"] = day

    return state.todos.update(todo_id, **changes)


def add_subtask(state: AppState, todo_id: int, text: str) -> SubTask | None:
    if not text or not text.strip():
        raise ValueError("text is required")
    todo = state.todos.get(todo_id)
    if todo is None:
        return None

    sub = SubTask(id=max((s.id for s in todo.sub_tasks), default=0) + 1, text=text.strip())
    state.todos.update(todo_id, sub_tasks=[*todo.sub_tasks, sub])
    return sub


def toggle_subtask(state: AppState, todo_id: int, subtask_id: int) -> SubTask | None:
    todo = state.todos.get(todo_id)
    if todo is None:
        return None

    toggled: SubTask | None = None
    subs: list[SubTask] = []
    for s in todo.sub_tasks:
        if s.id == subtask_id:
            s = SubTask(id=s.id, text=s.text, done=not s.done)
            toggled = s
        subs.append(s)

    if toggled is None:
        return None
    state.todos.update(todo_id, sub_tasks=subs)
    return toggled


def _slugify(name: str) -> str:
    return _SLUG_RE.sub("-", name.strip().lower()).strip("-") or "project"


def create_project(state: AppState, name: str, color: str = DEFAULT_PROJECT_COLOR) -> Project:
    if not name or not name.strip():
        raise ValueError("name is required")

    base = _slugify(name)
    pid = base
    n = 2
    while state.projects.find(pid) is not None:
        pid = f"{base}-{n}"
        n += 1

    project = Project(id=pid, name=name.strip(), color=color, is_personal=False)
    state.projects.add(project)
    logger.info("Project created id=%s name=%s", pid, project.name)
    return project
