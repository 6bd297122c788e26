# src/taskboard/todos/views.py

"""
Derived views: filter by project + time window, then sort.

Everything here is pure: inputs are never mutated and every call returns a
new list. Dates are compared as ISO strings (YYYY-MM-DD), which sort
lexically in calendar order.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date, timedelta

from .todo_models import GroupBy, SortBy, Todo, TodoStatus

DEFAULT_WEEK_DAYS = 7

_STATUS_ORDER = {
    TodoStatus.NOT_STARTED: 0,
    TodoStatus.IN_PROGRESS: 1,
    TodoStatus.DONE: 2,
}


def filter_todos(
    todos: Iterable[Todo],
    project_id: str,
    group_by: GroupBy | str = GroupBy.NONE,
    *,
    today: date | None = None,
    week_days: int = DEFAULT_WEEK_DAYS,
) -> list[Todo]:
    group = GroupBy.parse(group_by)
    day = today or date.today()
    today_s = day.isoformat()

    out = [t for t in todos if t.project_id == project_id]

    if group is GroupBy.TODAY:
        out = [t for t in out if t.due_date == today_s]
    elif group is GroupBy.WEEK:
        until_s = (day + timedelta(days=week_days)).isoformat()
        out = [t for t in out if t.due_date and today_s <= t.due_date <= until_s]
    elif group is GroupBy.OVERDUE:
        out = [
            t for t in out if t.due_date and t.due_date < today_s and t.status != TodoStatus.DONE
        ]

    return out


def sort_todos(todos: Iterable[Todo], sort_by: SortBy | str = SortBy.CREATED_AT) -> list[Todo]:
    # sorted() is stable, and reverse=True keeps ties in input order too.
    criterion = SortBy.parse(sort_by)
    items = list(todos)

    if criterion is SortBy.DUE_DATE:
        return sorted(items, key=lambda t: (t.due_date is None or t.due_date == "", t.due_date or ""))
    if criterion is SortBy.WEIGHT:
        return sorted(items, key=lambda t: t.weight, reverse=True)
    if criterion is SortBy.STATUS:
        return sorted(items, key=lambda t: _STATUS_ORDER.get(t.status, len(_STATUS_ORDER)))
    return sorted(items, key=lambda t: t.created_at, reverse=True)


def visible_todos(
    todos: Iterable[Todo],
    project_id: str,
    group_by: GroupBy | str = GroupBy.NONE,
    sort_by: SortBy | str = SortBy.CREATED_AT,
    *,
    today: date | None = None,
    week_days: int = DEFAULT_WEEK_DAYS,
) -> list[Todo]:
    filtered = filter_todos(todos, project_id, group_by, today=today, week_days=week_days)
    return sort_todos(filtered, sort_by)
