# tests/test_views.py

from __future__ import annotations

from datetime import date

import pytest

from taskboard.todos.todo_models import GroupBy, SortBy, TodoStatus
from taskboard.todos.views import filter_todos, sort_todos, visible_todos

from .conftest import make_todo

TODAY = date(2024, 3, 15)


def _ids(todos) -> list[int]:
    return [t.id for t in todos]


def test_filter_keeps_only_current_project() -> None:
    todos = [make_todo(1), make_todo(2, project_id="work"), make_todo(3)]
    assert _ids(filter_todos(todos, "personal", GroupBy.NONE, today=TODAY)) == [1, 3]
    assert _ids(filter_todos(todos, "work", "none", today=TODAY)) == [2]


def test_filter_today() -> None:
    todos = [
        make_todo(1, due_date="2024-03-15"),
        make_todo(2, due_date="2024-03-16"),
        make_todo(3),
    ]
    assert _ids(filter_todos(todos, "personal", GroupBy.TODAY, today=TODAY)) == [1]


def test_filter_week_is_inclusive_on_both_ends() -> None:
    todos = [
        make_todo(1, due_date="2024-03-14"),
        make_todo(2, due_date="2024-03-15"),
        make_todo(3, due_date="2024-03-22"),
        make_todo(4, due_date="2024-03-23"),
        make_todo(5),
    ]
    assert _ids(filter_todos(todos, "personal", GroupBy.WEEK, today=TODAY)) == [2, 3]
    assert _ids(filter_todos(todos, "personal", GroupBy.WEEK, today=TODAY, week_days=1)) == [2]


def test_filter_overdue_skips_done_and_undated() -> None:
    todos = [
        make_todo(1, due_date="2020-01-01", status=TodoStatus.NOT_STARTED),
        make_todo(2, due_date="2020-01-01", status=TodoStatus.DONE),
        make_todo(3, due_date="2024-03-15"),
        make_todo(4, due_date="2024-03-14", status=TodoStatus.IN_PROGRESS),
        make_todo(5),
    ]
    assert _ids(filter_todos(todos, "personal", GroupBy.OVERDUE, today=TODAY)) == [1, 4]


def test_filter_does_not_mutate_input() -> None:
    todos = [make_todo(1), make_todo(2, project_id="work")]
    filter_todos(todos, "personal", GroupBy.NONE, today=TODAY)
    assert _ids(todos) == [1, 2]


def test_sort_weight_descending() -> None:
    todos = [make_todo(1, weight=3), make_todo(2, weight=5), make_todo(3, weight=1)]
    assert [t.weight for t in sort_todos(todos, SortBy.WEIGHT)] == [5, 3, 1]


def test_sort_weight_is_stable_for_ties() -> None:
    todos = [make_todo(1, weight=2), make_todo(2, weight=4), make_todo(3, weight=2)]
    assert _ids(sort_todos(todos, "weight")) == [2, 1, 3]


def test_sort_due_date_puts_missing_last() -> None:
    todos = [make_todo(1), make_todo(2, due_date="2024-01-01")]
    assert _ids(sort_todos(todos, SortBy.DUE_DATE)) == [2, 1]

    todos = [
        make_todo(1, due_date="2024-05-01"),
        make_todo(2),
        make_todo(3, due_date="2024-01-01"),
        make_todo(4),
    ]
    assert _ids(sort_todos(todos, SortBy.DUE_DATE)) == [3, 1, 2, 4]


def test_sort_status_fixed_order() -> None:
    todos = [
        make_todo(1, status=TodoStatus.DONE),
        make_todo(2, status=TodoStatus.NOT_STARTED),
        make_todo(3, status=TodoStatus.IN_PROGRESS),
        make_todo(4, status=TodoStatus.NOT_STARTED),
    ]
    assert _ids(sort_todos(todos, SortBy.STATUS)) == [2, 4, 3, 1]


def test_sort_created_at_newest_first() -> None:
    todos = [make_todo(1), make_todo(3), make_todo(2)]
    assert _ids(sort_todos(todos, SortBy.CREATED_AT)) == [3, 2, 1]


def test_unknown_criteria_raise() -> None:
    with pytest.raises(ValueError):
        sort_todos([], "priority")
    with pytest.raises(ValueError):
        filter_todos([], "personal", "month")


def test_visible_todos_filters_then_sorts() -> None:
    todos = [
        make_todo(1, weight=1, due_date="2024-03-16"),
        make_todo(2, weight=5, due_date="2024-03-17"),
        make_todo(3, weight=4, due_date="2024-06-01"),
        make_todo(4, weight=5, project_id="work", due_date="2024-03-16"),
    ]
    out = visible_todos(todos, "personal", GroupBy.WEEK, SortBy.WEIGHT, today=TODAY)
    assert _ids(out) == [2, 1]
