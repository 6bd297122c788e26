# src/taskboard/cli/commands.py

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from datetime import date
from typing import cast

from ..core.state import AppState
from ..todos.todo_api import (
    add_subtask,
    create_project,
    create_todo,
    set_status,
    toggle_subtask,
)
from ..todos.todo_models import GroupBy, SortBy, Todo, TodoStatus

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)

_STATUS_MARK = {
    TodoStatus.NOT_STARTED: "[ ]",
    TodoStatus.IN_PROGRESS: "[~]",
    TodoStatus.DONE: "[x]",
}


class CommandRegistry:
    """Simple slash-command registry used by the console (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        Bad user input (ValueError) becomes an "Error: ..." reply.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except (TypeError, ValueError):
            nparams = 3

        try:
            if nparams >= 3:
                h3 = cast(CommandHandler3, handler)
                return h3(state, args, emit)
            h2 = cast(CommandHandler2, handler)
            return h2(state, args)
        except ValueError as e:
            logger.debug("Command /%s rejected: %s", name, e)
            return f"Error: {e}"

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- parsing helpers ----

_ADD_OPTIONS = frozenset({"w", "weight", "due", "start", "end"})
_PROJECT_OPTIONS = frozenset({"color"})


def _parse_id(raw: str, what: str = "todo id") -> int:
    try:
        return int(raw.lstrip("#"))
    except ValueError:
        raise ValueError(f"{what} must be a number, got {raw!r}") from None


def _parse_date(raw: str) -> str | None:
    if raw.lower() in ("none", "-", ""):
        return None
    return date.fromisoformat(raw).isoformat()


def _split_options(
    args: list[str], known: frozenset[str]
) -> tuple[list[str], dict[str, str]]:
    """Split `word word key=value` into words and options; unknown keys stay in the text."""
    words: list[str] = []
    opts: dict[str, str] = {}
    for a in args:
        key, sep, value = a.partition("=")
        if sep and key.lower() in known:
            opts[key.lower()] = value
        else:
            words.append(a)
    return words, opts


def format_todo(todo: Todo) -> str:
    mark = _STATUS_MARK.get(todo.status, "[?]")
    line = f"{mark} #{todo.id} (w{todo.weight}) {todo.text}"
    if todo.due_date:
        line += f"  due {todo.due_date}"
    elif todo.expected_start_date or todo.expected_end_date:
        line += f"  plan {todo.expected_start_date or '?'}..{todo.expected_end_date or '?'}"
    if todo.sub_tasks:
        done = sum(1 for s in todo.sub_tasks if s.done)
        line += f"  [{done}/{len(todo.sub_tasks)} subtasks]"
    return line


def _require_todo(state: AppState, raw_id: str) -> Todo:
    todo = state.todos.get(_parse_id(raw_id))
    if todo is None:
        raise ValueError(f"no todo #{raw_id.lstrip('#')}")
    return todo


# ---- handlers ----


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_list(state: AppState, args: list[str]) -> str:
    sel = state.selection.get()
    project = state.projects.find(sel.current_project_id)
    title = project.name if project else sel.current_project_id
    items = state.visible_todos()

    lines = [f"{title} (sort: {sel.sort_by.value}, group: {sel.group_by.value})"]
    if not items:
        lines.append("  (nothing here)")
    for t in items:
        lines.append("  " + format_todo(t))
        for s in t.sub_tasks:
            lines.append(f"      {'[x]' if s.done else '[ ]'} {s.id}. {s.text}")
    return "\n".join(lines)


def cmd_add(state: AppState, args: list[str]) -> str:
    """
    /add buy milk w=4 due=2024-05-01
    /add write report start=2024-05-01 end=2024-05-10
    """
    words, opts = _split_options(args, _ADD_OPTIONS)
    if not words:
        return "Usage: /add <text> [w=1..5] [due=YYYY-MM-DD] [start=YYYY-MM-DD] [end=YYYY-MM-DD]"

    todo = create_todo(
        state,
        " ".join(words),
        weight=int(opts.get("w", opts.get("weight", "3"))),
        due_date=_parse_date(opts["due"]) if "due" in opts else None,
        expected_start_date=_parse_date(opts["start"]) if "start" in opts else None,
        expected_end_date=_parse_date(opts["end"]) if "end" in opts else None,
    )
    return f"Added {format_todo(todo)}"


def _status_cmd(status: TodoStatus) -> CommandHandler2:
    def handler(state: AppState, args: list[str]) -> str:
        if not args:
            return "Usage: /<command> <todo id>"
        todo = _require_todo(state, args[0])
        updated = set_status(state, todo.id, status)
        return f"Updated {format_todo(updated or todo)}"

    return handler


def cmd_rm(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /rm <todo id>"
    todo = _require_todo(state, args[0])
    state.todos.delete(todo.id)
    return f"Removed #{todo.id}."


def cmd_weight(state: AppState, args: list[str]) -> str:
    if len(args) < 2:
        return "Usage: /weight <todo id> <1..5>"
    todo = _require_todo(state, args[0])
    updated = state.todos.update(todo.id, weight=int(args[1]))
    return f"Updated {format_todo(updated or todo)}"


def cmd_due(state: AppState, args: list[str]) -> str:
    if len(args) < 2:
        return "Usage: /due <todo id> <YYYY-MM-DD|none>"
    todo = _require_todo(state, args[0])
    updated = state.todos.update(todo.id, due_date=_parse_date(args[1]))
    return f"Updated {format_todo(updated or todo)}"


def cmd_sub(state: AppState, args: list[str]) -> str:
    """
    /sub <todo id> add <text>
    /sub <todo id> toggle <subtask id>
    """
    if len(args) < 3:
        return "Usage: /sub <todo id> add <text> | /sub <todo id> toggle <subtask id>"

    todo = _require_todo(state, args[0])
    action = args[1].lower()

    if action == "add":
        sub = add_subtask(state, todo.id, " ".join(args[2:]))
        return f"Subtask {sub.id} added to #{todo.id}." if sub else f"No todo #{todo.id}."

    if action == "toggle":
        sub = toggle_subtask(state, todo.id, _parse_id(args[2], "subtask id"))
        if sub is None:
            return f"No subtask {args[2]} on #{todo.id}."
        return f"Subtask {sub.id} is now {'done' if sub.done else 'open'}."

    return "Unknown /sub action. Use add or toggle."


def cmd_projects(state: AppState, args: list[str]) -> str:
    current = state.selection.get().current_project_id
    lines = ["Projects:"]
    for p in state.projects.all():
        marker = "*" if p.id == current else " "
        count = sum(1 for t in state.todos.all() if t.project_id == p.id)
        lines.append(f" {marker} {p.id}  {p.name}  {p.color}  ({count} todos)")
    return "\n".join(lines)


def cmd_project(
    state: AppState,
    args: list[str],
    emit: CommandEmitter | None = None,
) -> str:
    """
    /project use <id>
    /project add <name...> [color=#RRGGBB]
    /project rm <id> [--cascade]
    """
    if len(args) < 2:
        return "Usage: /project use <id> | add <name> [color=#RRGGBB] | rm <id> [--cascade]"

    sub = args[0].lower()

    if sub == "use":
        project = state.projects.find(args[1])
        if project is None:
            return f"No project {args[1]!r}. Use /projects to list them."
        state.select_project(project.id)
        return f"Now showing {project.name}."

    if sub == "add":
        words, opts = _split_options(args[1:], _PROJECT_OPTIONS)
        if not words:
            return "Usage: /project add <name> [color=#RRGGBB]"
        if "color" in opts:
            project = create_project(state, " ".join(words), opts["color"])
        else:
            project = create_project(state, " ".join(words))
        return f"Project {project.name} created (id={project.id})."

    if sub in ("rm", "del", "delete"):
        pid = args[1]
        project = state.projects.find(pid)
        if project is None:
            return f"No project {pid!r}."
        cascade = "--cascade" in args[2:]
        if project.is_personal and emit:
            emit(f"Warning: removing the personal project {project.name}.")
        removed = state.remove_project(pid, cascade=cascade)
        if cascade:
            return f"Project {project.name} removed with {removed} todos."
        orphans = sum(1 for t in state.todos.all() if t.project_id == pid)
        return f"Project {project.name} removed ({orphans} todos left without a project)."

    return "Unknown /project action. Use use, add or rm."


def cmd_sort(state: AppState, args: list[str]) -> str:
    if not args:
        allowed = " | ".join(s.value for s in SortBy)
        return f"Sorting by {state.selection.get().sort_by.value}. Usage: /sort {allowed}"
    state.set_sort(args[0])
    return f"Sorting by {state.selection.get().sort_by.value}."


def cmd_group(state: AppState, args: list[str]) -> str:
    if not args:
        allowed = " | ".join(g.value for g in GroupBy)
        return f"Showing {state.selection.get().group_by.value}. Usage: /group {allowed}"
    state.set_group(args[0])
    return f"Showing {state.selection.get().group_by.value}."


def cmd_status(state: AppState, args: list[str]) -> str:
    persist = "ON" if getattr(state.settings, "persist", False) else "OFF (memory-only)"
    store_dir = getattr(state.settings, "store_dir", "-")
    sel = state.selection.get()
    return (
        "Status:\n"
        f"  Persistence: {persist}\n"
        f"  Store dir: {store_dir}\n"
        f"  Todos: {len(state.todos)} / Projects: {len(state.projects.all())}\n"
        f"  View: project={sel.current_project_id} sort={sel.sort_by.value} group={sel.group_by.value}"
    )


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("list", cmd_list, help_text="Show todos of the current view.", aliases=["ls"])
registry.register(
    "add", cmd_add, help_text="Add a todo: /add <text> [w=1..5] [due=] [start=] [end=]."
)
registry.register("start", _status_cmd(TodoStatus.IN_PROGRESS), help_text="Mark a todo in progress.")
registry.register("done", _status_cmd(TodoStatus.DONE), help_text="Mark a todo done.")
registry.register("reset", _status_cmd(TodoStatus.NOT_STARTED), help_text="Mark a todo not started.")
registry.register("rm", cmd_rm, help_text="Delete a todo: /rm <id>.")
registry.register("weight", cmd_weight, help_text="Set weight: /weight <id> <1..5>.")
registry.register("due", cmd_due, help_text="Set due date: /due <id> <YYYY-MM-DD|none>.")
registry.register("sub", cmd_sub, help_text="Subtasks: /sub <id> add <text> | toggle <sub id>.")
registry.register("projects", cmd_projects, help_text="List projects.")
registry.register(
    "project", cmd_project, help_text="Projects: /project use <id> | add <name> | rm <id> [--cascade]."
)
registry.register("sort", cmd_sort, help_text="Sort: /sort dueDate | weight | createdAt | status.")
registry.register("group", cmd_group, help_text="Filter: /group none | today | week | overdue.")
registry.register("status", cmd_status, help_text="Show persistence and view settings.")
