# src/taskboard/todos/todo_models.py

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import StrEnum
from typing import Any

TS_FORMAT = "%Y-%m-%dT%H:%M:%S.%fZ"

MIN_WEIGHT = 1
MAX_WEIGHT = 5
DEFAULT_WEIGHT = 3


class _ParseMixin:
    @classmethod
    def parse(cls, raw: str | StrEnum) -> Any:
        try:
            return cls(raw)  # type: ignore[call-arg]
        except ValueError:
            allowed = ", ".join(m.value for m in cls)  # type: ignore[attr-defined]
            raise ValueError(f"unknown {cls.__name__} {raw!r} (expected one of: {allowed})") from None


class TodoStatus(_ParseMixin, StrEnum):
    NOT_STARTED = "not-started"
    IN_PROGRESS = "in-progress"
    DONE = "done"

    @classmethod
    def from_db(cls, raw: str | None) -> TodoStatus:
        if not raw:
            return cls.NOT_STARTED
        try:
            return cls(raw)
        except ValueError:
            return cls.NOT_STARTED


class SortBy(_ParseMixin, StrEnum):
    DUE_DATE = "dueDate"
    WEIGHT = "weight"
    CREATED_AT = "createdAt"
    STATUS = "status"


class GroupBy(_ParseMixin, StrEnum):
    NONE = "none"
    TODAY = "today"
    WEEK = "week"
    OVERDUE = "overdue"


def format_ts(dt: datetime) -> str:
    """Fixed-width UTC timestamp; lexical order == chronological order."""
    return dt.astimezone(timezone.utc).strftime(TS_FORMAT)


def parse_ts(raw: str) -> datetime:
    return datetime.strptime(raw, TS_FORMAT).replace(tzinfo=timezone.utc)


def now_iso() -> str:
    return format_ts(datetime.now(timezone.utc))


def later_ts(candidate: str, previous: str | None) -> str:
    """Return `candidate`, or `previous` + 1us when the clock did not move forward."""
    if not previous or candidate > previous:
        return candidate
    try:
        return format_ts(parse_ts(previous) + timedelta(microseconds=1))
    except ValueError:
        # previous stamp in a foreign format: keep ours
        return candidate


@dataclass(slots=True)
class SubTask:
    id: int
    text: str
    done: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "text": self.text, "done": self.done}

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> SubTask:
        return cls(id=int(d["id"]), text=str(d.get("text") or ""), done=bool(d.get("done", False)))


@dataclass(slots=True)
class Todo:
    id: int
    text: str
    project_id: str
    created_at: str
    updated_at: str

    description: str = ""
    status: TodoStatus = TodoStatus.NOT_STARTED
    weight: int = DEFAULT_WEIGHT

    # ISO dates (YYYY-MM-DD). due_date is used by the personal project,
    # the expected/actual pairs by the other projects.
    due_date: str | None = None
    expected_start_date: str | None = None
    expected_end_date: str | None = None
    actual_start_date: str | None = None
    actual_end_date: str | None = None

    sub_tasks: list[SubTask] = field(default_factory=list)

    expanded: bool | None = None  # UI accordion state

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "id": self.id,
            "text": self.text,
            "description": self.description,
            "status": self.status.value,
            "weight": self.weight,
            "projectId": self.project_id,
            "dueDate": self.due_date,
            "expectedStartDate": self.expected_start_date,
            "expectedEndDate": self.expected_end_date,
            "actualStartDate": self.actual_start_date,
            "actualEndDate": self.actual_end_date,
            "subTasks": [s.to_dict() for s in self.sub_tasks],
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }
        if self.expanded is not None:
            out["expanded"] = self.expanded
        return out

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Todo:
        expanded = d.get("expanded")
        return cls(
            id=int(d["id"]),
            text=str(d.get("text") or ""),
            description=str(d.get("description") or ""),
            status=TodoStatus.from_db(d.get("status")),
            weight=int(d.get("weight", DEFAULT_WEIGHT)),
            project_id=str(d["projectId"]),
            due_date=d.get("dueDate"),
            expected_start_date=d.get("expectedStartDate"),
            expected_end_date=d.get("expectedEndDate"),
            actual_start_date=d.get("actualStartDate"),
            actual_end_date=d.get("actualEndDate"),
            sub_tasks=[SubTask.from_dict(s) for s in d.get("subTasks") or []],
            created_at=str(d.get("createdAt") or ""),
            updated_at=str(d.get("updatedAt") or ""),
            expanded=bool(expanded) if expanded is not None else None,
        )


@dataclass(slots=True)
class Project:
    id: str
    name: str
    color: str
    is_personal: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "color": self.color,
            "isPersonal": self.is_personal,
        }

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Project:
        return cls(
            id=str(d["id"]),
            name=str(d.get("name") or ""),
            color=str(d.get("color") or ""),
            is_personal=bool(d.get("isPersonal", False)),
        )


PERSONAL_PROJECT_ID = "personal"


def default_projects() -> list[Project]:
    return [Project(id=PERSONAL_PROJECT_ID, name="Personal", color="#3B82F6", is_personal=True)]
