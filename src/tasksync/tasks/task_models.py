# src/tasksync/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime, timezone
from enum import StrEnum
from typing import Any

_EPOCH_MIN = datetime.min.replace(tzinfo=timezone.utc)


class Priority(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @classmethod
    def from_wire(cls, raw: Any) -> Priority:
        if not raw:
            return cls.MEDIUM
        try:
            return cls(str(raw))
        except ValueError:
            return cls.MEDIUM


class TaskStatus(StrEnum):
    TODO = "todo"
    IN_PROGRESS = "in_progress"
    DONE = "done"

    @classmethod
    def from_wire(cls, raw: Any) -> TaskStatus:
        if not raw:
            return cls.TODO
        try:
            return cls(str(raw))
        except ValueError:
            return cls.TODO


def utc_now_iso() -> str:
    """Current UTC time as an ISO-8601 string with millisecond precision and a Z suffix."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_timestamp(value: str | None) -> datetime:
    """
    Parse an ISO-8601 timestamp for ordering.

    Missing or unparseable values sort as the earliest possible instant.
    Naive values are taken as UTC.
    """
    if not value:
        return _EPOCH_MIN
    try:
        ts = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except (TypeError, ValueError):
        return _EPOCH_MIN
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts


def next_stamp(previous: str | None, now: str | None = None) -> str:
    """Stamp for an edit: now, unless previous is later. updated_at never goes backwards for an id."""
    now = now or utc_now_iso()
    if previous and parse_timestamp(previous) > parse_timestamp(now):
        return previous
    return now


def _opt_str(raw: Any) -> str | None:
    if raw is None or raw == "":
        return None
    return str(raw)


# Wire (camelCase) name -> dataclass attribute.
_WIRE_FIELDS = {
    "id": "id",
    "title": "title",
    "description": "description",
    "priority": "priority",
    "status": "status",
    "dueDate": "due_date",
    "project": "project",
    "createdAt": "created_at",
    "updatedAt": "updated_at",
    "completedAt": "completed_at",
}

# Set once at creation; updates cannot touch them.
_FIXED_FIELDS = frozenset({"id", "createdAt"})


@dataclass(frozen=True, slots=True)
class Task:
    id: str
    title: str
    priority: Priority = Priority.MEDIUM
    status: TaskStatus = TaskStatus.TODO
    description: str | None = None
    due_date: str | None = None  # YYYY-MM-DD
    project: str | None = None
    created_at: str | None = None
    updated_at: str | None = None
    completed_at: str | None = None

    @property
    def updated_key(self) -> datetime:
        return parse_timestamp(self.updated_at)

    def to_dict(self) -> dict[str, Any]:
        """Wire/persisted form. Optional fields are omitted when unset."""
        out: dict[str, Any] = {}
        for wire, attr in _WIRE_FIELDS.items():
            val = getattr(self, attr)
            if val is None:
                continue
            out[wire] = val.value if isinstance(val, StrEnum) else val
        return out

    @classmethod
    def from_dict(cls, data: Any) -> Task:
        """
        Decode a wire/persisted record.

        Raises ValueError when the record is not an object or has no string id.
        Unknown priority/status values fall back to defaults.
        """
        if not isinstance(data, dict):
            raise ValueError(f"task record must be an object, got {type(data).__name__}")
        task_id = data.get("id")
        if not isinstance(task_id, str) or not task_id:
            raise ValueError("task record has no id")
        return cls(
            id=task_id,
            title=str(data.get("title") or ""),
            priority=Priority.from_wire(data.get("priority")),
            status=TaskStatus.from_wire(data.get("status")),
            description=_opt_str(data.get("description")),
            due_date=_opt_str(data.get("dueDate")),
            project=_opt_str(data.get("project")),
            created_at=_opt_str(data.get("createdAt")),
            updated_at=_opt_str(data.get("updatedAt")),
            completed_at=_opt_str(data.get("completedAt")),
        )

    def with_updates(self, updates: dict[str, Any]) -> Task:
        """
        Apply a partial wire-form field set. id and createdAt never change.

        Keys set to None clear optional fields (completedAt on un-complete).
        """
        merged = self.to_dict()
        for key, val in updates.items():
            if key in _FIXED_FIELDS or key not in _WIRE_FIELDS:
                continue
            if val is None:
                merged.pop(key, None)
            else:
                merged[key] = val
        return Task.from_dict(merged)

    def stamped(self, updated_at: str) -> Task:
        return replace(self, updated_at=updated_at)


def sort_newest_first(tasks: list[Task]) -> list[Task]:
    return sorted(tasks, key=lambda t: t.updated_key, reverse=True)


@dataclass(frozen=True, slots=True)
class Project:
    id: str
    name: str
    color: str

    def to_dict(self) -> dict[str, str]:
        return {"id": self.id, "name": self.name, "color": self.color}

    @classmethod
    def from_dict(cls, data: Any) -> Project:
        if not isinstance(data, dict) or not data.get("id"):
            raise ValueError("project record has no id")
        return cls(
            id=str(data["id"]),
            name=str(data.get("name") or data["id"]),
            color=str(data.get("color") or "#6366F1"),
        )


DEFAULT_PROJECTS: tuple[Project, ...] = (
    Project(id="inbox", name="Inbox", color="#6366F1"),
    Project(id="work", name="Work", color="#8B5CF6"),
    Project(id="personal", name="Personal", color="#10B981"),
    Project(id="learning", name="Learning", color="#F59E0B"),
)
