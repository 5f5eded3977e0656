# src/tasksync/sync/operations.py

from __future__ import annotations

"""
Queued mutation records and their wire form.

  {"type": "create", "task": {...}}
  {"type": "update", "taskId": "...", "updates": {...}}
  {"type": "delete", "taskId": "..."}
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping

from ..tasks.task_models import Task


@dataclass(frozen=True, slots=True)
class CreateOp:
    task: Task

    def to_wire(self) -> dict[str, Any]:
        return {"type": "create", "task": self.task.to_dict()}


@dataclass(frozen=True, slots=True)
class UpdateOp:
    task_id: str
    updates: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        # Freeze the field set; operations are immutable once enqueued.
        object.__setattr__(self, "updates", MappingProxyType(dict(self.updates)))

    def to_wire(self) -> dict[str, Any]:
        return {"type": "update", "taskId": self.task_id, "updates": dict(self.updates)}


@dataclass(frozen=True, slots=True)
class DeleteOp:
    task_id: str

    def to_wire(self) -> dict[str, Any]:
        return {"type": "delete", "taskId": self.task_id}


Operation = CreateOp | UpdateOp | DeleteOp


def operation_from_wire(raw: Any) -> Operation:
    """Decode one wire operation. Raises ValueError when it is malformed."""
    if not isinstance(raw, dict):
        raise ValueError(f"operation must be an object, got {type(raw).__name__}")

    kind = raw.get("type")
    if kind == "create":
        if raw.get("task") is None:
            raise ValueError("create operation has no task")
        return CreateOp(task=Task.from_dict(raw["task"]))

    if kind in ("update", "delete"):
        task_id = raw.get("taskId")
        if not isinstance(task_id, str) or not task_id:
            raise ValueError(f"{kind} operation has no taskId")
        if kind == "delete":
            return DeleteOp(task_id=task_id)
        updates = raw.get("updates") or {}
        if not isinstance(updates, dict):
            raise ValueError("update operation has non-object updates")
        return UpdateOp(task_id=task_id, updates=updates)

    raise ValueError(f"unknown operation type: {kind!r}")
