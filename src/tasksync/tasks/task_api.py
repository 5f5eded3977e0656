# src/tasksync/tasks/task_api.py

from __future__ import annotations

"""
CRUD entry points for front ends.

Every mutation writes the local store first, then enqueues the matching
operation, then fires the post-mutation sync trigger. The local write is what
the UI renders immediately; the queue carries it to the remote later.
"""

import logging
import secrets
import time
from typing import Any

from ..core.state import AppState
from ..sync.operations import CreateOp, DeleteOp, UpdateOp
from .task_models import Priority, Task, TaskStatus, next_stamp, utc_now_iso

logger = logging.getLogger(__name__)

# Keyword name -> wire field. id/createdAt/updatedAt are not caller-editable.
_EDITABLE_FIELDS = {
    "title": "title",
    "description": "description",
    "priority": "priority",
    "status": "status",
    "due_date": "dueDate",
    "project": "project",
    "completed_at": "completedAt",
}


def generate_id() -> str:
    """Millisecond clock in base 36 plus random suffix; sortable-ish and collision-safe enough offline."""
    ms = int(time.time() * 1000)
    digits = "0123456789abcdefghijklmnopqrstuvwxyz"
    head = ""
    while ms:
        ms, rem = divmod(ms, 36)
        head = digits[rem] + head
    return head + secrets.token_hex(5)


def _after_mutation(state: AppState) -> None:
    state.sync_engine.request_flush()


def add_task(
    state: AppState,
    *,
    title: str,
    description: str | None = None,
    priority: Priority | str = Priority.MEDIUM,
    status: TaskStatus | str = TaskStatus.TODO,
    due_date: str | None = None,
    project: str | None = None,
    task_id: str | None = None,
) -> Task:
    if not title or not title.strip():
        raise ValueError("title is required")

    now = utc_now_iso()
    task = Task(
        id=task_id or generate_id(),
        title=title.strip(),
        description=description,
        priority=Priority.from_wire(priority),
        status=TaskStatus.from_wire(status),
        due_date=due_date,
        project=project,
        created_at=now,
        updated_at=now,
        completed_at=now if TaskStatus.from_wire(status) == TaskStatus.DONE else None,
    )

    state.task_store.put(task)
    state.queue.enqueue(CreateOp(task=task))
    logger.info("Task created id=%s", task.id)
    _after_mutation(state)
    return task


def update_task(state: AppState, task_id: str, **fields: Any) -> Task | None:
    """
    Patch an existing task. Returns the new record, or None if the id is unknown
    locally (nothing is written or enqueued then).
    """
    updates: dict[str, Any] = {}
    for name, value in fields.items():
        wire = _EDITABLE_FIELDS.get(name)
        if wire is None:
            raise TypeError(f"update_task() got an unexpected field {name!r}")
        updates[wire] = value.value if isinstance(value, (Priority, TaskStatus)) else value

    existing = state.task_store.get(task_id)
    if existing is None:
        logger.warning("update_task: unknown id=%s", task_id)
        return None
    if not updates:
        return existing

    updated = existing.with_updates(updates).stamped(next_stamp(existing.updated_at))
    state.task_store.put(updated)
    state.queue.enqueue(UpdateOp(task_id=task_id, updates=updates))
    logger.debug("Task updated id=%s fields=%s", task_id, sorted(updates))
    _after_mutation(state)
    return updated


def set_status(state: AppState, task_id: str, status: TaskStatus | str) -> Task | None:
    new_status = TaskStatus.from_wire(status)
    completed_at = utc_now_iso() if new_status == TaskStatus.DONE else None
    return update_task(state, task_id, status=new_status, completed_at=completed_at)


def toggle_done(state: AppState, task_id: str) -> Task | None:
    """done <-> todo."""
    existing = state.task_store.get(task_id)
    if existing is None:
        return None
    new_status = TaskStatus.TODO if existing.status == TaskStatus.DONE else TaskStatus.DONE
    return set_status(state, task_id, new_status)


def delete_task(state: AppState, task_id: str) -> bool:
    """
    Remove locally and enqueue a delete. Until the delete reaches the remote,
    a pull that still returns this id will bring the task back.
    """
    if state.task_store.get(task_id) is None:
        return False
    state.task_store.remove(task_id)
    state.queue.enqueue(DeleteOp(task_id=task_id))
    logger.info("Task deleted id=%s", task_id)
    _after_mutation(state)
    return True


def _remove_where(state: AppState, predicate) -> int:
    tasks = state.task_store.list()
    doomed = [t for t in tasks if predicate(t)]
    if not doomed:
        return 0
    state.task_store.replace_all([t for t in tasks if not predicate(t)])
    for t in doomed:
        state.queue.enqueue(DeleteOp(task_id=t.id))
    _after_mutation(state)
    return len(doomed)


def clear_completed(state: AppState) -> int:
    n = _remove_where(state, lambda t: t.status == TaskStatus.DONE)
    logger.info("Cleared %d completed tasks", n)
    return n


def clear_all(state: AppState) -> int:
    n = _remove_where(state, lambda t: True)
    logger.info("Cleared all tasks (%d)", n)
    return n


def task_stats(state: AppState) -> dict[str, int]:
    tasks = state.task_store.list()
    return {
        "total": len(tasks),
        "todo": sum(1 for t in tasks if t.status == TaskStatus.TODO),
        "in_progress": sum(1 for t in tasks if t.status == TaskStatus.IN_PROGRESS),
        "done": sum(1 for t in tasks if t.status == TaskStatus.DONE),
    }


_SAMPLE_TASKS = (
    ("Plan sprint tasks", "Break down features and assign owners", Priority.HIGH, TaskStatus.TODO),
    ("Review PRs", "Look at open PRs and leave feedback", Priority.MEDIUM, TaskStatus.IN_PROGRESS),
    ("Write release notes", "Summarize changes for users", Priority.LOW, TaskStatus.TODO),
)


def add_sample_tasks(state: AppState) -> list[Task]:
    """Onboarding seed: three starter tasks in the inbox project, then mark onboarding done."""
    created = [
        add_task(state, title=title, description=desc, priority=prio, status=status, project="inbox")
        for title, desc, prio, status in _SAMPLE_TASKS
    ]
    state.prefs.mark_onboarded()
    return created


def rename_task(state: AppState, task_id: str, title: str) -> Task | None:
    if not title or not title.strip():
        raise ValueError("title is required")
    return update_task(state, task_id, title=title.strip())
