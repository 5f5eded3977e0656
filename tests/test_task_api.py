# tests/test_task_api.py

from __future__ import annotations

from dataclasses import replace

import pytest

from tasksync.core.state import AppState
from tasksync.sync.operations import CreateOp, DeleteOp, UpdateOp
from tasksync.tasks import task_api
from tasksync.tasks.task_models import Priority, TaskStatus, parse_timestamp


def test_add_task_writes_store_and_enqueues_create(state: AppState) -> None:
    task = task_api.add_task(state, title="  Buy milk  ", priority="high", project="personal")

    assert task.title == "Buy milk"
    assert task.priority == Priority.HIGH
    assert task.created_at == task.updated_at
    assert state.task_store.get(task.id) == task
    assert state.queue.snapshot() == [CreateOp(task=task)]


def test_add_task_requires_title(state: AppState) -> None:
    with pytest.raises(ValueError):
        task_api.add_task(state, title="   ")
    assert len(state.queue) == 0


def test_update_task_stamps_and_enqueues_partial_fields(state: AppState) -> None:
    task = task_api.add_task(state, title="Draft")

    updated = task_api.update_task(state, task.id, title="Final", priority=Priority.LOW)

    assert updated is not None
    assert updated.title == "Final"
    assert updated.priority == Priority.LOW
    assert updated.created_at == task.created_at
    assert parse_timestamp(updated.updated_at) >= parse_timestamp(task.updated_at)
    assert state.queue.snapshot()[-1] == UpdateOp(task_id=task.id, updates={"title": "Final", "priority": "low"})


def test_update_task_never_moves_updated_at_backwards(state: AppState) -> None:
    task = task_api.add_task(state, title="From the future")
    future = "2999-01-01T00:00:00.000Z"
    state.task_store.put(replace(task, updated_at=future))

    updated = task_api.update_task(state, task.id, title="still future")

    assert updated.updated_at == future


def test_update_task_rejects_non_editable_fields(state: AppState) -> None:
    task = task_api.add_task(state, title="x")
    with pytest.raises(TypeError):
        task_api.update_task(state, task.id, created_at="2000-01-01T00:00:00Z")


def test_update_unknown_task_returns_none_and_enqueues_nothing(state: AppState) -> None:
    assert task_api.update_task(state, "ghost", title="boo") is None
    assert len(state.queue) == 0


def test_toggle_done_sets_and_clears_completed_at(state: AppState) -> None:
    task = task_api.add_task(state, title="Ship it")

    done = task_api.toggle_done(state, task.id)
    assert done.status == TaskStatus.DONE
    assert done.completed_at is not None

    reopened = task_api.toggle_done(state, task.id)
    assert reopened.status == TaskStatus.TODO
    assert reopened.completed_at is None
    assert state.queue.snapshot()[-1] == UpdateOp(
        task_id=task.id, updates={"status": "todo", "completedAt": None}
    )


def test_delete_task_removes_locally_and_enqueues_delete(state: AppState) -> None:
    task = task_api.add_task(state, title="Temporary")

    assert task_api.delete_task(state, task.id) is True
    assert state.task_store.get(task.id) is None
    assert state.queue.snapshot()[-1] == DeleteOp(task_id=task.id)
    assert task_api.delete_task(state, task.id) is False


def test_clear_completed_only_removes_done_tasks(state: AppState) -> None:
    keep = task_api.add_task(state, title="keep")
    gone = task_api.add_task(state, title="gone", status="done")

    assert task_api.clear_completed(state) == 1

    assert [t.id for t in state.task_store.list()] == [keep.id]
    assert state.queue.snapshot()[-1] == DeleteOp(task_id=gone.id)


def test_clear_all_and_stats(state: AppState) -> None:
    task_api.add_task(state, title="a")
    b = task_api.add_task(state, title="b")
    task_api.set_status(state, b.id, TaskStatus.IN_PROGRESS)
    task_api.add_task(state, title="c", status=TaskStatus.DONE)

    assert task_api.task_stats(state) == {"total": 3, "todo": 1, "in_progress": 1, "done": 1}

    assert task_api.clear_all(state) == 3
    assert task_api.task_stats(state)["total"] == 0


def test_sample_tasks_mark_onboarding_done(state: AppState) -> None:
    assert not state.prefs.is_onboarded()

    created = task_api.add_sample_tasks(state)

    assert len(created) == 3
    assert state.prefs.is_onboarded()
    assert len(state.queue) == 3


def test_generate_id_is_unique() -> None:
    ids = {task_api.generate_id() for _ in range(500)}
    assert len(ids) == 500
