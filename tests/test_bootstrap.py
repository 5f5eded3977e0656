# tests/test_bootstrap.py

from __future__ import annotations

from types import SimpleNamespace

from tasksync.cli.bootstrap import create_initial_state
from tasksync.storage.kv import SQLiteKeyValueStore
from tasksync.sync.transport import HttpSyncTransport
from tasksync.tasks import task_api


def test_default_wiring_uses_sqlite_and_http(settings: SimpleNamespace) -> None:
    settings.data_dir = settings.data_dir / "nested"
    settings.db_path = settings.data_dir / "kv.sqlite3"

    state = create_initial_state(settings=settings)

    assert isinstance(state.backend, SQLiteKeyValueStore)
    assert isinstance(state.transport, HttpSyncTransport)
    assert settings.db_path.parent.is_dir()


def test_queue_and_tasks_survive_restart(settings: SimpleNamespace) -> None:
    first = create_initial_state(settings=settings)
    task = task_api.add_task(first, title="Offline edit")

    second = create_initial_state(settings=settings)

    assert second.task_store.get(task.id) == task
    assert len(second.queue) == 1
