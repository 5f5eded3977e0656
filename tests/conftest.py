# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from tasksync.cli.bootstrap import create_initial_state
from tasksync.core.state import AppState
from tasksync.storage.kv import MemoryKeyValueStore

from .fakes import FakeTransport

T0 = "2024-01-01T10:00:00.000Z"
T1 = "2024-01-01T11:00:00.000Z"
T2 = "2024-01-01T12:00:00.000Z"


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the CLI.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="tasksync-test",
        log_level="DEBUG",
        data_dir=tmp_path,
        db_path=tmp_path / "tasksync.sqlite3",
        server_url="http://sync.test",
        sync_enabled=False,
        sync_interval_seconds=60.0,
        console_enabled=False,
    )


@pytest.fixture()
def backend() -> MemoryKeyValueStore:
    return MemoryKeyValueStore()


@pytest.fixture()
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture()
def state(settings: SimpleNamespace, backend: MemoryKeyValueStore, transport: FakeTransport) -> AppState:
    """
    AppState wired with an in-memory backend and an in-process remote.

    The store, queue and engine are the real ones; only I/O is faked.
    """
    return create_initial_state(settings=settings, backend=backend, transport=transport)
