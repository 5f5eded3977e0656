# src/tasksync/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires one key/value backend, store, queue, transport and sync engine into AppState.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.ports import KeyValueBackend, SyncTransport
from ..core.state import AppState
from ..storage.kv import SQLiteKeyValueStore
from ..storage.prefs import PreferencesStore
from ..sync.engine import SyncEngine
from ..sync.queue import OperationQueue
from ..sync.transport import HttpSyncTransport
from ..tasks.task_store import LocalTaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.db_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(
    *,
    settings=None,
    backend: KeyValueBackend | None = None,
    transport: SyncTransport | None = None,
) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings, backend and transport injectable makes the app easier to test
    and avoids hidden global state. If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    if backend is None:
        _ensure_local_dirs(settings)
        backend = SQLiteKeyValueStore(settings.db_path)

    if transport is None:
        transport = HttpSyncTransport(settings.server_url)

    task_store = LocalTaskStore(backend)
    queue = OperationQueue(backend)

    state = AppState(
        settings=settings,
        backend=backend,
        task_store=task_store,
        queue=queue,
        prefs=PreferencesStore(backend),
        transport=transport,
        sync_engine=SyncEngine(task_store, queue, transport),
    )
    logger.info("State ready tasks=%d queued_ops=%d", task_store.count(), len(queue))
    return state
