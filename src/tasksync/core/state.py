# src/tasksync/core/state.py

from __future__ import annotations

from dataclasses import dataclass

from ..storage.prefs import PreferencesStore
from ..sync.engine import SyncEngine
from ..sync.queue import OperationQueue
from ..tasks.task_store import LocalTaskStore
from .ports import KeyValueBackend, SyncTransport


@dataclass
class AppState:
    """
    Everything a front end needs, built once by the composition root
    (cli.bootstrap) and passed by reference. There are no module-level
    store or queue singletons.
    """

    settings: object

    backend: KeyValueBackend
    task_store: LocalTaskStore
    queue: OperationQueue
    prefs: PreferencesStore
    transport: SyncTransport
    sync_engine: SyncEngine
