# src/tasksync/tasks/task_store.py

from __future__ import annotations

import json
import logging
from collections.abc import Iterable

from ..core.ports import KeyValueBackend
from ..storage.keys import TASKS_KEY
from .task_models import Task, sort_newest_first

logger = logging.getLogger(__name__)


class LocalTaskStore:
    """
    Offline task collection persisted as one JSON blob in a key/value slot.

    Every write replaces the whole blob, so readers never observe a
    partially-written collection.

    Fail-open:
    - read errors are logged and yield an empty collection
    - write errors are logged and the write is dropped
    Nothing here raises to the caller; UI availability comes first.
    """

    def __init__(self, backend: KeyValueBackend, *, key: str = TASKS_KEY) -> None:
        self._backend = backend
        self._key = key

    # ---- low-level helpers ----

    def _read(self) -> list[Task]:
        try:
            raw = self._backend.get(self._key)
        except Exception:
            logger.exception("Failed to read task collection key=%s", self._key)
            return []
        if not raw:
            return []
        try:
            data = json.loads(raw)
        except ValueError:
            logger.exception("Task collection is not valid JSON key=%s; treating as empty", self._key)
            return []
        if not isinstance(data, list):
            logger.warning("Task collection is not a list key=%s; treating as empty", self._key)
            return []

        out: list[Task] = []
        for item in data:
            try:
                out.append(Task.from_dict(item))
            except ValueError as e:
                logger.warning("Skipping undecodable stored task: %s", e)
        return out

    def _write(self, tasks: Iterable[Task]) -> None:
        ordered = sort_newest_first(list(tasks))
        try:
            payload = json.dumps([t.to_dict() for t in ordered], ensure_ascii=False)
            self._backend.set(self._key, payload)
        except Exception:
            logger.exception("Failed to write task collection key=%s", self._key)
            return
        logger.debug("Task collection saved count=%d", len(ordered))

    # ---- public API ----

    def list(self) -> list[Task]:
        """All tasks, newest-updated first."""
        return sort_newest_first(self._read())

    def get(self, task_id: str) -> Task | None:
        for t in self._read():
            if t.id == task_id:
                return t
        return None

    def put(self, task: Task) -> None:
        """Insert or replace by id."""
        tasks = [t for t in self._read() if t.id != task.id]
        tasks.append(task)
        self._write(tasks)

    def remove(self, task_id: str) -> None:
        tasks = self._read()
        kept = [t for t in tasks if t.id != task_id]
        if len(kept) == len(tasks):
            return
        self._write(kept)

    def replace_all(self, tasks: Iterable[Task]) -> None:
        """Overwrite the whole collection in a single blob write."""
        self._write(tasks)

    def count(self) -> int:
        return len(self._read())
