# src/tasksync/server/service.py

from __future__ import annotations

import json
import logging
import threading
from collections.abc import Callable, Iterable
from typing import Any

from ..core.ports import KeyValueBackend
from ..storage.keys import REMOTE_TASKS_KEY
from ..sync.operations import CreateOp, DeleteOp, Operation, UpdateOp, operation_from_wire
from ..tasks.task_models import Task, next_stamp, utc_now_iso

logger = logging.getLogger(__name__)


class ReconciliationService:
    """
    Authoritative task store behind /api/sync.

    Records live in memory for the lifetime of the service. When a key/value
    backend is injected, the record set is loaded from it on start and saved
    after every batch.
    """

    def __init__(
        self,
        backend: KeyValueBackend | None = None,
        *,
        clock: Callable[[], str] = utc_now_iso,
    ) -> None:
        self._backend = backend
        self._clock = clock
        self._tasks: dict[str, Task] = {}
        self._lock = threading.Lock()
        self._load()

    def _load(self) -> None:
        if self._backend is None:
            return
        try:
            raw = self._backend.get(REMOTE_TASKS_KEY)
            data = json.loads(raw) if raw else []
        except Exception:
            logger.exception("Failed to load persisted remote tasks; starting empty")
            return
        if not isinstance(data, list):
            logger.error("Persisted remote tasks are not a list; starting empty")
            return
        for item in data:
            try:
                task = Task.from_dict(item)
            except ValueError as e:
                logger.warning("Skipping undecodable persisted remote task: %s", e)
                continue
            self._tasks[task.id] = task
        logger.info("Loaded %d remote tasks", len(self._tasks))

    def _save(self) -> None:
        if self._backend is None:
            return
        payload = json.dumps([t.to_dict() for t in self._tasks.values()], ensure_ascii=False)
        self._backend.set(REMOTE_TASKS_KEY, payload)

    # ---- public API ----

    def apply(self, op: Operation) -> None:
        """Apply one decoded operation. Not locked; use apply_batch from request handlers."""
        if isinstance(op, CreateOp):
            now = self._clock()
            task = op.task
            if not task.created_at or not task.updated_at:
                task = Task.from_dict(
                    {"createdAt": now, "updatedAt": now, **task.to_dict()}
                )
            self._tasks[task.id] = task

        elif isinstance(op, UpdateOp):
            existing = self._tasks.get(op.task_id)
            if existing is None:
                logger.debug("Update for unknown id=%s ignored", op.task_id)
                return
            self._tasks[existing.id] = existing.with_updates(dict(op.updates)).stamped(
                next_stamp(existing.updated_at, self._clock())
            )

        elif isinstance(op, DeleteOp):
            self._tasks.pop(op.task_id, None)

        else:
            raise ValueError(f"unsupported operation: {op!r}")

    def apply_batch(self, raw_ops: Iterable[Any]) -> list[Task]:
        """
        Decode and apply wire operations in submission order, then return the
        full snapshot. A malformed operation is logged and skipped; it never
        aborts the rest of the batch.
        """
        applied = skipped = 0
        with self._lock:
            for raw in raw_ops:
                try:
                    self.apply(operation_from_wire(raw))
                    applied += 1
                except (ValueError, TypeError, KeyError) as e:
                    skipped += 1
                    logger.warning("sync op failed, skipping: %s", e)
            self._save()
            snapshot = list(self._tasks.values())
        logger.info("Applied batch applied=%d skipped=%d total=%d", applied, skipped, len(snapshot))
        return snapshot

    def snapshot(self) -> list[Task]:
        with self._lock:
            return list(self._tasks.values())
