# src/tasksync/sync/queue.py

from __future__ import annotations

import json
import logging
from typing import Any

from ..core.ports import KeyValueBackend
from ..storage.keys import SYNC_QUEUE_KEY
from .operations import Operation, operation_from_wire

logger = logging.getLogger(__name__)


class OperationQueue:
    """
    Durable FIFO of pending operations, stored as one JSON array.

    The queue is append-only until clear(), which empties it entirely.
    clear() does not know which entries a flush actually sent: anything
    enqueued between the flush snapshot and clear() is dropped as well.
    """

    def __init__(self, backend: KeyValueBackend, *, key: str = SYNC_QUEUE_KEY) -> None:
        self._backend = backend
        self._key = key

    def _read_raw(self) -> list[Any]:
        try:
            raw = self._backend.get(self._key)
        except Exception:
            logger.exception("Failed to read sync queue key=%s", self._key)
            return []
        if not raw:
            return []
        try:
            data = json.loads(raw)
        except ValueError:
            logger.exception("Sync queue is not valid JSON key=%s; treating as empty", self._key)
            return []
        return data if isinstance(data, list) else []

    def enqueue(self, op: Operation) -> None:
        """Append and persist before returning."""
        items = self._read_raw()
        items.append(op.to_wire())
        try:
            self._backend.set(self._key, json.dumps(items, ensure_ascii=False))
        except Exception:
            logger.exception("Failed to persist sync queue key=%s", self._key)
            return
        logger.debug("Enqueued %s op; queue length=%d", type(op).__name__, len(items))

    def snapshot(self) -> list[Operation]:
        """The full ordered queue; nothing is removed."""
        out: list[Operation] = []
        for item in self._read_raw():
            try:
                out.append(operation_from_wire(item))
            except ValueError as e:
                logger.warning("Skipping undecodable queued operation: %s", e)
        return out

    def clear(self) -> None:
        try:
            self._backend.remove(self._key)
        except Exception:
            logger.exception("Failed to clear sync queue key=%s", self._key)

    def __len__(self) -> int:
        return len(self._read_raw())
