# src/tasksync/sync/engine.py

from __future__ import annotations

"""
Sync engine.

Flush:
- snapshot the queue (empty -> no network call),
- push it as one batch,
- on failure: log, leave queue and local store untouched (next trigger retries),
- on success: merge the returned snapshot with freshly re-read local state,
  write the result, clear the queue.

Pull: fetch the remote snapshot and merge it the same way.

At most one flush/pull runs at a time. Triggers that arrive while one is in
flight are dropped with a log line and report BUSY.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from enum import StrEnum

from ..core.ports import SyncTransport
from ..tasks.task_models import Task
from ..tasks.task_store import LocalTaskStore
from .merge import merge_tasks
from .queue import OperationQueue
from .transport import TransportError

logger = logging.getLogger(__name__)


class SyncOutcome(StrEnum):
    OK = "ok"
    EMPTY = "empty"  # nothing queued, no request sent
    FAILED = "failed"
    BUSY = "busy"  # another flush/pull was in flight


class SyncTrigger(StrEnum):
    STARTUP = "startup"
    INTERVAL = "interval"
    FOREGROUND = "foreground"
    MUTATION = "mutation"
    MANUAL = "manual"


class SyncEngine:
    def __init__(
        self,
        store: LocalTaskStore,
        queue: OperationQueue,
        transport: SyncTransport,
    ) -> None:
        self._store = store
        self._queue = queue
        self._transport = transport
        self._in_flight = False
        self._background: set[asyncio.Task[SyncOutcome]] = set()

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    async def _single_flight(
        self, name: str, run: Callable[[], Awaitable[SyncOutcome]]
    ) -> SyncOutcome:
        # No await between the check and the set: atomic on one event loop.
        if self._in_flight:
            logger.info("%s skipped: another sync is in flight", name)
            return SyncOutcome.BUSY
        self._in_flight = True
        try:
            return await run()
        finally:
            self._in_flight = False

    def _merge_into_store(self, remote: list[Task]) -> None:
        # Re-read: local state may have changed during the round trip.
        local = self._store.list()
        merged = merge_tasks(local, remote)
        self._store.replace_all(merged)
        logger.debug("Merged local=%d remote=%d -> %d", len(local), len(remote), len(merged))

    async def _flush(self) -> SyncOutcome:
        ops = self._queue.snapshot()
        if not ops:
            return SyncOutcome.EMPTY

        try:
            remote = await self._transport.push_operations(ops)
        except TransportError as e:
            logger.warning("Flush of %d ops failed, will retry on next trigger: %s", len(ops), e)
            return SyncOutcome.FAILED

        self._merge_into_store(remote)
        self._queue.clear()
        logger.info("Flushed %d ops; remote has %d tasks", len(ops), len(remote))
        return SyncOutcome.OK

    async def _pull(self) -> SyncOutcome:
        try:
            remote = await self._transport.fetch_tasks()
        except TransportError as e:
            logger.warning("Pull failed, will retry on next trigger: %s", e)
            return SyncOutcome.FAILED

        self._merge_into_store(remote)
        logger.info("Pulled %d remote tasks", len(remote))
        return SyncOutcome.OK

    # ---- public API ----

    async def flush(self) -> SyncOutcome:
        """Send queued operations and merge the authoritative snapshot."""
        return await self._single_flight("flush", self._flush)

    async def pull(self) -> SyncOutcome:
        """Fetch the remote snapshot with no outgoing queue and merge it."""
        return await self._single_flight("pull", self._pull)

    async def sync(self, trigger: SyncTrigger = SyncTrigger.MANUAL) -> tuple[SyncOutcome, SyncOutcome]:
        """
        Flush then pull, as one single-flight pass.

        Returns (flush_outcome, pull_outcome); both are BUSY when skipped.
        """

        async def _both() -> SyncOutcome:
            nonlocal results
            flushed = await self._flush()
            pulled = await self._pull()
            results = (flushed, pulled)
            return pulled

        results = (SyncOutcome.BUSY, SyncOutcome.BUSY)
        logger.debug("Sync pass requested trigger=%s", trigger.value)
        await self._single_flight(f"sync ({trigger.value})", _both)
        return results

    async def on_startup(self) -> tuple[SyncOutcome, SyncOutcome]:
        return await self.sync(SyncTrigger.STARTUP)

    async def on_foreground(self) -> tuple[SyncOutcome, SyncOutcome]:
        """Hook for the presentation layer when the app becomes active again."""
        return await self.sync(SyncTrigger.FOREGROUND)

    def request_flush(self) -> asyncio.Task[SyncOutcome] | None:
        """
        Post-mutation trigger: schedule a flush in the background.

        Without a running event loop the queue just waits for the next trigger.
        """
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("No running loop; flush deferred to next trigger")
            return None

        task = loop.create_task(self.flush())
        # Keep a reference until done so the task is not garbage-collected mid-flight.
        self._background.add(task)
        task.add_done_callback(self._background.discard)
        return task

    async def wait_background(self) -> None:
        """Wait for flushes started by request_flush (used at shutdown and in tests)."""
        if self._background:
            await asyncio.gather(*list(self._background), return_exceptions=True)
