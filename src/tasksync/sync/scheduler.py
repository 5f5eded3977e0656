# src/tasksync/sync/scheduler.py

from __future__ import annotations

"""
Sync scheduler.

A small polling loop that runs one sync pass (flush, then pull) immediately
on startup and again every interval_seconds. Foreground and post-mutation
triggers go straight to the engine; the engine's single-flight guard keeps
them from overlapping with this loop.
"""

import asyncio
import logging

from .engine import SyncEngine, SyncTrigger

logger = logging.getLogger(__name__)


async def run_sync_scheduler(
        engine: SyncEngine,
        *,
        interval_seconds: float = 60.0,
        run_on_startup: bool = True,
) -> None:
    """
    Every interval_seconds:
    - flush queued operations (skipped without a request when the queue is empty)
    - pull and merge the remote snapshot
    Failures are logged by the engine and retried on the next tick; there is
    no backoff and no retry ceiling.

    To stop the scheduler, cancel the coroutine/task.
    """
    sleep_s = max(0.01, float(interval_seconds))
    trigger = SyncTrigger.STARTUP if run_on_startup else SyncTrigger.INTERVAL

    if not run_on_startup:
        await asyncio.sleep(sleep_s)

    while True:
        try:
            flushed, pulled = await engine.sync(trigger)
            logger.debug("Sync pass trigger=%s flush=%s pull=%s", trigger.value, flushed, pulled)
        except Exception:
            logger.exception("Sync pass crashed trigger=%s", trigger.value)

        trigger = SyncTrigger.INTERVAL
        await asyncio.sleep(sleep_s)
