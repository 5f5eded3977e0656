# src/tasksync/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, then on one event loop:
- starts the background sync scheduler (startup pass + fixed interval),
- runs the console front end until /exit (or waits for Ctrl+C when disabled).
"""

from __future__ import annotations

import asyncio
import contextlib
import logging

from ..cli.bootstrap import create_initial_state
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..core.state import AppState
from ..logging_setup import quiet_http_loggers, setup_logging
from ..sync.scheduler import run_sync_scheduler

logger = logging.getLogger(__name__)


async def _shutdown(state: AppState) -> None:
    """Best-effort shutdown (no exceptions should escape)."""
    try:
        await state.sync_engine.wait_background()
    except Exception:
        logger.exception("Background flush failed during shutdown.")

    try:
        close = getattr(state.transport, "aclose", None)
        if close is not None:
            await close()
    except Exception:
        logger.debug("Transport close failed.", exc_info=True)


async def _run(state: AppState) -> None:
    settings = state.settings
    scheduler: asyncio.Task[None] | None = None

    if getattr(settings, "sync_enabled", True):
        scheduler = asyncio.create_task(
            run_sync_scheduler(
                state.sync_engine,
                interval_seconds=getattr(settings, "sync_interval_seconds", 60.0),
            )
        )

    try:
        if getattr(settings, "console_enabled", True):
            await run_console_loop(state)
        else:
            logger.info("Console disabled. Running background sync only. Press Ctrl+C to stop.")
            await asyncio.Event().wait()
    finally:
        if scheduler is not None:
            scheduler.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await scheduler
        await _shutdown(state)


def main() -> None:
    settings = get_settings()

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)

    setup_logging(log_dir=settings.data_dir, console_level=console_level)
    quiet_http_loggers()

    logger.info("Starting %s...", settings.app_name)

    state = create_initial_state(settings=settings)

    try:
        asyncio.run(_run(state))
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down...")
    logger.info("Bye.")


if __name__ == "__main__":
    main()
