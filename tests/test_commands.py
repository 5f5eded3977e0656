# tests/test_commands.py

from __future__ import annotations

import pytest

from tasksync.cli.commands import CommandRegistry, registry
from tasksync.core.state import AppState
from tasksync.tasks.task_models import Priority, TaskStatus

from .fakes import FakeTransport


@pytest.mark.asyncio
async def test_command_registry_routes_sync_async_and_emit_handlers(state) -> None:
    reg = CommandRegistry()
    called = {"h2": 0, "h3": 0}
    notes: list[str] = []

    def h2(state, args):
        called["h2"] += 1
        return "h2"

    async def h3(state, args, emit):
        called["h3"] += 1
        if emit is not None:
            emit("note")
        return "h3"

    reg.register("a", h2, "a")
    reg.register("b", h3, "b", aliases=["bee"])

    assert await reg.handle(state, "/a x") == "h2"
    assert await reg.handle(state, "/bee y", emit=notes.append) == "h3"
    assert called == {"h2": 1, "h3": 1}
    assert notes == ["note"]


@pytest.mark.asyncio
async def test_command_registry_unknown_and_non_command(state) -> None:
    reg = CommandRegistry()
    assert await reg.handle(state, "hello") is None
    assert "Unknown command" in (await reg.handle(state, "/nope") or "")
    assert "Empty command" in (await reg.handle(state, "/") or "")


async def _run(state: AppState, line: str) -> str:
    return await registry.handle(state, line) or ""


@pytest.mark.asyncio
async def test_add_list_done_rm_flow(state: AppState, transport: FakeTransport) -> None:
    reply = await _run(state, "/add !high #work Fix the build")
    assert reply.startswith("Added ")

    (task,) = state.task_store.list()
    assert task.title == "Fix the build"
    assert task.priority == Priority.HIGH
    assert task.project == "work"

    assert "Fix the build" in await _run(state, "/list")
    assert await _run(state, "/list done") == "No tasks."

    await _run(state, f"/done {task.id[:6]}")
    assert state.task_store.get(task.id).status == TaskStatus.DONE

    await _run(state, f"/rm {task.id}")
    assert state.task_store.list() == []
    assert "3 pending" in await _run(state, "/queue")

    await state.sync_engine.wait_background()
    assert await _run(state, "/queue") == "Sync queue is empty."
    assert transport.service.snapshot() == []


@pytest.mark.asyncio
async def test_bad_usage_messages(state: AppState) -> None:
    assert (await _run(state, "/add")).startswith("Usage")
    assert (await _run(state, "/list blocked")).startswith("Usage")
    assert (await _run(state, "/status abc")).startswith("Usage")
    assert (await _run(state, "/done nope")).startswith("No task matches")
    assert (await _run(state, "/clear everything")).startswith("Usage")


@pytest.mark.asyncio
async def test_sync_command_reports_outcomes(state: AppState, transport: FakeTransport) -> None:
    await registry.handle(state, "/add Sync me")
    await state.sync_engine.wait_background()
    transport.fail = True
    await registry.handle(state, "/add Still offline")
    await state.sync_engine.wait_background()

    reply = await registry.handle(state, "/sync")
    assert reply == "Flush: failed. Pull: failed. Queued ops left: 1."

    transport.fail = False
    reply = await registry.handle(state, "/sync")
    assert reply == "Flush: ok. Pull: ok. Queued ops left: 0."
    assert len(transport.service.snapshot()) == 2


@pytest.mark.asyncio
async def test_stats_projects_onboard(state: AppState) -> None:
    assert "Total: 0" in await _run(state, "/stats")
    assert "Inbox" in await _run(state, "/projects")
    assert await _run(state, "/onboard") == "Added 3 sample tasks."
    assert await _run(state, "/onboard") == "Already onboarded."
    assert "Total: 3" in await _run(state, "/stats")
    await state.sync_engine.wait_background()
