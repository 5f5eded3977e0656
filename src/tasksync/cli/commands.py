# src/tasksync/cli/commands.py

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Callable
from typing import cast

from ..core.state import AppState
from ..sync.engine import SyncOutcome, SyncTrigger
from ..tasks import task_api
from ..tasks.task_models import Priority, Task, TaskStatus

CommandEmitter = Callable[[str], None]
CommandResult = str | Awaitable[str]
CommandHandler2 = Callable[[AppState, list[str]], CommandResult]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], CommandResult]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by the console front end (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    async def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        Handlers may be plain functions or coroutines.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except Exception:
            nparams = 3

        if nparams >= 3:
            result = cast(CommandHandler3, handler)(state, args, emit)
        else:
            result = cast(CommandHandler2, handler)(state, args)

        if inspect.isawaitable(result):
            result = await result
        return cast(str, result)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def _short(task_id: str) -> str:
    return task_id[:8]


def _format_task(t: Task) -> str:
    mark = {"todo": "[ ]", "in_progress": "[~]", "done": "[x]"}[t.status.value]
    extra = []
    if t.project:
        extra.append(f"#{t.project}")
    if t.due_date:
        extra.append(f"due {t.due_date}")
    tail = f"  ({', '.join(extra)})" if extra else ""
    return f"{mark} {_short(t.id)}  {t.priority.value:<6} {t.title}{tail}"


def _resolve_id(state: AppState, token: str) -> Task | str:
    """Find a task by id or unique id prefix. Returns the task or an error message."""
    matches = [t for t in state.task_store.list() if t.id.startswith(token)]
    if not matches:
        return f"No task matches '{token}'."
    if len(matches) > 1:
        return f"'{token}' is ambiguous ({len(matches)} tasks). Use more characters."
    return matches[0]


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_info(state: AppState, args: list[str]) -> str:
    s = state.settings
    return (
        "Status:\n"
        f"  Server: {getattr(s, 'server_url', '?')}\n"
        f"  Background sync: {'ON' if getattr(s, 'sync_enabled', False) else 'OFF'}"
        f" every {getattr(s, 'sync_interval_seconds', '?')}s\n"
        f"  Local tasks: {state.task_store.count()}\n"
        f"  Queued ops: {len(state.queue)}\n"
        f"  Onboarded: {'yes' if state.prefs.is_onboarded() else 'no'}"
    )


def cmd_list(state: AppState, args: list[str]) -> str:
    """
    /list              -> all tasks, newest first
    /list todo|in_progress|done
    """
    tasks = state.task_store.list()
    if args:
        wanted = args[0].lower()
        if wanted not in {s.value for s in TaskStatus}:
            return "Usage: /list [todo|in_progress|done]"
        tasks = [t for t in tasks if t.status.value == wanted]
    if not tasks:
        return "No tasks."
    return "\n".join(_format_task(t) for t in tasks)


def cmd_add(state: AppState, args: list[str]) -> str:
    """
    /add [!low|!medium|!high] [#project] title words...
    """
    priority = Priority.MEDIUM
    project: str | None = None
    words: list[str] = []
    for a in args:
        if a.startswith("!") and a[1:].lower() in {p.value for p in Priority}:
            priority = Priority(a[1:].lower())
        elif a.startswith("#") and len(a) > 1:
            project = a[1:]
        else:
            words.append(a)

    if not words:
        return "Usage: /add [!low|!medium|!high] [#project] title"
    task = task_api.add_task(state, title=" ".join(words), priority=priority, project=project)
    return f"Added {_short(task.id)}: {task.title}"


def cmd_done(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /done <id>"
    found = _resolve_id(state, args[0])
    if isinstance(found, str):
        return found
    updated = task_api.toggle_done(state, found.id)
    if updated is None:
        return f"Task {args[0]} disappeared."
    return f"{_short(updated.id)} is now {updated.status.value}."


def cmd_status(state: AppState, args: list[str]) -> str:
    if len(args) < 2 or args[1].lower() not in {s.value for s in TaskStatus}:
        return "Usage: /status <id> <todo|in_progress|done>"
    found = _resolve_id(state, args[0])
    if isinstance(found, str):
        return found
    task_api.set_status(state, found.id, args[1].lower())
    return f"{_short(found.id)} -> {args[1].lower()}"


def cmd_rename(state: AppState, args: list[str]) -> str:
    if len(args) < 2:
        return "Usage: /rename <id> <new title>"
    found = _resolve_id(state, args[0])
    if isinstance(found, str):
        return found
    task_api.rename_task(state, found.id, " ".join(args[1:]))
    return f"Renamed {_short(found.id)}."


def cmd_rm(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /rm <id>"
    found = _resolve_id(state, args[0])
    if isinstance(found, str):
        return found
    task_api.delete_task(state, found.id)
    return f"Deleted {_short(found.id)}."


def cmd_clear(state: AppState, args: list[str]) -> str:
    sub = args[0].lower() if args else ""
    if sub == "done":
        return f"Cleared {task_api.clear_completed(state)} completed tasks."
    if sub == "all":
        return f"Cleared {task_api.clear_all(state)} tasks."
    return "Usage: /clear done | /clear all"


def cmd_stats(state: AppState, args: list[str]) -> str:
    st = task_api.task_stats(state)
    return (
        f"Total: {st['total']}  To do: {st['todo']}  "
        f"In progress: {st['in_progress']}  Done: {st['done']}"
    )


def cmd_queue(state: AppState, args: list[str]) -> str:
    ops = state.queue.snapshot()
    if not ops:
        return "Sync queue is empty."
    lines = [f"{len(ops)} pending operation(s):"]
    for i, op in enumerate(ops, start=1):
        wire = op.to_wire()
        target = wire.get("taskId") or wire.get("task", {}).get("id", "?")
        lines.append(f"  {i}. {wire['type']} {_short(str(target))}")
    return "\n".join(lines)


async def cmd_sync(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if emit:
        emit("[SYNC] Flushing queue and pulling remote state...")
    flushed, pulled = await state.sync_engine.sync(SyncTrigger.MANUAL)
    if flushed == SyncOutcome.BUSY:
        return "A sync is already running; try again in a moment."
    return f"Flush: {flushed.value}. Pull: {pulled.value}. Queued ops left: {len(state.queue)}."


async def cmd_pull(state: AppState, args: list[str]) -> str:
    outcome = await state.sync_engine.pull()
    return f"Pull: {outcome.value}."


def cmd_projects(state: AppState, args: list[str]) -> str:
    return "\n".join(f"  {p.id:<10} {p.name} ({p.color})" for p in state.prefs.get_projects())


def cmd_onboard(state: AppState, args: list[str]) -> str:
    if state.prefs.is_onboarded():
        return "Already onboarded."
    created = task_api.add_sample_tasks(state)
    return f"Added {len(created)} sample tasks."


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("info", cmd_info, help_text="Show server, queue and sync settings.")
registry.register("list", cmd_list, help_text="List tasks: /list [todo|in_progress|done].", aliases=["ls"])
registry.register("add", cmd_add, help_text="Add a task: /add [!high] [#project] title.")
registry.register("done", cmd_done, help_text="Toggle done: /done <id>.")
registry.register("status", cmd_status, help_text="Set status: /status <id> <todo|in_progress|done>.")
registry.register("rename", cmd_rename, help_text="Rename: /rename <id> <title>.")
registry.register("rm", cmd_rm, help_text="Delete a task: /rm <id>.", aliases=["del"])
registry.register("clear", cmd_clear, help_text="Remove tasks: /clear done | /clear all.")
registry.register("stats", cmd_stats, help_text="Task counts by status.")
registry.register("queue", cmd_queue, help_text="Show pending sync operations.")
registry.register("sync", cmd_sync, help_text="Flush the queue and pull remote state now.")
registry.register("pull", cmd_pull, help_text="Pull remote state only.")
registry.register("projects", cmd_projects, help_text="List projects.")
registry.register("onboard", cmd_onboard, help_text="Add sample tasks (first run).")
