# src/tasksync/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The core depends on Protocols instead of concrete implementations.
This keeps persistence and transport swappable and makes testing easier.
"""

from typing import TYPE_CHECKING, Awaitable, Protocol, Sequence

if TYPE_CHECKING:
    from ..sync.operations import Operation
    from ..tasks.task_models import Task


class KeyValueBackend(Protocol):
    """
    Durable opaque slots.

    Each set() must be atomic: a concurrent get() sees either the old or the
    new value, never a partial write. Implementations may raise on I/O errors;
    callers decide how to degrade.
    """

    def get(self, key: str) -> str | None: ...
    def set(self, key: str, value: str) -> None: ...
    def remove(self, key: str) -> None: ...


class SyncTransport(Protocol):
    """
    Client-side port to the remote reconciliation service.

    Both calls return the service's full record set and raise
    TransportError on any failure (unreachable, non-2xx, malformed payload).
    """

    def fetch_tasks(self) -> Awaitable[list[Task]]: ...
    def push_operations(self, ops: Sequence[Operation]) -> Awaitable[list[Task]]: ...
