# src/tasksync/sync/merge.py

from __future__ import annotations

from collections.abc import Iterable

from ..tasks.task_models import Task, sort_newest_first


def merge_tasks(local: Iterable[Task], remote: Iterable[Task]) -> list[Task]:
    """
    Whole-record last-writer-wins merge of local and remote task sets.

    - id only local  -> local record (not acknowledged by the remote yet)
    - id only remote -> remote record
    - id in both     -> greater updated_at wins; remote wins ties

    A missing updated_at compares as the earliest instant. There are no
    tombstones: a local delete that has not reached the remote yet comes back
    if the remote snapshot still has the id.

    Result is ordered newest-updated first.
    """
    merged: dict[str, Task] = {t.id: t for t in local}

    for r in remote:
        existing = merged.get(r.id)
        if existing is None or r.updated_key >= existing.updated_key:
            merged[r.id] = r

    return sort_newest_first(list(merged.values()))
