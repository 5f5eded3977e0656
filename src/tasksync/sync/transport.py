# src/tasksync/sync/transport.py

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

import httpx

from ..tasks.task_models import Task
from .operations import Operation

logger = logging.getLogger(__name__)


class TransportError(RuntimeError):
    """The remote could not be reached, answered non-2xx, or sent a malformed payload."""


def _decode_snapshot(payload: Any) -> list[Task]:
    if not isinstance(payload, dict) or not isinstance(payload.get("tasks"), list):
        raise TransportError("response has no tasks array")

    out: list[Task] = []
    for item in payload["tasks"]:
        try:
            out.append(Task.from_dict(item))
        except ValueError as e:
            logger.warning("Skipping undecodable remote task: %s", e)
    return out


class HttpSyncTransport:
    """
    JSON-over-HTTP client for the reconciliation service.

    - GET  /api/tasks -> {"tasks": [...]}
    - POST /api/sync  {"ops": [...]} -> {"tasks": [...]}

    Uses the httpx default timeout; there is no extra per-request deadline.
    """

    def __init__(self, base_url: str, *, client: httpx.AsyncClient | None = None) -> None:
        self.base_url = base_url.rstrip("/")
        self._client = client or httpx.AsyncClient()
        self._owns_client = client is None

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def _request(self, method: str, path: str, **kwargs: Any) -> list[Task]:
        url = f"{self.base_url}{path}"
        try:
            r = await self._client.request(method, url, **kwargs)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise TransportError(f"{method} {path} failed: {e}") from e

        if not r.is_success:
            raise TransportError(f"{method} {path} returned {r.status_code}")

        try:
            payload = r.json()
        except ValueError as e:
            raise TransportError(f"{method} {path} returned invalid JSON") from e

        return _decode_snapshot(payload)

    async def fetch_tasks(self) -> list[Task]:
        return await self._request("GET", "/api/tasks")

    async def push_operations(self, ops: Sequence[Operation]) -> list[Task]:
        body = {"ops": [op.to_wire() for op in ops]}
        return await self._request("POST", "/api/sync", json=body)
