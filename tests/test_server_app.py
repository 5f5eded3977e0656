# tests/test_server_app.py

from __future__ import annotations

import inspect

import pytest
from fastapi.routing import APIRoute
from fastapi.testclient import TestClient

from tasksync.server.app import create_app
from tasksync.server.service import ReconciliationService

NOW = "2024-06-01T00:00:00.000Z"


@pytest.fixture()
def client() -> TestClient:
    return TestClient(create_app(ReconciliationService(clock=lambda: NOW)))


def test_health(client: TestClient) -> None:
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "healthy"}


def test_empty_remote_has_no_tasks(client: TestClient) -> None:
    r = client.get("/api/tasks")
    assert r.status_code == 200
    assert r.json() == {"tasks": []}


def test_sync_applies_ops_and_returns_full_snapshot(client: TestClient) -> None:
    client.post("/api/sync", json={"ops": [{"type": "create", "task": {"id": "a", "title": "first"}}]})

    r = client.post(
        "/api/sync",
        json={
            "ops": [
                {"type": "create", "task": {"id": "b", "title": "second"}},
                {"type": "update", "taskId": "a", "updates": {"status": "done"}},
            ]
        },
    )

    assert r.status_code == 200
    tasks = {t["id"]: t for t in r.json()["tasks"]}
    assert set(tasks) == {"a", "b"}
    assert tasks["a"]["status"] == "done"
    assert tasks["a"]["updatedAt"] == NOW
    assert client.get("/api/tasks").json()["tasks"] == r.json()["tasks"]


def test_malformed_op_does_not_fail_the_request(client: TestClient) -> None:
    r = client.post(
        "/api/sync",
        json={"ops": [42, {"type": "create", "task": {"id": "ok", "title": "survives"}}]},
    )

    assert r.status_code == 200
    assert [t["id"] for t in r.json()["tasks"]] == ["ok"]


@pytest.mark.parametrize("body", [{}, {"ops": "nope"}, {"ops": None}])
def test_missing_or_non_list_ops_is_an_empty_batch(client: TestClient, body) -> None:
    r = client.post("/api/sync", json=body)
    assert r.status_code == 200
    assert r.json() == {"tasks": []}


def test_handlers_run_in_threadpool() -> None:
    # apply_batch blocks on SQLite and a lock; keep it off the event loop.
    app = create_app(ReconciliationService())
    endpoints = {r.path: r.endpoint for r in app.routes if isinstance(r, APIRoute)}

    for path in ("/health", "/api/tasks", "/api/sync"):
        assert not inspect.iscoroutinefunction(endpoints[path])
