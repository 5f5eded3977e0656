# src/tasksync/server/app.py

"""
HTTP surface of the reconciliation service.

GET  /health     -> {"status": "healthy"}
GET  /api/tasks  -> {"tasks": [...]}
POST /api/sync   {"ops": [...]} -> {"tasks": [...]}
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI
from pydantic import BaseModel, Field, field_validator

from ..config import Settings, get_settings
from ..logging_setup import quiet_http_loggers, setup_logging
from ..storage.kv import SQLiteKeyValueStore
from .service import ReconciliationService

logger = logging.getLogger(__name__)


class SyncRequest(BaseModel):
    # Items stay untyped: one malformed op must not reject the whole batch.
    ops: list[Any] = Field(default_factory=list)

    @field_validator("ops", mode="before")
    @classmethod
    def _non_list_is_empty(cls, v: Any) -> Any:
        return v if isinstance(v, list) else []


class TasksResponse(BaseModel):
    tasks: list[dict[str, Any]]


def create_app(service: ReconciliationService | None = None) -> FastAPI:
    service = service or ReconciliationService()
    app = FastAPI(title="tasksync")
    app.state.service = service

    @app.get("/health")
    def health():
        return {"status": "healthy"}

    @app.get("/api/tasks", response_model=TasksResponse)
    def list_tasks() -> TasksResponse:
        return TasksResponse(tasks=[t.to_dict() for t in service.snapshot()])

    @app.post("/api/sync", response_model=TasksResponse)
    def sync(body: SyncRequest | None = None) -> TasksResponse:
        ops = body.ops if body is not None else []
        snapshot = service.apply_batch(ops)
        return TasksResponse(tasks=[t.to_dict() for t in snapshot])

    return app


def build_service(settings: Settings) -> ReconciliationService:
    if settings.server_db_path is None:
        logger.info("Remote store is in-memory (set TASKSYNC_SERVER_DB_PATH for durability)")
        return ReconciliationService()
    return ReconciliationService(SQLiteKeyValueStore(settings.server_db_path))


def main() -> None:
    import uvicorn

    settings = get_settings()
    level_name = str(settings.log_level).upper()
    console_level = getattr(logging, level_name, logging.INFO)
    setup_logging(log_dir=settings.data_dir, log_name="server.log", console_level=console_level)
    quiet_http_loggers()

    app = create_app(build_service(settings))
    logger.info("Starting reconciliation server on %s:%s", settings.server_host, settings.server_port)
    uvicorn.run(app, host=settings.server_host, port=settings.server_port, log_config=None)


if __name__ == "__main__":
    main()
