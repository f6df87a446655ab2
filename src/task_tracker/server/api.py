"""FastAPI application for the task tracker service."""

from __future__ import annotations

import time
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from ..config import TrackerConfig
from ..errors import TrackerError
from ..persistence import DatasetFile
from ..store import TaskStore
from .errors import to_http_exception
from .models import HealthResponse
from .task_api import create_task_router
from .user_api import create_user_router


def create_app(
    store: Optional[TaskStore] = None,
    config: Optional[TrackerConfig] = None,
    enable_cors: bool = False,
) -> FastAPI:
    """Create and configure FastAPI application.

    Args:
        store: Store shared by every request. Built from ``config`` when omitted.
        config: Service configuration; only ``data_file`` is used here.
        enable_cors: Whether to enable CORS.

    Returns:
        Configured FastAPI app.
    """
    if store is None:
        config = config or TrackerConfig()
        store = TaskStore(DatasetFile(config.data_file))

    app = FastAPI(
        title="Task Tracker",
        description="Users, their tasks and task status, persisted to a flat file",
        version="0.1.0",
    )

    if enable_cors:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    app.state.store = store

    def _get_store() -> TaskStore:
        return app.state.store

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info(
            "{} {} -> {} ({:.1f} ms)",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
        )
        return response

    @app.get("/health", response_model=HealthResponse)
    def health() -> HealthResponse:
        try:
            stats = _get_store().stats()
        except TrackerError as exc:
            raise to_http_exception(exc) from exc
        status = "degraded" if stats["last_persist_error"] else "ok"
        return HealthResponse(status=status, **stats)

    app.include_router(create_user_router(_get_store))
    app.include_router(create_task_router(_get_store))

    return app
