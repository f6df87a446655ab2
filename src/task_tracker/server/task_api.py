"""Task endpoints for a single user, mounted under ``/users/{user_id}/tasks``.

Handlers are plain functions: FastAPI runs them in its thread pool, so a
request waiting on the store lock never blocks the event loop.
"""

from __future__ import annotations

from typing import Callable
from uuid import UUID

from fastapi import APIRouter

from ..errors import TrackerError
from ..store import TaskStore
from .errors import to_http_exception
from .models import NewTaskRequest, TaskIdRequest, TaskInfo, TaskListResponse, UpdateTaskRequest


def create_task_router(get_store: Callable[[], TaskStore]) -> APIRouter:
    """Create the task API router.

    Parameters
    ----------
    get_store:
        A callable returning the :class:`TaskStore` shared by the application.
    """
    router = APIRouter(prefix="/users/{user_id}/tasks", tags=["tasks"])

    @router.post("/create", response_model=UUID)
    def create_task(user_id: UUID, body: NewTaskRequest) -> UUID:
        try:
            return get_store().create_task(user_id, body.title, body.description, body.due_date)
        except TrackerError as exc:
            raise to_http_exception(exc) from exc

    @router.get("/list", response_model=TaskListResponse)
    def list_tasks(user_id: UUID) -> TaskListResponse:
        try:
            tasks = get_store().list_tasks(user_id)
        except TrackerError as exc:
            raise to_http_exception(exc) from exc
        return TaskListResponse(tasks=[TaskInfo.from_task(t) for t in tasks])

    @router.get("/get-task", response_model=TaskInfo)
    def get_task(user_id: UUID, body: TaskIdRequest) -> TaskInfo:
        try:
            task = get_store().get_task(user_id, body.id)
        except TrackerError as exc:
            raise to_http_exception(exc) from exc
        return TaskInfo.from_task(task)

    @router.put("/update", response_model=UUID)
    def update_task(user_id: UUID, body: UpdateTaskRequest) -> UUID:
        try:
            return get_store().update_task_status(user_id, body.id, body.status)
        except TrackerError as exc:
            raise to_http_exception(exc) from exc

    @router.delete("/delete", response_model=UUID)
    def delete_task(user_id: UUID, body: TaskIdRequest) -> UUID:
        try:
            return get_store().delete_task(user_id, body.id)
        except TrackerError as exc:
            raise to_http_exception(exc) from exc

    return router
