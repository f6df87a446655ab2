"""Pydantic models for API requests and responses."""

from __future__ import annotations

from datetime import date
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from ..models import Status, Task


class NewUserRequest(BaseModel):
    name: str


class DeleteUserRequest(BaseModel):
    id: UUID


class DeleteUserResponse(BaseModel):
    status: str = "deleted"
    id: UUID


class NewTaskRequest(BaseModel):
    """Task creation body. ``status`` is accepted but new tasks always start as ``ToDo``."""

    title: str
    description: str
    due_date: date
    status: Optional[Status] = None


class TaskIdRequest(BaseModel):
    id: UUID


class UpdateTaskRequest(BaseModel):
    id: UUID
    status: Status


class TaskInfo(BaseModel):
    """Task snapshot as returned to clients."""

    id: UUID
    title: str
    description: str
    due_date: date
    status: Status

    @classmethod
    def from_task(cls, task: Task) -> "TaskInfo":
        return cls(
            id=task.id,
            title=task.title,
            description=task.description,
            due_date=task.due_date,
            status=task.status,
        )


class TaskListResponse(BaseModel):
    tasks: list[TaskInfo] = Field(default_factory=list)


class HealthResponse(BaseModel):
    status: str
    users: int
    tasks: int
    persist_failures: int
    last_persist_error: Optional[str] = None
