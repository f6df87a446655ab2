"""Provide the public `task_tracker` package exports."""

from __future__ import annotations

from .errors import (
    DuplicateId,
    LockAcquisitionFailed,
    MalformedPersistedData,
    NotFound,
    PersistenceFailed,
    TaskNotFound,
    TrackerError,
    UserNotFound,
)
from .models import Dataset, Status, Task, User
from .persistence import DatasetFile
from .store import TaskStore

__all__ = [
    "DuplicateId",
    "Dataset",
    "DatasetFile",
    "LockAcquisitionFailed",
    "MalformedPersistedData",
    "NotFound",
    "PersistenceFailed",
    "Status",
    "Task",
    "TaskNotFound",
    "TaskStore",
    "TrackerError",
    "User",
    "UserNotFound",
]
