from __future__ import annotations

from datetime import date
from pathlib import Path
from uuid import UUID

import pytest

from task_tracker.models import Task, User
from task_tracker.persistence import DatasetFile
from task_tracker.store import TaskStore


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def data_file(tmp_path: Path) -> Path:
    return tmp_path / "data.json"


@pytest.fixture
def store(data_file: Path) -> TaskStore:
    return TaskStore(DatasetFile(data_file))


@pytest.fixture
def seeded(store: TaskStore) -> tuple[UUID, UUID]:
    """Insert a test user carrying one sample task; return (user_id, task_id)."""
    user = User.new("test-user")
    task = user.add_task(Task.new("sample-title", "sample-info", date(2000, 1, 1)))
    store.seed_user(user)
    return user.id, task.id
