"""Entity model for users, their tasks and the persisted dataset.

Entities are plain dataclasses that round-trip through ``to_dict`` /
``from_dict`` into the JSON document shape::

    {"users": {"<uuid>": {"id", "name", "tasks": {"<uuid>": {...}}}}}

``from_dict`` is strict: anything that cannot be turned back into a valid
entity raises :class:`MalformedPersistedData` so the persistence layer can
decide what to do with a bad file.
"""

from __future__ import annotations

import copy
import uuid
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any

from .errors import DuplicateId, MalformedPersistedData


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class Status(str, Enum):
    """Task lifecycle status. Any status may move to any other."""

    TODO = "ToDo"
    IN_PROGRESS = "InProgress"
    DONE = "Done"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _generate_id() -> uuid.UUID:
    return uuid.uuid4()


def _require(data: Any, key: str, kind: str) -> Any:
    if not isinstance(data, dict):
        raise MalformedPersistedData(f"{kind}: expected object, got {type(data).__name__}")
    if key not in data:
        raise MalformedPersistedData(f"{kind}: missing '{key}'")
    return data[key]


def _parse_uuid(raw: Any, kind: str) -> uuid.UUID:
    if isinstance(raw, uuid.UUID):
        value = raw
    else:
        try:
            value = uuid.UUID(str(raw))
        except (TypeError, ValueError) as exc:
            raise MalformedPersistedData(f"{kind}: invalid id {raw!r}") from exc
    if value.int == 0:
        raise MalformedPersistedData(f"{kind}: nil id")
    return value


def _parse_str(raw: Any, key: str, kind: str) -> str:
    if not isinstance(raw, str):
        raise MalformedPersistedData(f"{kind}: '{key}' must be a string, got {type(raw).__name__}")
    return raw


def _parse_date(raw: Any) -> date:
    # YAML resolves timestamps to datetime, a date subclass; keep only the day.
    if isinstance(raw, datetime):
        return raw.date()
    if isinstance(raw, date):
        return raw
    try:
        return date.fromisoformat(str(raw))
    except ValueError as exc:
        raise MalformedPersistedData(f"task: invalid due_date {raw!r}") from exc


def _parse_status(raw: Any) -> Status:
    try:
        return Status(str(raw))
    except ValueError as exc:
        raise MalformedPersistedData(f"task: unknown status {raw!r}") from exc


def _parse_mapping(raw: Any, kind: str) -> dict[str, Any]:
    if not isinstance(raw, dict):
        raise MalformedPersistedData(f"{kind}: expected object, got {type(raw).__name__}")
    return raw


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------

@dataclass(eq=False)
class Task:
    id: uuid.UUID
    title: str
    description: str
    due_date: date
    status: Status = Status.TODO

    @classmethod
    def new(cls, title: str, description: str, due_date: date) -> "Task":
        return cls(
            id=_generate_id(),
            title=title,
            description=description,
            due_date=due_date,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Task):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def snapshot(self) -> "Task":
        """Return a copy detached from the live dataset."""
        return copy.copy(self)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": str(self.id),
            "title": self.title,
            "description": self.description,
            "due_date": self.due_date.isoformat(),
            "status": self.status.value,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Task":
        return cls(
            id=_parse_uuid(_require(data, "id", "task"), "task"),
            title=_parse_str(_require(data, "title", "task"), "title", "task"),
            description=_parse_str(_require(data, "description", "task"), "description", "task"),
            due_date=_parse_date(_require(data, "due_date", "task")),
            status=_parse_status(_require(data, "status", "task")),
        )


@dataclass(eq=False)
class User:
    id: uuid.UUID
    name: str
    tasks: dict[uuid.UUID, Task] = field(default_factory=dict)

    @classmethod
    def new(cls, name: str) -> "User":
        return cls(id=_generate_id(), name=name)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, User):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def add_task(self, task: Task) -> Task:
        if task.id in self.tasks:
            raise DuplicateId(f"Task {task.id} already exists")
        self.tasks[task.id] = task
        return task

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": str(self.id),
            "name": self.name,
            "tasks": {str(task_id): task.to_dict() for task_id, task in self.tasks.items()},
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "User":
        user = cls(
            id=_parse_uuid(_require(data, "id", "user"), "user"),
            name=_parse_str(_require(data, "name", "user"), "name", "user"),
        )
        raw_tasks = _parse_mapping(_require(data, "tasks", "user"), "user.tasks")
        for key, raw in raw_tasks.items():
            task = Task.from_dict(raw)
            if _parse_uuid(key, "user.tasks") != task.id:
                raise MalformedPersistedData(f"user.tasks: key {key} does not match task id {task.id}")
            user.tasks[task.id] = task
        return user


@dataclass
class Dataset:
    """Root aggregate and the single unit of persistence."""

    users: dict[uuid.UUID, User] = field(default_factory=dict)

    def task_count(self) -> int:
        return sum(len(user.tasks) for user in self.users.values())

    def to_dict(self) -> dict[str, Any]:
        return {"users": {str(user_id): user.to_dict() for user_id, user in self.users.items()}}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Dataset":
        raw_users = _parse_mapping(_require(data, "users", "dataset"), "dataset.users")
        dataset = cls()
        seen_tasks: set[uuid.UUID] = set()
        for key, raw in raw_users.items():
            user = User.from_dict(raw)
            if _parse_uuid(key, "dataset.users") != user.id:
                raise MalformedPersistedData(f"dataset.users: key {key} does not match user id {user.id}")
            shared = seen_tasks.intersection(user.tasks)
            if shared:
                raise MalformedPersistedData(f"task {next(iter(shared))} is owned by more than one user")
            seen_tasks.update(user.tasks)
            dataset.users[user.id] = user
        return dataset
