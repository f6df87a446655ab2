"""Tests for the entity model (models.py)."""

from __future__ import annotations

import uuid
from datetime import date, datetime

import pytest

from task_tracker.errors import DuplicateId, MalformedPersistedData
from task_tracker.models import Dataset, Status, Task, User


class TestConstructors:
    def test_user_new_has_fresh_id_and_no_tasks(self) -> None:
        user = User.new("")
        assert user.id.int != 0
        assert user.name == ""
        assert user.tasks == {}

    def test_task_new_starts_todo(self) -> None:
        task = Task.new("buy milk", "2%", date(2025, 1, 1))
        assert task.status == Status.TODO
        assert task.due_date == date(2025, 1, 1)

    def test_ids_are_unique(self) -> None:
        ids = {User.new("u").id for _ in range(200)}
        ids |= {Task.new("t", "", date(2024, 1, 1)).id for _ in range(200)}
        assert len(ids) == 400


class TestIdentity:
    def test_equality_is_by_id_only(self) -> None:
        a = Task.new("same", "same", date(2024, 5, 24))
        b = Task.new("same", "same", date(2024, 5, 24))
        assert a != b
        renamed = Task(id=a.id, title="other", description="", due_date=date(2000, 1, 1))
        assert a == renamed
        assert len({a, renamed}) == 1

    def test_snapshot_is_detached(self) -> None:
        task = Task.new("t", "d", date(2024, 1, 1))
        snap = task.snapshot()
        task.status = Status.DONE
        assert snap.status == Status.TODO

    def test_add_task_rejects_duplicate_id(self) -> None:
        user = User.new("alice")
        task = user.add_task(Task.new("t", "d", date(2024, 1, 1)))
        with pytest.raises(DuplicateId):
            user.add_task(task)


class TestSerialization:
    def test_status_serializes_as_tag(self) -> None:
        task = Task.new("t", "d", date(2024, 1, 1))
        task.status = Status.IN_PROGRESS
        data = task.to_dict()
        assert data["status"] == "InProgress"
        assert data["due_date"] == "2024-01-01"

    def test_dataset_document_shape(self) -> None:
        user = User.new("alice")
        task = user.add_task(Task.new("buy milk", "2%", date(2025, 1, 1)))
        doc = Dataset(users={user.id: user}).to_dict()
        assert set(doc) == {"users"}
        raw_user = doc["users"][str(user.id)]
        assert set(raw_user) == {"id", "name", "tasks"}
        raw_task = raw_user["tasks"][str(task.id)]
        assert set(raw_task) == {"id", "title", "description", "due_date", "status"}

    def test_dataset_from_dict_restores_fields(self) -> None:
        user = User.new("alice")
        task = user.add_task(Task.new("buy milk", "2%", date(2025, 1, 1)))
        task.status = Status.DONE
        restored = Dataset.from_dict(Dataset(users={user.id: user}).to_dict())
        again = restored.users[user.id].tasks[task.id]
        assert again.to_dict() == task.to_dict()
        assert restored.users[user.id].name == "alice"

    @pytest.mark.parametrize(
        "mutate",
        [
            lambda t: t.pop("id"),
            lambda t: t.update(id="not-a-uuid"),
            lambda t: t.update(id=str(uuid.UUID(int=0))),
            lambda t: t.update(due_date="2024-13-40"),
            lambda t: t.update(status="Blocked"),
        ],
    )
    def test_task_from_dict_rejects_bad_fields(self, mutate) -> None:
        raw = Task.new("t", "d", date(2024, 1, 1)).to_dict()
        mutate(raw)
        with pytest.raises(MalformedPersistedData):
            Task.from_dict(raw)

    def test_dataset_rejects_mismatched_keys(self) -> None:
        user = User.new("alice")
        doc = {"users": {str(uuid.uuid4()): user.to_dict()}}
        with pytest.raises(MalformedPersistedData, match="does not match"):
            Dataset.from_dict(doc)

    def test_dataset_rejects_shared_task(self) -> None:
        task = Task.new("t", "d", date(2024, 1, 1))
        first, second = User.new("a"), User.new("b")
        first.add_task(task)
        second.add_task(task)
        doc = Dataset(users={first.id: first, second.id: second}).to_dict()
        with pytest.raises(MalformedPersistedData, match="more than one user"):
            Dataset.from_dict(doc)

    def test_dataset_rejects_non_object(self) -> None:
        with pytest.raises(MalformedPersistedData):
            Dataset.from_dict({"users": []})

    @pytest.mark.parametrize(
        "key, value",
        [("title", None), ("description", 5), ("title", ["a"])],
    )
    def test_task_text_fields_must_be_strings(self, key: str, value) -> None:
        raw = Task.new("t", "d", date(2024, 1, 1)).to_dict()
        raw[key] = value
        with pytest.raises(MalformedPersistedData, match="must be a string"):
            Task.from_dict(raw)

    def test_user_name_must_be_string(self) -> None:
        raw = User.new("alice").to_dict()
        raw["name"] = None
        with pytest.raises(MalformedPersistedData, match="must be a string"):
            User.from_dict(raw)

    def test_datetime_due_date_keeps_only_the_day(self) -> None:
        raw = Task.new("t", "d", date(2024, 1, 1)).to_dict()
        raw["due_date"] = datetime(2025, 1, 1, 10, 0)
        task = Task.from_dict(raw)
        assert type(task.due_date) is date
        assert task.to_dict()["due_date"] == "2025-01-01"
