"""In-memory task store with whole-dataset locking and snapshot persistence.

One :class:`threading.Lock` guards the entire dataset. Every operation, read
or write, runs under it, so operations on different users still serialize.
Mutations persist the full dataset before the lock is released, which keeps
the file in step with a state that was actually observed under the lock.

A failed save does not undo the in-memory change and is not reported to the
caller. It is logged, counted in :attr:`TaskStore.persist_failures` and kept
in :attr:`TaskStore.last_persist_error` until the next successful save.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from datetime import date
from typing import Any, Iterator, Optional
from uuid import UUID

from loguru import logger

from .errors import DuplicateId, LockAcquisitionFailed, PersistenceFailed, TaskNotFound, TrackerError, UserNotFound
from .models import Dataset, Status, Task, User
from .persistence import DatasetFile


class TaskStore:
    """Thread-safe owner of the :class:`Dataset`.

    Parameters
    ----------
    persistence:
        Adapter used to load the dataset once on construction and to save it
        after each mutation.
    """

    def __init__(self, persistence: DatasetFile) -> None:
        self._persistence = persistence
        self._lock = threading.Lock()
        self._owner: Optional[int] = None
        self._poisoned = False
        self._data = persistence.load()
        self.persist_failures = 0
        self.last_persist_error: Optional[str] = None

    # -- locking ------------------------------------------------------------

    @property
    def poisoned(self) -> bool:
        return self._poisoned

    @contextmanager
    def _exclusive(self) -> Iterator[Dataset]:
        """Hold the dataset lock for the duration of one operation.

        An unexpected exception raised while the lock is held poisons the
        store: the dataset may be half-mutated, so every later acquisition
        fails with :class:`LockAcquisitionFailed`.
        """
        me = threading.get_ident()
        if self._owner == me:
            raise LockAcquisitionFailed("Store lock is already held by this thread")
        self._lock.acquire()
        self._owner = me
        try:
            if self._poisoned:
                logger.critical("Failed to acquire lock on the state data: store is poisoned")
                raise LockAcquisitionFailed("Store lock is poisoned")
            try:
                yield self._data
            except TrackerError:
                raise
            except Exception:
                self._poisoned = True
                logger.exception("Operation failed while holding the store lock; store is now poisoned")
                raise
        finally:
            self._owner = None
            self._lock.release()

    def _persist(self, data: Dataset) -> None:
        # Called with the lock held.
        try:
            self._persistence.save(data)
        except PersistenceFailed as exc:
            self.persist_failures += 1
            self.last_persist_error = str(exc)
            logger.error("Persisting dataset failed ({} so far): {}", self.persist_failures, exc)
            return
        self.last_persist_error = None

    @staticmethod
    def _user(data: Dataset, user_id: UUID) -> User:
        user = data.users.get(user_id)
        if user is None:
            raise UserNotFound(user_id)
        return user

    @staticmethod
    def _task(user: User, task_id: UUID) -> Task:
        task = user.tasks.get(task_id)
        if task is None:
            raise TaskNotFound(task_id)
        return task

    # -- users --------------------------------------------------------------

    def create_user(self, name: str) -> UUID:
        with self._exclusive() as data:
            user = User.new(name)
            data.users[user.id] = user
            self._persist(data)
        logger.info("User created successfully with ID: {}", user.id)
        return user.id

    def delete_user(self, user_id: UUID) -> UUID:
        with self._exclusive() as data:
            logger.info("Removing user: {} from db", user_id)
            if data.users.pop(user_id, None) is None:
                raise UserNotFound(user_id)
            self._persist(data)
        return user_id

    def seed_user(self, user: User) -> UUID:
        """Insert a prebuilt user together with its tasks."""
        with self._exclusive() as data:
            if user.id in data.users:
                raise DuplicateId(f"User {user.id} already exists")
            owned = {task_id for other in data.users.values() for task_id in other.tasks}
            if owned.intersection(user.tasks):
                raise DuplicateId(f"User {user.id} carries tasks owned by another user")
            data.users[user.id] = user
            self._persist(data)
        return user.id

    # -- tasks --------------------------------------------------------------

    def create_task(self, user_id: UUID, title: str, description: str, due_date: date) -> UUID:
        with self._exclusive() as data:
            user = self._user(data, user_id)
            task = user.add_task(Task.new(title, description, due_date))
            self._persist(data)
        logger.info("Task created successfully with ID: {}", task.id)
        return task.id

    def get_task(self, user_id: UUID, task_id: UUID) -> Task:
        with self._exclusive() as data:
            return self._task(self._user(data, user_id), task_id).snapshot()

    def list_tasks(self, user_id: UUID) -> list[Task]:
        with self._exclusive() as data:
            user = self._user(data, user_id)
            tasks = [task.snapshot() for task in user.tasks.values()]
        logger.info("Listing tasks for user ID: {}", user_id)
        return tasks

    def update_task_status(self, user_id: UUID, task_id: UUID, status: Status) -> UUID:
        with self._exclusive() as data:
            task = self._task(self._user(data, user_id), task_id)
            task.status = status
            self._persist(data)
        logger.info("Status of Task-Id: {}, updated to: {}", task_id, status.value)
        return task_id

    def delete_task(self, user_id: UUID, task_id: UUID) -> UUID:
        with self._exclusive() as data:
            user = self._user(data, user_id)
            if user.tasks.pop(task_id, None) is None:
                logger.warning("Task-id: {} doesn't exist", task_id)
                raise TaskNotFound(task_id)
            self._persist(data)
        logger.info("Task deleted successfully with ID: {}", task_id)
        return task_id

    # -- inspection ---------------------------------------------------------

    def stats(self) -> dict[str, Any]:
        with self._exclusive() as data:
            return {
                "users": len(data.users),
                "tasks": data.task_count(),
                "persist_failures": self.persist_failures,
                "last_persist_error": self.last_persist_error,
            }
