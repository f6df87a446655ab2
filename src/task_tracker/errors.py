"""Error taxonomy shared by the store, the persistence adapter and the API."""

from __future__ import annotations

from typing import Optional
from uuid import UUID


class TrackerError(Exception):
    """Base class for all task tracker errors."""

    pass


class NotFound(TrackerError, LookupError):
    """A referenced entity does not exist."""

    entity = "Entity"

    def __init__(self, entity_id: UUID):
        self.entity_id = entity_id
        super().__init__(f"{self.entity} {entity_id} not found")


class UserNotFound(NotFound):
    entity = "User"


class TaskNotFound(NotFound):
    entity = "Task"


class LockAcquisitionFailed(TrackerError):
    """The store lock could not be obtained in a usable state."""

    pass


class PersistenceFailed(TrackerError):
    """Writing the dataset to durable storage did not complete."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause


class MalformedPersistedData(TrackerError, ValueError):
    """Persisted content does not match the expected document shape."""

    pass


class DuplicateId(TrackerError, ValueError):
    """An entity with the same id is already present."""

    pass
