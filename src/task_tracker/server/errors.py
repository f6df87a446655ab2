"""Map store errors onto HTTP errors."""

from __future__ import annotations

from fastapi import HTTPException
from loguru import logger

from ..errors import LockAcquisitionFailed, TaskNotFound, TrackerError, UserNotFound


def to_http_exception(exc: TrackerError) -> HTTPException:
    if isinstance(exc, UserNotFound):
        return HTTPException(status_code=404, detail="User not found")
    if isinstance(exc, TaskNotFound):
        return HTTPException(status_code=404, detail="Task not found")
    if isinstance(exc, LockAcquisitionFailed):
        logger.error("Failed to acquire lock on the state data: {}", exc)
        return HTTPException(status_code=500, detail="Internal Server Error")
    logger.error("Unhandled store error: {}", exc)
    return HTTPException(status_code=500, detail="Internal Server Error")
