"""User endpoints, mounted under ``/users``."""

from __future__ import annotations

from typing import Callable
from uuid import UUID

from fastapi import APIRouter

from ..errors import TrackerError
from ..store import TaskStore
from .errors import to_http_exception
from .models import DeleteUserRequest, DeleteUserResponse, NewUserRequest


def create_user_router(get_store: Callable[[], TaskStore]) -> APIRouter:
    """Create the user API router.

    Parameters
    ----------
    get_store:
        A callable returning the :class:`TaskStore` shared by the application.
    """
    router = APIRouter(prefix="/users", tags=["users"])

    @router.post("/create", response_model=UUID)
    def create_user(body: NewUserRequest) -> UUID:
        try:
            return get_store().create_user(body.name)
        except TrackerError as exc:
            raise to_http_exception(exc) from exc

    @router.delete("/delete", response_model=DeleteUserResponse)
    def delete_user(body: DeleteUserRequest) -> DeleteUserResponse:
        try:
            user_id = get_store().delete_user(body.id)
        except TrackerError as exc:
            raise to_http_exception(exc) from exc
        return DeleteUserResponse(id=user_id)

    return router
