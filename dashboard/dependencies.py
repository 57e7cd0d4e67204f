"""
FastAPI dependencies shared by the routers.
"""
from typing import Optional
from uuid import UUID

from fastapi import Header, Request

from core.container import ServiceContainer
from core.exceptions import NotAuthenticatedError, ValidationError


def get_container(request: Request) -> ServiceContainer:
    return request.app.state.container


def get_user_id(x_user_id: Optional[str] = Header(default=None)) -> UUID:
    """The caller's user id from the X-User-Id header."""
    if not x_user_id:
        raise NotAuthenticatedError("Missing X-User-Id header")
    try:
        return UUID(x_user_id)
    except ValueError as e:
        raise ValidationError(
            "X-User-Id must be a UUID",
            field_name="X-User-Id",
            value=x_user_id,
            cause=e,
        ) from e
