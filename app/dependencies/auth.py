"""
Authorization Dependencies
FastAPI dependencies for route protection.

There is no login flow: every caller is treated as a user with the
configured DEFAULT_ROLE. Routes still declare the permission they need so a
real identity provider only has to replace get_current_user.
"""
from typing import Annotated, Callable, Optional

from fastapi import Depends, Request

from app.exceptions import NotAuthenticatedError, PermissionDeniedError
from app.schemas.auth import CurrentUser


async def get_current_user(request: Request) -> Optional[CurrentUser]:
    """Return the caller's identity (stub: the configured default role)."""
    settings = request.app.state.settings
    return CurrentUser(id="1", role=settings.default_role)


def require_permission(resource: str, action: str) -> Callable:
    """
    Build a dependency that allows the request only if the caller's role
    grants `action` on `resource`.
    """

    async def check_permission(
        current_user: Annotated[Optional[CurrentUser], Depends(get_current_user)]
    ) -> CurrentUser:
        if current_user is None:
            raise NotAuthenticatedError()
        if not current_user.can(resource, action):
            raise PermissionDeniedError(resource, action)
        return current_user

    return check_permission
