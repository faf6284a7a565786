"""
Authentication dependencies.

Resolves the bearer token to the calling account and stamps its
last_active time. Missing, malformed or expired tokens yield 401.

Dependencies: fastapi.security, counselhub.application.services.auth_service
System role: Request authentication
"""

import logging
from collections.abc import Callable

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from counselhub.api.deps.dependencies import get_auth_service
from counselhub.application.services.auth_service import AuthService
from counselhub.boundary.db.base import utcnow
from counselhub.boundary.db.CRUD.user_crud import user_crud
from counselhub.boundary.db.models import UserModel, UserRole
from counselhub.core.exceptions import AuthenticationError

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    auth_service: AuthService = Depends(get_auth_service),
) -> UserModel:
    """
    Authenticate the request.

    Returns:
        UserModel: Calling account

    Raises:
        HTTPException(401): Missing, malformed or expired token, or deactivated account
    """
    if credentials is None:
        raise _unauthorized("Not authenticated")
    try:
        user = await auth_service.resolve_token(credentials.credentials)
    except AuthenticationError as e:
        logger.info("Bearer token rejected", extra={"reason": e.message})
        raise _unauthorized(e.message) from e

    await user_crud.touch_last_active(auth_service.db, user.id, utcnow())
    await auth_service.db.commit()
    return user


def require_roles(*roles: UserRole) -> Callable:
    """
    Build a dependency that only admits accounts with one of the roles.

    Usage:
        @router.get("/admin-only")
        async def handler(user: UserModel = Depends(require_roles(UserRole.ADMIN))): ...
    """

    async def dependency(user: UserModel = Depends(get_current_user)) -> UserModel:
        if user.role not in roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Your role cannot perform this operation",
            )
        return user

    return dependency
