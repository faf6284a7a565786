"""
Service error handling utilities.

Maps the domain exception hierarchy to HTTP status codes and provides a
decorator for consistent error handling across API endpoints.
"""

import functools
import logging
from typing import Any, Callable, TypeVar

from fastapi import HTTPException, status

from counselhub.core.exceptions import (
    AuthenticationError,
    CompanionUnavailableError,
    ConflictError,
    CounselHubException,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)

logger = logging.getLogger(__name__)

# Type for the decorated function
F = TypeVar("F", bound=Callable[..., Any])

STATUS_BY_EXCEPTION: tuple[tuple[type[CounselHubException], int], ...] = (
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (AuthenticationError, status.HTTP_401_UNAUTHORIZED),
    (PermissionDeniedError, status.HTTP_403_FORBIDDEN),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (ConflictError, status.HTTP_409_CONFLICT),
    (CompanionUnavailableError, status.HTTP_503_SERVICE_UNAVAILABLE),
)


def status_for(exc: CounselHubException) -> int:
    """HTTP status code for a domain exception."""
    for exc_type, code in STATUS_BY_EXCEPTION:
        if isinstance(exc, exc_type):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def to_http_exception(exc: CounselHubException) -> HTTPException:
    """Translate a domain exception, logging it at a level matching its status."""
    code = status_for(exc)
    log = logger.error if code >= 500 else logger.warning
    log(
        "Request failed",
        extra={
            "error_type": type(exc).__name__,
            "status_code": code,
            "error": exc.message,
            "details": exc.details,
        },
    )
    headers = {"WWW-Authenticate": "Bearer"} if code == status.HTTP_401_UNAUTHORIZED else None
    return HTTPException(status_code=code, detail=exc.message, headers=headers)


def handle_service_errors(func: F) -> F:
    """
    Decorator to transform service errors into HTTPExceptions.

    This centralizes:
    - Logging of errors with context
    - Mapping domain exceptions to HTTP status codes
    - Turning unexpected failures into a generic 500
    """
    @functools.wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return await func(*args, **kwargs)

        except HTTPException:
            raise

        except CounselHubException as e:
            raise to_http_exception(e) from e

        except Exception as e:
            logger.exception(
                "Unexpected failure in API operation",
                extra={"endpoint": func.__name__, "error": str(e)},
            )
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="An internal error occurred",
            ) from e

    return wrapper  # type: ignore
