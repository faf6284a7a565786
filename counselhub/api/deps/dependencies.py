"""
Dependency injection container.

Factory functions for FastAPI dependencies.

Dependencies: counselhub.configs, counselhub.application, counselhub.boundary
System role: DI container for service injection
"""

import logging
from functools import lru_cache

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from counselhub.configs import Settings, get_settings
from counselhub.boundary.db import get_async_db, get_async_session_factory
from counselhub.application.services import (
    AssignmentService,
    AuthService,
    CheckInService,
    CompanionService,
    FeedbackService,
    MessageService,
    NotificationService,
    SessionService,
    StatsService,
    UserService,
)
from counselhub.core.exceptions import CompanionUnavailableError

logger = logging.getLogger(__name__)


class ServiceCache:
    """Container for cached service instances."""

    def __init__(self):
        self._companion_agent = None

    @property
    def companion_agent(self):
        """
        Get cached companion agent.

        Raises:
            CompanionUnavailableError: If the chat model cannot be constructed
        """
        if self._companion_agent is None:
            from counselhub.core.companion.companion_agent import CompanionAgent
            from counselhub.observability.langfuse_tracer import LangfuseTracer

            companion = get_settings().companion
            try:
                self._companion_agent = CompanionAgent(
                    model_id=companion.model_id,
                    temperature=companion.temperature,
                    history_window=companion.history_window,
                    google_api_key=companion.google_api_key,
                    max_attempts=companion.max_attempts,
                    retry_initial_wait=companion.retry_initial_wait,
                    tracer=LangfuseTracer(),
                )
            except Exception as e:
                logger.exception("Companion model could not be initialized")
                raise CompanionUnavailableError(
                    "The AI companion is not configured",
                    {"model_id": companion.model_id},
                ) from e
        return self._companion_agent

    def clear(self) -> None:
        """Clear all cached instances."""
        self._companion_agent = None


# Global service cache
_service_cache = ServiceCache()

def get_service_cache() -> ServiceCache:
    """Get service cache singleton."""
    return _service_cache


@lru_cache
def get_settings_dependency() -> Settings:
    """Get settings singleton."""
    return get_settings()


def get_db_session_factory() -> async_sessionmaker:
    """
    Get the session factory for endpoints that outlive a single request scope.

    Used by the WebSocket message feed, which opens a fresh session per poll.
    """
    return get_async_session_factory()


def get_auth_service(
    db: AsyncSession = Depends(get_async_db),
    settings: Settings = Depends(get_settings_dependency),
) -> AuthService:
    """
    Get auth service instance.

    Args:
        db: Async database session (injected via Depends)
        settings: Application settings (injected via Depends)

    Returns:
        AuthService: Auth service instance
    """
    return AuthService(db=db, settings=settings.auth)


def get_user_service(db: AsyncSession = Depends(get_async_db)) -> UserService:
    return UserService(db=db)


def get_notification_service(
    db: AsyncSession = Depends(get_async_db),
    settings: Settings = Depends(get_settings_dependency),
) -> NotificationService:
    return NotificationService(db=db, settings=settings.assignment)


def get_session_service(
    db: AsyncSession = Depends(get_async_db),
    notifications: NotificationService = Depends(get_notification_service),
) -> SessionService:
    """
    Get session service instance.

    Args:
        db: Async database session (injected via Depends)
        notifications: Notification emitter bound to the same session

    Returns:
        SessionService: Session service instance
    """
    return SessionService(db=db, notifications=notifications)


def get_assignment_service(
    db: AsyncSession = Depends(get_async_db),
    settings: Settings = Depends(get_settings_dependency),
    notifications: NotificationService = Depends(get_notification_service),
) -> AssignmentService:
    """
    Get assignment service instance.

    Args:
        db: Async database session (injected via Depends)
        settings: Application settings (concurrency cap)
        notifications: Notification emitter bound to the same session

    Returns:
        AssignmentService: Assignment engine instance
    """
    return AssignmentService(db=db, settings=settings.assignment, notifications=notifications)


def get_message_service(
    db: AsyncSession = Depends(get_async_db),
    notifications: NotificationService = Depends(get_notification_service),
) -> MessageService:
    return MessageService(db=db, notifications=notifications)


def get_checkin_service(db: AsyncSession = Depends(get_async_db)) -> CheckInService:
    return CheckInService(db=db)


def get_feedback_service(db: AsyncSession = Depends(get_async_db)) -> FeedbackService:
    return FeedbackService(db=db)


def get_stats_service(
    db: AsyncSession = Depends(get_async_db),
    settings: Settings = Depends(get_settings_dependency),
) -> StatsService:
    return StatsService(db=db, settings=settings.assignment)


def get_companion_service() -> CompanionService:
    """
    Get companion service with the cached chat agent.

    Returns:
        CompanionService: Companion service wrapping the shared agent
    """
    cache = get_service_cache()
    return CompanionService(agent=cache.companion_agent)
