"""
FastAPI application with assembled routers.

Initializes FastAPI app with all API routers and configures uvicorn server.

Dependencies: fastapi, counselhub.api.routers, uvicorn
System role: API entry point with router assembly and server launch
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.middleware.cors import CORSMiddleware

from counselhub.api.deps.dependencies import get_service_cache
from counselhub.api.routers.router_utils import to_http_exception
from counselhub.configs import Settings, get_settings
from counselhub.core.exceptions import CounselHubException
from counselhub.observability.logger import configure_logging
from counselhub.observability.middleware import CorrelationMiddleware, RequestLoggingMiddleware
from .routers import (
    admins_router,
    ai_router,
    auth_router,
    checkins_router,
    counselors_router,
    feedback_router,
    health_router,
    message_stream_router,
    messages_router,
    notifications_router,
    sessions_router,
    stats_router,
    users_router,
)

API_PREFIX = "/api"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Handles startup and shutdown events.
    """
    logger = logging.getLogger("uvicorn")

    # Startup
    settings = get_settings()
    logger.info(
        "CounselHub API starting",
        extra={"environment": settings.environment},
    )

    yield

    # Shutdown
    get_service_cache().clear()
    logger.info("Service cache cleared")


async def counselhub_exception_handler(request: Request, exc: CounselHubException):
    """Map domain errors raised outside decorated endpoints (e.g. in dependencies)."""
    return await http_exception_handler(request, to_http_exception(exc))


def create_app(settings: Settings | None = None) -> FastAPI:
    """
    Create and configure FastAPI application with routers.

    Args:
        settings: Application settings (defaults to environment settings)

    Returns:
        FastAPI: Configured application instance with all routers registered
    """
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title=settings.app_name,
        description="Counseling portal backend: sessions, assignment, messaging and check-ins",
        version="0.1.0",
        debug=settings.debug,
        lifespan=lifespan,
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors.allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Add observability middleware
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(CorrelationMiddleware)

    app.add_exception_handler(CounselHubException, counselhub_exception_handler)

    # Register all routers with /api prefix
    app.include_router(health_router, prefix=API_PREFIX)
    app.include_router(auth_router, prefix=API_PREFIX)
    app.include_router(users_router, prefix=API_PREFIX)
    app.include_router(counselors_router, prefix=API_PREFIX)
    app.include_router(admins_router, prefix=API_PREFIX)
    app.include_router(sessions_router, prefix=API_PREFIX)
    app.include_router(messages_router, prefix=API_PREFIX)
    app.include_router(message_stream_router, prefix=API_PREFIX)
    app.include_router(checkins_router, prefix=API_PREFIX)
    app.include_router(feedback_router, prefix=API_PREFIX)
    app.include_router(notifications_router, prefix=API_PREFIX)
    app.include_router(ai_router, prefix=API_PREFIX)
    app.include_router(stats_router, prefix=API_PREFIX)

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "counselhub.api.main:app",
        host="0.0.0.0",
        port=8000,
    )
