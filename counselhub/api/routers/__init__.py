"""API routers."""

from .accounts import admins_router, counselors_router, users_router
from .ai import router as ai_router
from .auth import router as auth_router
from .checkins import router as checkins_router
from .feedback import router as feedback_router
from .health import router as health_router
from .message_stream import router as message_stream_router
from .messages import router as messages_router
from .notifications import router as notifications_router
from .sessions import router as sessions_router
from .stats import router as stats_router

__all__ = [
    "admins_router",
    "ai_router",
    "auth_router",
    "checkins_router",
    "counselors_router",
    "feedback_router",
    "health_router",
    "message_stream_router",
    "messages_router",
    "notifications_router",
    "sessions_router",
    "stats_router",
    "users_router",
]
