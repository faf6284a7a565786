"""API-specific dependencies."""

# Re-export common dependencies
from .auth import get_current_user, require_roles
from .dependencies import (
    get_assignment_service,
    get_auth_service,
    get_checkin_service,
    get_companion_service,
    get_db_session_factory,
    get_feedback_service,
    get_message_service,
    get_notification_service,
    get_service_cache,
    get_session_service,
    get_settings_dependency,
    get_stats_service,
    get_user_service,
)

__all__ = [
    "get_current_user",
    "require_roles",
    "get_assignment_service",
    "get_auth_service",
    "get_checkin_service",
    "get_companion_service",
    "get_db_session_factory",
    "get_feedback_service",
    "get_message_service",
    "get_notification_service",
    "get_service_cache",
    "get_session_service",
    "get_settings_dependency",
    "get_stats_service",
    "get_user_service",
]
