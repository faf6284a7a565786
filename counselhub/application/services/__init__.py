"""Service orchestrators."""

from .assignment_service import AssignmentResult, AssignmentService
from .auth_service import AuthService
from .checkin_service import CheckInService
from .companion_service import CompanionService
from .feedback_service import FeedbackService
from .message_service import MessageService
from .notification_service import NotificationService
from .session_service import SessionService
from .stats_service import StatsService
from .user_service import UserService

__all__ = [
    "AssignmentResult",
    "AssignmentService",
    "AuthService",
    "CheckInService",
    "CompanionService",
    "FeedbackService",
    "MessageService",
    "NotificationService",
    "SessionService",
    "StatsService",
    "UserService",
]
