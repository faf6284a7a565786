"""
API request/response schemas.

Dependencies: pydantic
System role: API contracts shared by routers and services
"""

from counselhub.models.ai import AIChatRequest, AIChatResponse, ChatTurn
from counselhub.models.auth import AuthResponse, LoginRequest, RefreshRequest
from counselhub.models.checkin import CheckInResponse, CreateCheckInRequest
from counselhub.models.common import ErrorResponse, OkResponse
from counselhub.models.feedback import CreateFeedbackRequest, FeedbackResponse
from counselhub.models.message import CreateMessageRequest, MessageResponse
from counselhub.models.notification import NotificationResponse
from counselhub.models.session import (
    AutoAssignResponse,
    CreateSessionRequest,
    SessionResponse,
    UpdateNotesRequest,
)
from counselhub.models.stats import AdminStats, CounselorStats, StatItem, Trend, UserStats
from counselhub.models.user import (
    RegisterAdminRequest,
    RegisterCounselorRequest,
    RegisterUserRequest,
    UpdateUserRequest,
    UserResponse,
)

__all__ = [
    "AIChatRequest",
    "AIChatResponse",
    "ChatTurn",
    "AuthResponse",
    "LoginRequest",
    "RefreshRequest",
    "CheckInResponse",
    "CreateCheckInRequest",
    "ErrorResponse",
    "OkResponse",
    "CreateFeedbackRequest",
    "FeedbackResponse",
    "CreateMessageRequest",
    "MessageResponse",
    "NotificationResponse",
    "AutoAssignResponse",
    "CreateSessionRequest",
    "SessionResponse",
    "UpdateNotesRequest",
    "AdminStats",
    "CounselorStats",
    "StatItem",
    "Trend",
    "UserStats",
    "RegisterAdminRequest",
    "RegisterCounselorRequest",
    "RegisterUserRequest",
    "UpdateUserRequest",
    "UserResponse",
]
