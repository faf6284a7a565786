"""
Database boundary layer: ORM models, CRUD operations, and connection management.

Exports:
  - Base, UUIDMixin, TimestampMixin: Model building blocks
  - get_async_engine(), get_async_session_factory(), get_async_db(): Async connection management
  - ORM models and their enums
  - CRUD singletons

Dependencies: sqlalchemy, counselhub.configs
System role: Database adapter providing persistent storage for accounts,
counseling sessions, messages, check-ins, feedback and notifications.
"""

from counselhub.boundary.db.base import Base, TimestampMixin, UUIDMixin, as_utc, utcnow
from counselhub.boundary.db.connection import (
    get_async_db,
    get_async_engine,
    get_async_session_factory,
)
from counselhub.boundary.db.models import (
    CheckInModel,
    FeedbackModel,
    MessageModel,
    NotificationModel,
    NotificationType,
    SessionModel,
    SessionStatus,
    UserModel,
    UserRole,
)
from counselhub.boundary.db.CRUD import (
    checkin_crud,
    feedback_crud,
    message_crud,
    notification_crud,
    session_crud,
    user_crud,
)

__all__ = [
    # Base classes
    "Base",
    "TimestampMixin",
    "UUIDMixin",
    "as_utc",
    "utcnow",
    # Connection
    "get_async_db",
    "get_async_engine",
    "get_async_session_factory",
    # Models
    "CheckInModel",
    "FeedbackModel",
    "MessageModel",
    "NotificationModel",
    "NotificationType",
    "SessionModel",
    "SessionStatus",
    "UserModel",
    "UserRole",
    # CRUD singletons
    "checkin_crud",
    "feedback_crud",
    "message_crud",
    "notification_crud",
    "session_crud",
    "user_crud",
]
