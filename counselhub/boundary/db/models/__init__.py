"""
Database models package.

Exports:
  - UserModel, UserRole: Account ORM model and role enum
  - SessionModel, SessionStatus: Counseling session ORM model and status enum
  - MessageModel: Session chat message ORM model
  - CheckInModel: Mood check-in ORM model
  - FeedbackModel: Session feedback ORM model
  - NotificationModel, NotificationType: Notification ORM model and type enum

Dependencies: sqlalchemy, counselhub.boundary.db.base
System role: Database model definitions for domain entities
"""

from counselhub.boundary.db.models.user_model import UserModel, UserRole
from counselhub.boundary.db.models.session_model import SessionModel, SessionStatus
from counselhub.boundary.db.models.message_model import MessageModel
from counselhub.boundary.db.models.checkin_model import CheckInModel
from counselhub.boundary.db.models.feedback_model import FeedbackModel
from counselhub.boundary.db.models.notification_model import (
    NotificationModel,
    NotificationType,
)

__all__ = [
    "UserModel",
    "UserRole",
    "SessionModel",
    "SessionStatus",
    "MessageModel",
    "CheckInModel",
    "FeedbackModel",
    "NotificationModel",
    "NotificationType",
]
