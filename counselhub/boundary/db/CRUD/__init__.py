"""
CRUD operations for database models.

Exports base CRUD class and model-specific CRUD implementations
with pre-instantiated singletons for direct use.

Usage:
    from counselhub.boundary.db.CRUD import session_crud, message_crud

    # Use singleton instances
    session = await session_crud.get_by_id(db, session_id)

    # Or instantiate classes directly for custom behavior
    from counselhub.boundary.db.CRUD import SessionCRUD
    custom_crud = SessionCRUD()
"""

from counselhub.boundary.db.CRUD.base_crud import BaseCRUD
from counselhub.boundary.db.CRUD.user_crud import UserCRUD, user_crud
from counselhub.boundary.db.CRUD.session_crud import SessionCRUD, session_crud
from counselhub.boundary.db.CRUD.message_crud import MessageCRUD, message_crud
from counselhub.boundary.db.CRUD.checkin_crud import CheckInCRUD, checkin_crud
from counselhub.boundary.db.CRUD.feedback_crud import FeedbackCRUD, feedback_crud
from counselhub.boundary.db.CRUD.notification_crud import NotificationCRUD, notification_crud

__all__ = [
    "BaseCRUD",
    "UserCRUD",
    "user_crud",
    "SessionCRUD",
    "session_crud",
    "MessageCRUD",
    "message_crud",
    "CheckInCRUD",
    "checkin_crud",
    "FeedbackCRUD",
    "feedback_crud",
    "NotificationCRUD",
    "notification_crud",
]
