"""
Notification emitter.

Writes notification rows for session events and serves the recipient's
inbox. Emit methods only stage rows in the caller's transaction; the
calling service commits them together with the event itself.

Dependencies: counselhub.boundary.db, counselhub.configs
System role: Notification use case orchestration
"""

import logging
from datetime import timedelta
from typing import Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from counselhub.boundary.db.base import as_utc, utcnow
from counselhub.boundary.db.CRUD.notification_crud import notification_crud
from counselhub.boundary.db.models import (
    MessageModel,
    NotificationModel,
    NotificationType,
    SessionModel,
    UserModel,
    UserRole,
)
from counselhub.configs import get_settings
from counselhub.configs.assignment import AssignmentSettings
from counselhub.core.exceptions import NotificationNotFoundError

logger = logging.getLogger(__name__)

SYSTEM_SENDER_ROLE = "system"


class NotificationService:
    """Notification emitter and inbox."""

    def __init__(
        self,
        db: AsyncSession,
        settings: AssignmentSettings | None = None,
    ) -> None:
        """
        Initialize notification service.

        Args:
            db: Async SQLAlchemy session
            settings: Presence tunables (offline threshold)
        """
        self.db = db
        self.settings = settings or get_settings().assignment

    async def emit(
        self,
        recipient: UserModel,
        title: str,
        message: str,
        type: NotificationType = NotificationType.INFO,
        sender: UserModel | None = None,
        session_id: UUID | None = None,
    ) -> NotificationModel:
        """Stage one notification row for a recipient."""
        notification = await notification_crud.create(
            self.db,
            sender_id=sender.id if sender else None,
            sender_role=sender.role.value if sender else SYSTEM_SENDER_ROLE,
            recipient_id=recipient.id,
            recipient_role=recipient.role.value,
            type=type,
            title=title,
            message=message,
            session_id=session_id,
        )
        logger.info(
            "Notification emitted",
            extra={
                "notification_id": str(notification.id),
                "recipient_id": str(recipient.id),
                "type": type.value,
            },
        )
        return notification

    async def notify_assigned(
        self,
        session: SessionModel,
        owner: UserModel,
        counselor: UserModel,
        actor: UserModel | None = None,
    ) -> None:
        """Tell the owner and the counselor that a session became active."""
        await self.emit(
            owner,
            title="Counselor assigned",
            message=f"{counselor.username} has joined your session.",
            type=NotificationType.SUCCESS,
            sender=actor,
            session_id=session.id,
        )
        await self.emit(
            counselor,
            title="New session assigned",
            message=f"You are now counseling {owner.username}.",
            type=NotificationType.INFO,
            sender=actor,
            session_id=session.id,
        )

    async def notify_ended(
        self,
        session: SessionModel,
        participants: Sequence[UserModel],
        actor: UserModel,
    ) -> None:
        """Tell every participant except the one who ended it that a session is over."""
        for participant in participants:
            if participant.id == actor.id:
                continue
            await self.emit(
                participant,
                title="Session ended",
                message=f"Your session was ended by {actor.username}.",
                type=NotificationType.INFO,
                sender=actor,
                session_id=session.id,
            )

    def is_offline(self, account: UserModel) -> bool:
        """True when the account was never seen or not seen recently."""
        last_active = as_utc(account.last_active)
        if last_active is None:
            return True
        threshold = timedelta(seconds=self.settings.offline_after_seconds)
        return utcnow() - last_active > threshold

    async def notify_message_if_offline(
        self,
        message: MessageModel,
        sender: UserModel,
        recipient: UserModel,
    ) -> NotificationModel | None:
        """Alert a recipient about a new message when they look offline."""
        if not self.is_offline(recipient):
            return None
        preview = message.content if len(message.content) <= 80 else message.content[:77] + "..."
        title = "New message from your counselor" if sender.role == UserRole.COUNSELOR else f"New message from {sender.username}"
        return await self.emit(
            recipient,
            title=title,
            message=preview,
            type=NotificationType.ALERT,
            sender=sender,
            session_id=message.session_id,
        )

    async def list_for(
        self,
        recipient: UserModel,
        limit: int | None = None,
    ) -> Sequence[NotificationModel]:
        """Recipient's notifications, newest first."""
        return await notification_crud.list_for_recipient(self.db, recipient.id, limit=limit)

    async def delete(self, recipient: UserModel, notification_id: UUID) -> None:
        """
        Delete one of the recipient's notifications.

        Raises:
            NotificationNotFoundError: If the id is unknown or belongs to someone else
        """
        deleted = await notification_crud.delete_for_recipient(
            self.db, notification_id, recipient.id
        )
        if not deleted:
            raise NotificationNotFoundError(notification_id)
        await self.db.commit()
        logger.info(
            "Notification deleted",
            extra={"notification_id": str(notification_id), "recipient_id": str(recipient.id)},
        )
