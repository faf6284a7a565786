"""
Messaging log service.

Append-only per-session chat history with read-on-fetch receipts.

Dependencies: counselhub.boundary.db, counselhub.application.services
System role: Messaging use case orchestration
"""

import logging
from typing import Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from counselhub.application.services.notification_service import NotificationService
from counselhub.application.services.session_service import (
    is_owner,
    is_participant,
    load_session,
)
from counselhub.boundary.db.CRUD.message_crud import message_crud
from counselhub.boundary.db.CRUD.user_crud import user_crud
from counselhub.boundary.db.models import MessageModel, UserModel, UserRole
from counselhub.core.exceptions import (
    InvalidTransitionError,
    PermissionDeniedError,
    ValidationError,
)
from counselhub.core.session_lifecycle import is_terminal

logger = logging.getLogger(__name__)

MAX_MESSAGE_LENGTH = 5000


class MessageService:
    """Messaging log orchestrator."""

    def __init__(
        self,
        db: AsyncSession,
        notifications: NotificationService | None = None,
    ) -> None:
        """
        Initialize message service.

        Args:
            db: Async SQLAlchemy session
            notifications: Notification emitter sharing the same session
        """
        self.db = db
        self.notifications = notifications or NotificationService(db)

    async def append_message(
        self,
        actor: UserModel,
        session_id: UUID,
        content: str,
    ) -> MessageModel:
        """
        Append a message to a session's history.

        Args:
            actor: Sending account
            session_id: Session UUID
            content: Message body (trimmed, 1-5000 characters)

        Returns:
            MessageModel: Stored message

        Raises:
            ValidationError: If content is empty or too long
            SessionNotFoundError: If unknown or not visible
            PermissionDeniedError: If the actor is not a participant
            InvalidTransitionError: If the session is completed or cancelled
        """
        content = (content or "").strip()
        if not content:
            raise ValidationError("Message content cannot be empty", field="content")
        if len(content) > MAX_MESSAGE_LENGTH:
            raise ValidationError(
                f"Message content exceeds {MAX_MESSAGE_LENGTH} characters",
                field="content",
            )

        session = await load_session(self.db, session_id, actor)
        if not is_participant(session, actor):
            raise PermissionDeniedError("Only session participants can send messages")
        if is_terminal(session.status):
            raise InvalidTransitionError(session.id, session.status.value, "message")

        message = await message_crud.append(
            self.db,
            session_id=session.id,
            sender_id=actor.id,
            sender_role=actor.role.value,
            content=content,
        )

        recipient_id = session.counselor_id if is_owner(session, actor) else session.user_id
        if recipient_id is not None:
            recipient = await user_crud.get_by_id(self.db, recipient_id)
            if recipient is not None:
                await self.notifications.notify_message_if_offline(message, actor, recipient)

        await self.db.commit()
        logger.info(
            "Message appended",
            extra={
                "session_id": str(session.id),
                "message_id": str(message.id),
                "position": message.position,
            },
        )
        return message

    async def list_messages(self, actor: UserModel, session_id: UUID) -> Sequence[MessageModel]:
        """
        Full ordered history of a session.

        When a participant reads, every message from the other party is
        marked read before the history is returned.
        """
        session = await load_session(self.db, session_id, actor)
        if not (is_participant(session, actor) or actor.role == UserRole.ADMIN):
            raise PermissionDeniedError("Only session participants can read messages")

        if is_participant(session, actor):
            marked = await message_crud.mark_read(self.db, session.id, actor.id)
            if marked:
                await self.db.commit()
                logger.debug(
                    "Messages marked read",
                    extra={"session_id": str(session.id), "count": marked},
                )
        return await message_crud.list_for_session(self.db, session.id)

    async def list_since(
        self,
        session_id: UUID,
        after_position: int | None,
    ) -> Sequence[MessageModel]:
        """Messages appended after a position; access is checked by the caller."""
        return await message_crud.list_for_session(
            self.db, session_id, after_position=after_position
        )
