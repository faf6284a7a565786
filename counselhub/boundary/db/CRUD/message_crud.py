"""
Message CRUD operations.

Append-only message log per session with read receipts.

Dependencies: sqlalchemy, counselhub.boundary.db.models
System role: Messaging log persistence operations
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy import func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from counselhub.boundary.db.models.message_model import MessageModel
from counselhub.boundary.db.models.session_model import SessionModel
from counselhub.boundary.db.CRUD.base_crud import BaseCRUD


class MessageCRUD(BaseCRUD[MessageModel]):
    """
    CRUD operations for MessageModel.

    There is no edit or delete: append() and the read
    receipt update are the only writes.
    """

    def __init__(self) -> None:
        """Initialize MessageCRUD with MessageModel."""
        super().__init__(MessageModel)

    async def append(
        self,
        session: AsyncSession,
        session_id: UUID,
        sender_id: UUID,
        sender_role: str,
        content: str,
    ) -> MessageModel:
        """
        Append a message at the end of a session's history.

        Args:
            session: Async database session
            session_id: Parent session UUID
            sender_id: Author account UUID
            sender_role: Author role
            content: Message body

        Returns:
            Created MessageModel with its position in the session
        """
        # The increment write-locks the session row until commit, so
        # concurrent appends to one session get distinct positions.
        bump = (
            update(SessionModel)
            .where(SessionModel.id == session_id)
            .values(
                message_count=SessionModel.message_count + 1,
                updated_at=SessionModel.updated_at,
            )
            .returning(SessionModel.message_count)
            .execution_options(synchronize_session=False)
        )
        position = (await session.execute(bump)).scalar_one() - 1
        return await self.create(
            session,
            session_id=session_id,
            sender_id=sender_id,
            sender_role=sender_role,
            content=content,
            position=position,
        )

    async def list_for_session(
        self,
        session: AsyncSession,
        session_id: UUID,
        after_position: int | None = None,
    ) -> Sequence[MessageModel]:
        """
        Retrieve a session's messages in insertion order.

        Args:
            session: Async database session
            session_id: Session UUID
            after_position: Only messages with a greater position

        Returns:
            Sequence of MessageModels ordered by (created_at, position)
        """
        stmt = select(MessageModel).where(MessageModel.session_id == session_id)
        if after_position is not None:
            stmt = stmt.where(MessageModel.position > after_position)
        stmt = stmt.order_by(MessageModel.created_at.asc(), MessageModel.position.asc())
        result = await session.execute(stmt)
        return result.scalars().all()

    async def mark_read(
        self,
        session: AsyncSession,
        session_id: UUID,
        reader_id: UUID,
    ) -> int:
        """
        Flag every unread message in the session not written by the reader.

        Returns:
            Number of messages that became read
        """
        stmt = (
            update(MessageModel)
            .where(
                MessageModel.session_id == session_id,
                MessageModel.sender_id != reader_id,
                MessageModel.read.is_(False),
            )
            .values(read=True)
        )
        result = await session.execute(stmt)
        return result.rowcount

    async def count_unread_for(self, session: AsyncSession, reader_id: UUID) -> int:
        """Count unread messages addressed to an account across its sessions."""
        stmt = (
            select(func.count(MessageModel.id))
            .join(SessionModel, SessionModel.id == MessageModel.session_id)
            .where(
                or_(SessionModel.user_id == reader_id, SessionModel.counselor_id == reader_id),
                MessageModel.sender_id != reader_id,
                MessageModel.read.is_(False),
            )
        )
        result = await session.execute(stmt)
        return result.scalar_one()


message_crud = MessageCRUD()
