"""
Notification CRUD operations.

Dependencies: sqlalchemy, counselhub.boundary.db.models.notification_model
System role: Notification persistence operations
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from counselhub.boundary.db.models.notification_model import NotificationModel
from counselhub.boundary.db.CRUD.base_crud import BaseCRUD


class NotificationCRUD(BaseCRUD[NotificationModel]):
    """CRUD operations for NotificationModel."""

    def __init__(self) -> None:
        """Initialize NotificationCRUD with NotificationModel."""
        super().__init__(NotificationModel)

    async def list_for_recipient(
        self,
        session: AsyncSession,
        recipient_id: UUID,
        limit: int | None = None,
    ) -> Sequence[NotificationModel]:
        """
        Retrieve notifications for a recipient, newest first.

        Args:
            session: Async database session
            recipient_id: Recipient account UUID
            limit: Maximum number of notifications to return

        Returns:
            Sequence of NotificationModels
        """
        stmt = (
            select(NotificationModel)
            .where(NotificationModel.recipient_id == recipient_id)
            .order_by(NotificationModel.created_at.desc())
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await session.execute(stmt)
        return result.scalars().all()

    async def delete_for_recipient(
        self,
        session: AsyncSession,
        id: UUID,
        recipient_id: UUID,
    ) -> bool:
        """
        Delete a notification only if it belongs to the recipient.

        Returns:
            True if a row was deleted, False otherwise
        """
        stmt = delete(NotificationModel).where(
            NotificationModel.id == id,
            NotificationModel.recipient_id == recipient_id,
        )
        result = await session.execute(stmt)
        return result.rowcount > 0


notification_crud = NotificationCRUD()
