"""
Check-in CRUD operations.

Dependencies: sqlalchemy, counselhub.boundary.db.models.checkin_model
System role: Mood tracking persistence operations
"""

from datetime import datetime
from typing import Sequence
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from counselhub.boundary.db.models.checkin_model import CheckInModel
from counselhub.boundary.db.CRUD.base_crud import BaseCRUD


class CheckInCRUD(BaseCRUD[CheckInModel]):
    """CRUD operations for CheckInModel."""

    def __init__(self) -> None:
        """Initialize CheckInCRUD with CheckInModel."""
        super().__init__(CheckInModel)

    async def list_by_user(
        self,
        session: AsyncSession,
        user_id: UUID,
        limit: int | None = None,
        offset: int = 0,
    ) -> Sequence[CheckInModel]:
        """
        Retrieve a user's check-ins, newest first.

        Args:
            session: Async database session
            user_id: User UUID
            limit: Maximum number of check-ins to return
            offset: Number of check-ins to skip

        Returns:
            Sequence of CheckInModels
        """
        stmt = (
            select(CheckInModel)
            .where(CheckInModel.user_id == user_id)
            .order_by(CheckInModel.created_at.desc())
            .offset(offset)
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await session.execute(stmt)
        return result.scalars().all()

    async def mood_summary(
        self,
        session: AsyncSession,
        user_id: UUID,
        since: datetime | None = None,
        until: datetime | None = None,
    ) -> tuple[float | None, int]:
        """
        Average mood and number of check-ins within [since, until).

        Returns:
            (average mood or None when there are no check-ins, count)
        """
        stmt = select(func.avg(CheckInModel.mood), func.count(CheckInModel.id)).where(
            CheckInModel.user_id == user_id
        )
        if since is not None:
            stmt = stmt.where(CheckInModel.created_at >= since)
        if until is not None:
            stmt = stmt.where(CheckInModel.created_at < until)
        avg, count = (await session.execute(stmt)).one()
        return (float(avg) if avg is not None else None), count

    async def count_with_notes(self, session: AsyncSession, user_id: UUID) -> int:
        """Count check-ins that carry a journal note."""
        stmt = select(func.count(CheckInModel.id)).where(
            CheckInModel.user_id == user_id,
            CheckInModel.note.is_not(None),
            CheckInModel.note != "",
        )
        result = await session.execute(stmt)
        return result.scalar_one()


checkin_crud = CheckInCRUD()
