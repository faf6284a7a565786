"""
Feedback CRUD operations.

Dependencies: sqlalchemy, counselhub.boundary.db.models
System role: Session rating persistence operations
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from counselhub.boundary.db.models.feedback_model import FeedbackModel
from counselhub.boundary.db.models.session_model import SessionModel
from counselhub.boundary.db.CRUD.base_crud import BaseCRUD


class FeedbackCRUD(BaseCRUD[FeedbackModel]):
    """CRUD operations for FeedbackModel."""

    def __init__(self) -> None:
        """Initialize FeedbackCRUD with FeedbackModel."""
        super().__init__(FeedbackModel)

    async def get_for_user_session(
        self,
        session: AsyncSession,
        user_id: UUID,
        session_id: UUID,
    ) -> FeedbackModel | None:
        """Retrieve the feedback a user left for a session, if any."""
        stmt = select(FeedbackModel).where(
            FeedbackModel.user_id == user_id,
            FeedbackModel.session_id == session_id,
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_by_user(
        self,
        session: AsyncSession,
        user_id: UUID,
    ) -> Sequence[FeedbackModel]:
        """Retrieve a user's feedback, newest first."""
        stmt = (
            select(FeedbackModel)
            .where(FeedbackModel.user_id == user_id)
            .order_by(FeedbackModel.created_at.desc())
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def average_rating(
        self,
        session: AsyncSession,
        counselor_id: UUID | None = None,
    ) -> tuple[float | None, int]:
        """
        Average rating and count, optionally for one counselor's sessions.

        Returns:
            (average rating or None when there is no feedback, count)
        """
        stmt = select(func.avg(FeedbackModel.rating), func.count(FeedbackModel.id))
        if counselor_id is not None:
            stmt = stmt.join(SessionModel, SessionModel.id == FeedbackModel.session_id).where(
                SessionModel.counselor_id == counselor_id
            )
        avg, count = (await session.execute(stmt)).one()
        return (float(avg) if avg is not None else None), count


feedback_crud = FeedbackCRUD()
