"""
Feedback service.

One rating per (user, session). Submitting again revises the stored row.

Dependencies: counselhub.boundary.db, counselhub.application.services.session_service
System role: Session rating use cases
"""

import logging
from typing import Sequence
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from counselhub.application.services.session_service import is_owner, load_session
from counselhub.boundary.db.CRUD.feedback_crud import feedback_crud
from counselhub.boundary.db.models import FeedbackModel, SessionStatus, UserModel, UserRole
from counselhub.core.exceptions import InvalidTransitionError, PermissionDeniedError

logger = logging.getLogger(__name__)


class FeedbackService:
    """Session rating submission and retrieval."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def submit_feedback(
        self,
        actor: UserModel,
        session_id: UUID,
        rating: int,
        comment: str | None = None,
    ) -> FeedbackModel:
        """
        Rate a completed session, or revise an earlier rating.

        Raises:
            SessionNotFoundError: If unknown or not visible
            PermissionDeniedError: If the actor does not own the session
            InvalidTransitionError: If the session is not completed
        """
        session = await load_session(self.db, session_id, actor)
        if not is_owner(session, actor):
            raise PermissionDeniedError("Only the session owner can leave feedback")
        if session.status != SessionStatus.COMPLETED:
            raise InvalidTransitionError(session.id, session.status.value, "rate")
        # Rollback expires loaded rows; keep plain ids
        owner_id, rated_id = actor.id, session.id

        feedback = await feedback_crud.get_for_user_session(self.db, owner_id, rated_id)
        revised = feedback is not None
        if feedback is None:
            try:
                feedback = await feedback_crud.create(
                    self.db,
                    session_id=rated_id,
                    user_id=owner_id,
                    rating=rating,
                    comment=comment,
                )
                await self.db.commit()
            except IntegrityError:
                # A concurrent first submission created the row; revise it instead
                await self.db.rollback()
                feedback = await feedback_crud.get_for_user_session(self.db, owner_id, rated_id)
                if feedback is None:
                    raise
                revised = True
                logger.warning(
                    "Concurrent feedback submission, revising existing row",
                    extra={"session_id": str(rated_id)},
                )

        if revised:
            feedback.rating = rating
            feedback.comment = comment
            await self.db.commit()

        await self.db.refresh(feedback)
        logger.info(
            "Feedback saved",
            extra={"session_id": str(rated_id), "rating": rating, "revised": revised},
        )
        return feedback

    async def list_feedback(
        self,
        actor: UserModel,
        user_id: UUID | None = None,
    ) -> Sequence[FeedbackModel]:
        target = user_id or actor.id
        if actor.role == UserRole.USER and target != actor.id:
            raise PermissionDeniedError("Members can only read their own feedback")
        return await feedback_crud.list_by_user(self.db, target)
