"""
Check-in service.

Dependencies: counselhub.boundary.db
System role: Mood tracking use cases
"""

import logging
from typing import Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from counselhub.boundary.db.CRUD.checkin_crud import checkin_crud
from counselhub.boundary.db.models import CheckInModel, UserModel, UserRole
from counselhub.core.exceptions import CheckInNotFoundError, PermissionDeniedError

logger = logging.getLogger(__name__)


class CheckInService:
    """Mood check-in recording and retrieval."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    def _ensure_can_read(self, actor: UserModel, user_id: UUID) -> None:
        if actor.role == UserRole.USER and actor.id != user_id:
            raise PermissionDeniedError("Members can only read their own check-ins")

    async def create_checkin(
        self,
        actor: UserModel,
        mood: int,
        note: str | None = None,
    ) -> CheckInModel:
        """Record a mood check-in for the actor."""
        note = note.strip() if note else None
        checkin = await checkin_crud.create(self.db, user_id=actor.id, mood=mood, note=note or None)
        await self.db.commit()
        logger.info("Check-in recorded", extra={"user_id": str(actor.id), "mood": mood})
        return checkin

    async def list_checkins(
        self,
        actor: UserModel,
        user_id: UUID | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> Sequence[CheckInModel]:
        target = user_id or actor.id
        self._ensure_can_read(actor, target)
        return await checkin_crud.list_by_user(self.db, target, limit=limit, offset=offset)

    async def get_checkin(self, actor: UserModel, checkin_id: UUID) -> CheckInModel:
        checkin = await checkin_crud.get_by_id(self.db, checkin_id)
        if checkin is None or (actor.role == UserRole.USER and checkin.user_id != actor.id):
            raise CheckInNotFoundError(checkin_id)
        return checkin
