"""
Session CRUD operations.

Provides Create, Read, Update operations for SessionModel plus the
conditional status updates that make lifecycle transitions atomic.

Dependencies: sqlalchemy, counselhub.boundary.db.models.session_model
System role: Session persistence operations
"""

from collections.abc import Iterable
from datetime import datetime
from typing import Sequence
from uuid import UUID

from sqlalchemy import func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from counselhub.boundary.db.models.session_model import SessionModel, SessionStatus
from counselhub.boundary.db.CRUD.base_crud import BaseCRUD


class SessionCRUD(BaseCRUD[SessionModel]):
    """
    CRUD operations for SessionModel.

    Status changes go through transition(), a single
    UPDATE ... WHERE status IN (...) RETURNING statement. A writer that
    lost a race gets None back instead of overwriting the winner.
    """

    def __init__(self) -> None:
        """Initialize SessionCRUD with SessionModel."""
        super().__init__(SessionModel)

    async def list_filtered(
        self,
        session: AsyncSession,
        user_id: UUID | None = None,
        counselor_id: UUID | None = None,
        status: SessionStatus | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> Sequence[SessionModel]:
        """
        Retrieve sessions matching all given filters, newest first.

        Args:
            session: Async database session
            user_id: Owning user filter
            counselor_id: Assigned counselor filter
            status: Status filter
            limit: Maximum number of sessions to return
            offset: Number of sessions to skip

        Returns:
            Sequence of SessionModels
        """
        stmt = select(SessionModel)
        if user_id is not None:
            stmt = stmt.where(SessionModel.user_id == user_id)
        if counselor_id is not None:
            stmt = stmt.where(SessionModel.counselor_id == counselor_id)
        if status is not None:
            stmt = stmt.where(SessionModel.status == status)
        stmt = stmt.order_by(SessionModel.created_at.desc()).offset(offset)
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await session.execute(stmt)
        return result.scalars().all()

    async def list_for_counselor(
        self,
        session: AsyncSession,
        counselor_id: UUID,
        open_statuses: Iterable[SessionStatus],
        limit: int | None = None,
    ) -> Sequence[SessionModel]:
        """
        Retrieve a counselor's own sessions plus the unassigned open ones.

        Args:
            session: Async database session
            counselor_id: Counselor UUID
            open_statuses: Statuses a counselor may still claim
            limit: Maximum number of sessions to return

        Returns:
            Sequence of SessionModels, newest first
        """
        stmt = (
            select(SessionModel)
            .where(
                or_(
                    SessionModel.counselor_id == counselor_id,
                    (SessionModel.counselor_id.is_(None))
                    & (SessionModel.status.in_(list(open_statuses))),
                )
            )
            .order_by(SessionModel.created_at.desc())
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await session.execute(stmt)
        return result.scalars().all()

    async def list_queue(
        self,
        session: AsyncSession,
        open_statuses: Iterable[SessionStatus],
        limit: int | None = None,
    ) -> Sequence[SessionModel]:
        """
        Retrieve unassigned open sessions in triage order.

        Highest pulse level first (unknown last), then oldest first.
        """
        stmt = (
            select(SessionModel)
            .where(
                SessionModel.counselor_id.is_(None),
                SessionModel.status.in_(list(open_statuses)),
            )
            .order_by(
                SessionModel.pulse_level.desc().nulls_last(),
                SessionModel.created_at.asc(),
            )
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await session.execute(stmt)
        return result.scalars().all()

    async def transition(
        self,
        session: AsyncSession,
        id: UUID,
        from_statuses: Iterable[SessionStatus],
        require_unassigned: bool = False,
        **values,
    ) -> SessionModel | None:
        """
        Atomically update a session only while it is still in an expected status.

        Args:
            session: Async database session
            id: Session UUID
            from_statuses: Statuses the row must currently have
            require_unassigned: Also require counselor_id IS NULL
            **values: Columns to write (status, counselor_id, timestamps, ...)

        Returns:
            Updated SessionModel, or None if the row was missing or had
            already moved on
        """
        stmt = update(SessionModel).where(
            SessionModel.id == id,
            SessionModel.status.in_(list(from_statuses)),
        )
        if require_unassigned:
            stmt = stmt.where(SessionModel.counselor_id.is_(None))
        stmt = stmt.values(**values).returning(SessionModel)
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def claim(
        self,
        session: AsyncSession,
        id: UUID,
        counselor_id: UUID,
        from_statuses: Iterable[SessionStatus],
        at: datetime,
    ) -> SessionModel | None:
        """
        Bind an open, unassigned session to a counselor.

        Returns:
            The activated SessionModel, or None if another writer got there first
        """
        return await self.transition(
            session,
            id,
            from_statuses,
            require_unassigned=True,
            status=SessionStatus.ACTIVE,
            counselor_id=counselor_id,
            assigned_at=at,
        )

    async def count_active_by_counselor(
        self,
        session: AsyncSession,
        counselor_ids: Iterable[UUID],
    ) -> dict[UUID, int]:
        """
        Count ACTIVE sessions per counselor.

        Args:
            session: Async database session
            counselor_ids: Counselors to count for

        Returns:
            dict mapping every requested counselor id to its active count
        """
        ids = list(counselor_ids)
        counts: dict[UUID, int] = {cid: 0 for cid in ids}
        if not ids:
            return counts
        stmt = (
            select(SessionModel.counselor_id, func.count(SessionModel.id))
            .where(
                SessionModel.status == SessionStatus.ACTIVE,
                SessionModel.counselor_id.in_(ids),
            )
            .group_by(SessionModel.counselor_id)
        )
        result = await session.execute(stmt)
        for counselor_id, count in result.all():
            counts[counselor_id] = count
        return counts

    async def count_filtered(
        self,
        session: AsyncSession,
        user_id: UUID | None = None,
        counselor_id: UUID | None = None,
        statuses: Iterable[SessionStatus] | None = None,
        unassigned: bool = False,
        scheduled_between: tuple[datetime, datetime] | None = None,
    ) -> int:
        """Count sessions matching all given filters."""
        stmt = select(func.count(SessionModel.id))
        if user_id is not None:
            stmt = stmt.where(SessionModel.user_id == user_id)
        if counselor_id is not None:
            stmt = stmt.where(SessionModel.counselor_id == counselor_id)
        if statuses is not None:
            stmt = stmt.where(SessionModel.status.in_(list(statuses)))
        if unassigned:
            stmt = stmt.where(SessionModel.counselor_id.is_(None))
        if scheduled_between is not None:
            start, end = scheduled_between
            stmt = stmt.where(
                SessionModel.scheduled_at >= start,
                SessionModel.scheduled_at < end,
            )
        result = await session.execute(stmt)
        return result.scalar_one()

    async def count_distinct_clients(self, session: AsyncSession, counselor_id: UUID) -> int:
        """Count distinct users a counselor has been assigned to."""
        stmt = select(func.count(func.distinct(SessionModel.user_id))).where(
            SessionModel.counselor_id == counselor_id
        )
        result = await session.execute(stmt)
        return result.scalar_one()

    async def next_scheduled(
        self,
        session: AsyncSession,
        user_id: UUID,
        after: datetime,
        statuses: Iterable[SessionStatus],
    ) -> SessionModel | None:
        """Earliest session of the user scheduled after a time."""
        stmt = (
            select(SessionModel)
            .where(
                SessionModel.user_id == user_id,
                SessionModel.scheduled_at >= after,
                SessionModel.status.in_(list(statuses)),
            )
            .order_by(SessionModel.scheduled_at.asc())
            .limit(1)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_assigned(
        self,
        session: AsyncSession,
        counselor_id: UUID | None = None,
    ) -> Sequence[SessionModel]:
        """Sessions that reached assignment (assigned_at set)."""
        stmt = select(SessionModel).where(SessionModel.assigned_at.is_not(None))
        if counselor_id is not None:
            stmt = stmt.where(SessionModel.counselor_id == counselor_id)
        result = await session.execute(stmt)
        return result.scalars().all()


session_crud = SessionCRUD()
