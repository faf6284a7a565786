"""
Assignment engine.

Pairs open sessions with counselors, either automatically (auto_assign)
or by a counselor claiming a session (activate).

A session is bound with one conditional UPDATE that only matches while
the row is still open and unassigned; of two concurrent claims exactly
one matches. Counselor rows are locked, in id order, before their active
load is counted, so the concurrency cap holds under parallel assignment.

Dependencies: counselhub.boundary.db, counselhub.core.session_lifecycle, counselhub.configs
System role: Assignment use case orchestration
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from counselhub.application.services.notification_service import NotificationService
from counselhub.application.services.session_service import is_owner, load_session
from counselhub.boundary.db.base import as_utc, utcnow
from counselhub.boundary.db.CRUD.session_crud import session_crud
from counselhub.boundary.db.CRUD.user_crud import user_crud
from counselhub.boundary.db.models import SessionModel, SessionStatus, UserModel, UserRole
from counselhub.configs import get_settings
from counselhub.configs.assignment import AssignmentSettings
from counselhub.core.exceptions import (
    ConflictError,
    CounselorAtCapacityError,
    PermissionDeniedError,
    SessionNotFoundError,
)
from counselhub.core.session_lifecycle import (
    OPEN_STATUSES,
    SessionAction,
    TransitionOutcome,
    plan_transition,
)

logger = logging.getLogger(__name__)

NO_COUNSELOR_ADVISORY = (
    "No counselor is available right now. Your session stays in the queue "
    "and will be picked up as soon as someone is free."
)

_NEVER = datetime.min.replace(tzinfo=timezone.utc)


@dataclass
class AssignmentResult:
    """Outcome of an auto-assign attempt."""

    session: SessionModel
    assigned: bool
    advisory: str | None = None


def rank_counselors(
    candidates: Iterable[tuple[UserModel, int]],
    max_concurrent: int,
) -> list[UserModel]:
    """
    Order counselors for automatic assignment.

    Counselors at or above the cap are dropped. The rest are ordered by
    fewest active sessions, then longest idle (never seen first), then
    oldest account, then id.
    """

    def sort_key(item: tuple[UserModel, int]):
        counselor, active = item
        last_active = as_utc(counselor.last_active)
        return (
            active,
            0 if last_active is None else 1,
            last_active or _NEVER,
            as_utc(counselor.created_at) or _NEVER,
            str(counselor.id),
        )

    eligible = [item for item in candidates if item[1] < max_concurrent]
    return [counselor for counselor, _ in sorted(eligible, key=sort_key)]


class AssignmentService:
    """Assignment engine."""

    def __init__(
        self,
        db: AsyncSession,
        settings: AssignmentSettings | None = None,
        notifications: NotificationService | None = None,
    ) -> None:
        """
        Initialize assignment service.

        Args:
            db: Async SQLAlchemy session
            settings: Assignment tunables (concurrency cap)
            notifications: Notification emitter sharing the same session
        """
        self.db = db
        self.settings = settings or get_settings().assignment
        self.notifications = notifications or NotificationService(db, self.settings)

    async def _active_load(self, counselor_id: UUID) -> int:
        counts = await session_crud.count_active_by_counselor(self.db, [counselor_id])
        return counts[counselor_id]

    async def _bind(
        self,
        session: SessionModel,
        counselor: UserModel,
        actor: UserModel,
    ) -> SessionModel | None:
        """Claim the session for the counselor and stage notifications."""
        claimed = await session_crud.claim(
            self.db, session.id, counselor.id, OPEN_STATUSES, utcnow()
        )
        if claimed is None:
            return None
        owner = await user_crud.get_by_id(self.db, claimed.user_id)
        if owner is not None:
            await self.notifications.notify_assigned(claimed, owner, counselor, actor)
        return claimed

    async def auto_assign(self, actor: UserModel, session_id: UUID) -> AssignmentResult:
        """
        Assign the best available counselor to an open session.

        An already active session is returned as assigned. With no eligible
        counselor the session is returned unchanged with an advisory.

        Raises:
            SessionNotFoundError: If unknown or not visible
            PermissionDeniedError: If a member targets someone else's session
            InvalidTransitionError: If the session is completed or cancelled
            ConflictError: If the session changed state concurrently
        """
        session = await load_session(self.db, session_id, actor)
        if actor.role == UserRole.USER and not is_owner(session, actor):
            raise PermissionDeniedError("Members can only assign their own sessions")

        if plan_transition(session.id, session.status, SessionAction.ASSIGN) is TransitionOutcome.REPLAY:
            return AssignmentResult(session=session, assigned=True)

        cap = self.settings.max_concurrent_sessions
        candidates = await user_crud.list_eligible_counselors(self.db)
        # Loads are counted only after every candidate row is locked
        locked = await user_crud.lock_counselors(self.db, [c.id for c in candidates])
        pool = [c for c in locked if c.is_active and c.is_available]
        loads = await session_crud.count_active_by_counselor(self.db, [c.id for c in pool])
        ranked = rank_counselors(((c, loads[c.id]) for c in pool), cap)

        if not ranked:
            await self.db.commit()
            logger.info(
                "No counselor available",
                extra={"session_id": str(session.id), "candidates": len(candidates)},
            )
            return AssignmentResult(
                session=session, assigned=False, advisory=NO_COUNSELOR_ADVISORY
            )

        counselor = ranked[0]
        claimed = await self._bind(session, counselor, actor)
        if claimed is None:
            await self.db.refresh(session)
            if session.status == SessionStatus.ACTIVE:
                await self.db.commit()
                return AssignmentResult(session=session, assigned=True)
            raise ConflictError(
                "Session was modified concurrently; re-fetch and retry",
                {"session_id": str(session.id), "status": session.status.value},
            )

        await self.db.commit()
        logger.info(
            "Session auto-assigned",
            extra={
                "session_id": str(claimed.id),
                "counselor_id": str(counselor.id),
                "candidates": len(ranked),
            },
        )
        return AssignmentResult(session=claimed, assigned=True)

    async def activate(self, actor: UserModel, session_id: UUID) -> SessionModel:
        """
        Let a counselor claim an open session for themself.

        Repeating a claim the counselor already holds returns the session.

        Raises:
            PermissionDeniedError: If the actor is not a counselor
            SessionNotFoundError: If unknown
            ConflictError: If another counselor holds the session
            CounselorAtCapacityError: If the counselor is at the cap
            InvalidTransitionError: If the session is completed or cancelled
        """
        if actor.role != UserRole.COUNSELOR:
            raise PermissionDeniedError("Only counselors can claim sessions")

        session = await session_crud.get_by_id(self.db, session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        if session.status == SessionStatus.ACTIVE:
            if session.counselor_id == actor.id:
                return session
            raise ConflictError(
                "Session is already claimed by another counselor",
                {"session_id": str(session.id)},
            )
        plan_transition(session.id, session.status, SessionAction.ACTIVATE)

        cap = self.settings.max_concurrent_sessions
        counselor = await user_crud.lock_for_assignment(self.db, actor.id)
        if await self._active_load(actor.id) >= cap:
            raise CounselorAtCapacityError(actor.id, cap)

        claimed = await self._bind(session, counselor or actor, actor)
        if claimed is None:
            await self.db.refresh(session)
            if session.status == SessionStatus.ACTIVE and session.counselor_id == actor.id:
                return session
            raise ConflictError(
                "Session was claimed by another counselor",
                {"session_id": str(session.id), "status": session.status.value},
            )

        await self.db.commit()
        logger.info(
            "Session claimed",
            extra={"session_id": str(claimed.id), "counselor_id": str(actor.id)},
        )
        return claimed
