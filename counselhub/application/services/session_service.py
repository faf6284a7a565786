"""
Session service orchestrator.

Coordinates the counseling session lifecycle: creation, listing,
waiting list, ending, cancellation and counselor notes. Assignment lives
in AssignmentService.

Every status change goes through plan_transition() and is written with a
conditional update, so a replayed call returns the stored record and a
call that lost a race fails with ConflictError instead of overwriting.

Dependencies: counselhub.boundary.db, counselhub.core.session_lifecycle
System role: Session use case orchestration
"""

import logging
from datetime import datetime
from typing import Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from counselhub.application.services.notification_service import NotificationService
from counselhub.boundary.db.base import utcnow
from counselhub.boundary.db.CRUD.session_crud import session_crud
from counselhub.boundary.db.CRUD.user_crud import user_crud
from counselhub.boundary.db.models import SessionModel, SessionStatus, UserModel, UserRole
from counselhub.core.exceptions import (
    ConflictError,
    PermissionDeniedError,
    SessionNotFoundError,
    UserNotFoundError,
    ValidationError,
)
from counselhub.core.session_lifecycle import (
    OPEN_STATUSES,
    SessionAction,
    TransitionOutcome,
    plan_transition,
    source_statuses,
    target_status,
)

logger = logging.getLogger(__name__)


def is_owner(session: SessionModel, actor: UserModel) -> bool:
    return session.user_id == actor.id


def is_assigned_counselor(session: SessionModel, actor: UserModel) -> bool:
    return session.counselor_id is not None and session.counselor_id == actor.id


def is_participant(session: SessionModel, actor: UserModel) -> bool:
    return is_owner(session, actor) or is_assigned_counselor(session, actor)


def can_view(session: SessionModel, actor: UserModel) -> bool:
    """
    Owner, assigned counselor and admins see a session. Any counselor also
    sees sessions that are still open for claiming.
    """
    if actor.role == UserRole.ADMIN or is_participant(session, actor):
        return True
    return (
        actor.role == UserRole.COUNSELOR
        and session.counselor_id is None
        and session.status in OPEN_STATUSES
    )


async def load_session(db: AsyncSession, session_id: UUID, actor: UserModel) -> SessionModel:
    """
    Fetch a session the actor may see.

    Sessions the actor may not see are reported as missing.

    Raises:
        SessionNotFoundError: If unknown or not visible
    """
    session = await session_crud.get_by_id(db, session_id)
    if session is None or not can_view(session, actor):
        raise SessionNotFoundError(session_id)
    return session


async def apply_transition(
    db: AsyncSession,
    session: SessionModel,
    action: SessionAction,
    **values,
) -> tuple[SessionModel, bool]:
    """
    Move a session along the state machine.

    Args:
        db: Async SQLAlchemy session
        session: Current session row
        action: Requested operation
        **values: Extra columns written together with the new status

    Returns:
        (session, changed): changed is False for replays

    Raises:
        InvalidTransitionError: If the action is not allowed from the current status
        ConflictError: If a concurrent writer moved the session first
    """
    if plan_transition(session.id, session.status, action) is TransitionOutcome.REPLAY:
        return session, False

    updated = await session_crud.transition(
        db,
        session.id,
        source_statuses(action),
        status=target_status(action),
        **values,
    )
    if updated is not None:
        return updated, True

    await db.refresh(session)
    if plan_transition(session.id, session.status, action) is TransitionOutcome.REPLAY:
        return session, False
    raise ConflictError(
        "Session was modified concurrently; re-fetch and retry",
        {"session_id": str(session.id), "status": session.status.value},
    )


class SessionService:
    """Session service orchestrator."""

    def __init__(
        self,
        db: AsyncSession,
        notifications: NotificationService | None = None,
    ) -> None:
        """
        Initialize session service with async database session.

        Args:
            db: Async SQLAlchemy session
            notifications: Notification emitter sharing the same session
        """
        self.db = db
        self.notifications = notifications or NotificationService(db)

    async def create_session(
        self,
        actor: UserModel,
        user_id: UUID | None = None,
        pulse_level: int | None = None,
        scheduled_at: datetime | None = None,
    ) -> SessionModel:
        """
        Create a pending session.

        Members create sessions for themselves; admins may create one for
        any member.

        Raises:
            PermissionDeniedError: If a member targets someone else or a counselor calls
            UserNotFoundError: If the target member does not exist
            ValidationError: If pulse_level is out of range
        """
        owner_id = user_id or actor.id
        if actor.role == UserRole.COUNSELOR:
            raise PermissionDeniedError("Counselors cannot request sessions")
        if actor.role == UserRole.USER and owner_id != actor.id:
            raise PermissionDeniedError("Members can only request sessions for themselves")
        if pulse_level is not None and not 0 <= pulse_level <= 5:
            raise ValidationError("pulse_level must be between 0 and 5", field="pulse_level")

        if owner_id != actor.id:
            owner = await user_crud.get_by_id(self.db, owner_id)
            if owner is None or not owner.is_active or owner.role != UserRole.USER:
                raise UserNotFoundError(owner_id)

        session = await session_crud.create(
            self.db,
            user_id=owner_id,
            status=SessionStatus.PENDING,
            pulse_level=pulse_level,
            scheduled_at=scheduled_at,
        )
        await self.db.commit()
        logger.info(
            "Session created",
            extra={"session_id": str(session.id), "user_id": str(owner_id), "pulse_level": pulse_level},
        )
        return session

    async def get_session(self, actor: UserModel, session_id: UUID) -> SessionModel:
        return await load_session(self.db, session_id, actor)

    async def list_sessions(
        self,
        actor: UserModel,
        user_id: UUID | None = None,
        counselor_id: UUID | None = None,
        status: SessionStatus | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> Sequence[SessionModel]:
        """
        List sessions visible to the actor.

        Members always get their own sessions. A counselor without filters
        gets their own sessions plus the open queue; filtering by another
        counselor is refused. Admins may filter freely.
        """
        if actor.role == UserRole.USER:
            if user_id is not None and user_id != actor.id:
                raise PermissionDeniedError("Members can only list their own sessions")
            return await session_crud.list_filtered(
                self.db, user_id=actor.id, counselor_id=counselor_id, status=status,
                limit=limit, offset=offset,
            )

        if actor.role == UserRole.COUNSELOR:
            if counselor_id is not None and counselor_id != actor.id:
                raise PermissionDeniedError("Counselors can only list their own sessions")
            if user_id is None and counselor_id is None and status is None:
                return await session_crud.list_for_counselor(
                    self.db, actor.id, OPEN_STATUSES, limit=limit
                )
            return await session_crud.list_filtered(
                self.db, user_id=user_id, counselor_id=actor.id, status=status,
                limit=limit, offset=offset,
            )

        return await session_crud.list_filtered(
            self.db, user_id=user_id, counselor_id=counselor_id, status=status,
            limit=limit, offset=offset,
        )

    async def list_queue(self, actor: UserModel, limit: int | None = None) -> Sequence[SessionModel]:
        """Unassigned open sessions in triage order (counselors and admins)."""
        if actor.role == UserRole.USER:
            raise PermissionDeniedError("Only counselors and admins can see the queue")
        return await session_crud.list_queue(self.db, OPEN_STATUSES, limit=limit)

    async def enqueue_session(self, actor: UserModel, session_id: UUID) -> SessionModel:
        """Move a pending session onto the waiting list."""
        session = await load_session(self.db, session_id, actor)
        if not (is_owner(session, actor) or actor.role == UserRole.ADMIN):
            raise PermissionDeniedError("Only the owner or an admin can queue a session")

        session, changed = await apply_transition(self.db, session, SessionAction.ENQUEUE)
        if changed:
            await self.db.commit()
            logger.info("Session queued", extra={"session_id": str(session.id)})
        return session

    async def end_session(self, actor: UserModel, session_id: UUID) -> SessionModel:
        """
        Complete an active session.

        Ending an already completed session returns it unchanged, keeping
        the original completed_at.
        """
        session = await load_session(self.db, session_id, actor)
        if not (is_participant(session, actor) or actor.role == UserRole.ADMIN):
            raise PermissionDeniedError("Only participants or an admin can end a session")

        session, changed = await apply_transition(
            self.db, session, SessionAction.END, completed_at=utcnow()
        )
        if changed:
            participants = []
            for account_id in (session.user_id, session.counselor_id):
                if account_id is None:
                    continue
                account = await user_crud.get_by_id(self.db, account_id)
                if account is not None:
                    participants.append(account)
            await self.notifications.notify_ended(session, participants, actor)
            await self.db.commit()
            logger.info(
                "Session completed",
                extra={"session_id": str(session.id), "ended_by": str(actor.id)},
            )
        return session

    async def cancel_session(self, actor: UserModel, session_id: UUID) -> SessionModel:
        """Withdraw a session before it is assigned."""
        session = await load_session(self.db, session_id, actor)
        if not (is_owner(session, actor) or actor.role == UserRole.ADMIN):
            raise PermissionDeniedError("Only the owner or an admin can cancel a session")

        session, changed = await apply_transition(
            self.db, session, SessionAction.CANCEL, cancelled_at=utcnow()
        )
        if changed:
            await self.db.commit()
            logger.info("Session cancelled", extra={"session_id": str(session.id)})
        return session

    async def update_notes(self, actor: UserModel, session_id: UUID, notes: str) -> SessionModel:
        """Replace the counselor annotation on a session."""
        session = await load_session(self.db, session_id, actor)
        if not (is_assigned_counselor(session, actor) or actor.role == UserRole.ADMIN):
            raise PermissionDeniedError("Only the assigned counselor can write notes")

        updated = await session_crud.update_by_id(self.db, session.id, notes=notes)
        await self.db.commit()
        logger.info("Session notes updated", extra={"session_id": str(session.id)})
        return updated
