"""
Integration tests for the assignment engine.

Covers counselor ranking against live loads, the concurrency cap,
idempotent assignment and competing counselor claims.
"""

from datetime import timedelta

import pytest

from counselhub.application.services.assignment_service import (
    NO_COUNSELOR_ADVISORY,
    AssignmentService,
)
from counselhub.application.services.notification_service import NotificationService
from counselhub.application.services.session_service import SessionService
from counselhub.boundary.db.base import utcnow
from counselhub.boundary.db.CRUD.notification_crud import notification_crud
from counselhub.boundary.db.CRUD.session_crud import session_crud
from counselhub.boundary.db.CRUD.user_crud import user_crud
from counselhub.boundary.db.models import SessionStatus, UserRole
from counselhub.core.exceptions import (
    ConflictError,
    CounselorAtCapacityError,
    InvalidTransitionError,
    PermissionDeniedError,
    SessionNotFoundError,
)


def _ago(minutes: int):
    return utcnow() - timedelta(minutes=minutes)


@pytest.fixture
def service(test_async_db, assignment_settings) -> AssignmentService:
    return AssignmentService(
        test_async_db,
        assignment_settings,
        NotificationService(test_async_db, assignment_settings),
    )


class TestAutoAssign:
    """Test suite for auto_assign()."""

    @pytest.mark.asyncio
    async def test_picks_counselor_with_fewest_active_sessions(
        self, service, make_account, make_session
    ) -> None:
        # Arrange
        admin = await make_account(UserRole.ADMIN)
        member = await make_account()
        busy = await make_account(UserRole.COUNSELOR, last_active=_ago(120))
        free = await make_account(UserRole.COUNSELOR, last_active=_ago(1))
        await make_session(member, status=SessionStatus.ACTIVE, counselor=busy)
        session = await make_session(member, status=SessionStatus.WAITING)

        # Act
        result = await service.auto_assign(admin, session.id)

        # Assert
        assert result.assigned is True
        assert result.advisory is None
        assert result.session.status == SessionStatus.ACTIVE
        assert result.session.counselor_id == free.id

    @pytest.mark.asyncio
    async def test_ties_go_to_longest_idle_counselor(
        self, service, make_account, make_session
    ) -> None:
        member = await make_account()
        await make_account(UserRole.COUNSELOR, last_active=_ago(1))
        idle = await make_account(UserRole.COUNSELOR, last_active=_ago(90))
        session = await make_session(member)

        result = await service.auto_assign(member, session.id)

        assert result.session.counselor_id == idle.id

    @pytest.mark.asyncio
    async def test_skips_unavailable_and_deleted_counselors(
        self, service, make_account, make_session
    ) -> None:
        member = await make_account()
        await make_account(UserRole.COUNSELOR, is_available=False, last_active=_ago(500))
        await make_account(UserRole.COUNSELOR, is_active=False, last_active=_ago(400))
        available = await make_account(UserRole.COUNSELOR, last_active=_ago(1))
        session = await make_session(member)

        result = await service.auto_assign(member, session.id)

        assert result.session.counselor_id == available.id

    @pytest.mark.asyncio
    async def test_no_counselor_leaves_session_open_with_advisory(
        self, service, make_account, make_session
    ) -> None:
        # Arrange
        member = await make_account()
        full = await make_account(UserRole.COUNSELOR)
        await make_session(member, status=SessionStatus.ACTIVE, counselor=full)
        await make_session(member, status=SessionStatus.ACTIVE, counselor=full)
        session = await make_session(member, status=SessionStatus.WAITING)

        # Act
        result = await service.auto_assign(member, session.id)

        # Assert
        assert result.assigned is False
        assert result.advisory == NO_COUNSELOR_ADVISORY
        assert result.session.status == SessionStatus.WAITING
        assert result.session.counselor_id is None

    @pytest.mark.asyncio
    async def test_repeat_returns_existing_assignment(
        self, service, make_account, make_session
    ) -> None:
        member = await make_account()
        first = await make_account(UserRole.COUNSELOR, last_active=_ago(60))
        await make_account(UserRole.COUNSELOR, last_active=_ago(30))
        session = await make_session(member)

        initial = await service.auto_assign(member, session.id)
        repeat = await service.auto_assign(member, session.id)

        assert initial.session.counselor_id == first.id
        assert repeat.assigned is True
        assert repeat.session.counselor_id == first.id

    @pytest.mark.asyncio
    async def test_completed_session_cannot_be_assigned(
        self, service, make_account, make_session
    ) -> None:
        member = await make_account()
        counselor = await make_account(UserRole.COUNSELOR)
        session = await make_session(member, status=SessionStatus.COMPLETED, counselor=counselor)

        with pytest.raises(InvalidTransitionError):
            await service.auto_assign(member, session.id)

    @pytest.mark.asyncio
    async def test_member_cannot_assign_someone_elses_session(
        self, service, make_account, make_session
    ) -> None:
        owner = await make_account()
        other = await make_account()
        await make_account(UserRole.COUNSELOR)
        session = await make_session(owner)

        with pytest.raises(SessionNotFoundError):
            await service.auto_assign(other, session.id)
        assert (await session_crud.get_by_id(service.db, session.id)).counselor_id is None

    @pytest.mark.asyncio
    async def test_assignment_notifies_owner_and_counselor(
        self, test_async_db, service, make_account, make_session
    ) -> None:
        member = await make_account()
        counselor = await make_account(UserRole.COUNSELOR)
        session = await make_session(member)

        await service.auto_assign(member, session.id)

        owner_inbox = await notification_crud.list_for_recipient(test_async_db, member.id)
        counselor_inbox = await notification_crud.list_for_recipient(test_async_db, counselor.id)
        assert [n.title for n in owner_inbox] == ["Counselor assigned"]
        assert [n.title for n in counselor_inbox] == ["New session assigned"]
        assert owner_inbox[0].session_id == session.id


class TestActivate:
    """Test suite for activate()."""

    @pytest.mark.asyncio
    async def test_counselor_claims_waiting_session(
        self, service, make_account, make_session
    ) -> None:
        member = await make_account()
        counselor = await make_account(UserRole.COUNSELOR)
        session = await make_session(member, status=SessionStatus.WAITING)

        claimed = await service.activate(counselor, session.id)

        assert claimed.status == SessionStatus.ACTIVE
        assert claimed.counselor_id == counselor.id
        assert claimed.assigned_at is not None

    @pytest.mark.asyncio
    async def test_second_counselor_gets_conflict(
        self, service, make_account, make_session
    ) -> None:
        # Arrange
        member = await make_account()
        first = await make_account(UserRole.COUNSELOR)
        second = await make_account(UserRole.COUNSELOR)
        session = await make_session(member, status=SessionStatus.WAITING)

        # Act
        claimed = await service.activate(first, session.id)

        # Assert
        with pytest.raises(ConflictError):
            await service.activate(second, session.id)
        assert claimed.counselor_id == first.id

    @pytest.mark.asyncio
    async def test_claiming_again_is_a_replay(self, service, make_account, make_session) -> None:
        member = await make_account()
        counselor = await make_account(UserRole.COUNSELOR)
        session = await make_session(member, status=SessionStatus.WAITING)

        first = await service.activate(counselor, session.id)
        assigned_at = first.assigned_at
        again = await service.activate(counselor, session.id)

        assert again.assigned_at == assigned_at

    @pytest.mark.asyncio
    async def test_counselor_at_capacity_cannot_claim(
        self, service, make_account, make_session
    ) -> None:
        member = await make_account()
        counselor = await make_account(UserRole.COUNSELOR)
        await make_session(member, status=SessionStatus.ACTIVE, counselor=counselor)
        await make_session(member, status=SessionStatus.ACTIVE, counselor=counselor)
        session = await make_session(member, status=SessionStatus.WAITING)

        with pytest.raises(CounselorAtCapacityError):
            await service.activate(counselor, session.id)

    @pytest.mark.asyncio
    async def test_members_cannot_claim(self, service, make_account, make_session) -> None:
        member = await make_account()
        session = await make_session(member, status=SessionStatus.WAITING)

        with pytest.raises(PermissionDeniedError):
            await service.activate(member, session.id)

    @pytest.mark.asyncio
    async def test_cancelled_session_cannot_be_claimed(
        self, service, make_account, make_session
    ) -> None:
        member = await make_account()
        counselor = await make_account(UserRole.COUNSELOR)
        session = await make_session(member, status=SessionStatus.CANCELLED)

        with pytest.raises(InvalidTransitionError):
            await service.activate(counselor, session.id)

    @pytest.mark.asyncio
    async def test_active_sessions_always_have_a_counselor(
        self, test_async_db, service, make_account, make_session
    ) -> None:
        # Arrange
        member = await make_account()
        counselor = await make_account(UserRole.COUNSELOR)
        for _ in range(3):
            session = await make_session(member)
            await service.auto_assign(member, session.id)

        # Act
        active = await session_crud.list_filtered(test_async_db, status=SessionStatus.ACTIVE)

        # Assert
        assert len(active) == 2
        assert all(s.counselor_id == counselor.id for s in active)


class TestCompetingWriters:
    """
    Two requests on separate connections racing for one session.

    The loser has already read the session as open when the winner commits,
    so its conditional claim is what decides the outcome.
    """

    @pytest.mark.asyncio
    async def test_second_counselor_loses_claim_race(
        self, file_db_factory, seed_session, assignment_settings
    ) -> None:
        # Arrange
        member, (first, second), session_id = await seed_session(counselors=2)

        async with file_db_factory() as db_late, file_db_factory() as db_early:
            late = AssignmentService(db_late, assignment_settings)
            early = AssignmentService(db_early, assignment_settings)
            stale = await session_crud.get_by_id(db_late, session_id)
            assert stale.status == SessionStatus.WAITING

            # Act
            winner = await early.activate(first, session_id)
            with pytest.raises(ConflictError):
                await late.activate(second, session_id)

        # Assert
        assert winner.counselor_id == first.id
        async with file_db_factory() as db:
            stored = await session_crud.get_by_id(db, session_id)
            inbox = await notification_crud.list_for_recipient(db, member.id)
        assert stored.status == SessionStatus.ACTIVE
        assert stored.counselor_id == first.id
        assert [n.title for n in inbox] == ["Counselor assigned"]

    @pytest.mark.asyncio
    async def test_same_counselor_losing_race_to_itself_gets_the_session(
        self, file_db_factory, seed_session, assignment_settings
    ) -> None:
        member, (counselor,), session_id = await seed_session()

        async with file_db_factory() as db_late, file_db_factory() as db_early:
            late = AssignmentService(db_late, assignment_settings)
            await session_crud.get_by_id(db_late, session_id)

            await AssignmentService(db_early, assignment_settings).activate(counselor, session_id)
            again = await late.activate(counselor, session_id)

        assert again.status == SessionStatus.ACTIVE
        assert again.counselor_id == counselor.id

    @pytest.mark.asyncio
    async def test_auto_assign_losing_to_claim_returns_winner(
        self, file_db_factory, seed_session, assignment_settings
    ) -> None:
        member, (first, second), session_id = await seed_session(counselors=2)

        async with file_db_factory() as db_late, file_db_factory() as db_early:
            late = AssignmentService(db_late, assignment_settings)
            await session_crud.get_by_id(db_late, session_id)

            await AssignmentService(db_early, assignment_settings).activate(first, session_id)
            result = await late.auto_assign(member, session_id)

        assert result.assigned is True
        assert result.session.counselor_id == first.id
        async with file_db_factory() as db:
            counts = await session_crud.count_active_by_counselor(db, [first.id, second.id])
        assert counts == {first.id: 1, second.id: 0}

    @pytest.mark.asyncio
    async def test_auto_assign_losing_to_cancel_conflicts(
        self, file_db_factory, seed_session, assignment_settings
    ) -> None:
        member, _, session_id = await seed_session()

        async with file_db_factory() as db_late, file_db_factory() as db_early:
            late = AssignmentService(db_late, assignment_settings)
            await session_crud.get_by_id(db_late, session_id)

            sessions = SessionService(db_early, NotificationService(db_early, assignment_settings))
            await sessions.cancel_session(member, session_id)
            with pytest.raises(ConflictError):
                await late.auto_assign(member, session_id)

    @pytest.mark.asyncio
    async def test_all_candidates_locked_in_one_id_ordered_batch(
        self, service, make_account, make_session, monkeypatch
    ) -> None:
        # Arrange
        member = await make_account()
        counselors = [
            await make_account(UserRole.COUNSELOR, last_active=_ago(minutes))
            for minutes in (1, 2, 3)
        ]
        session = await make_session(member)
        lock = user_crud.lock_counselors
        batches = []

        async def recording_lock(db, ids):
            rows = await lock(db, ids)
            batches.append([row.id for row in rows])
            return rows

        monkeypatch.setattr(user_crud, "lock_counselors", recording_lock)

        # Act
        result = await service.auto_assign(member, session.id)

        # Assert
        assert batches == [sorted(c.id for c in counselors)]
        assert result.session.counselor_id == counselors[2].id
