"""
Integration tests for check-ins, feedback and the notification inbox.
"""

import uuid
from datetime import timedelta

import pytest

from counselhub.application.services.checkin_service import CheckInService
from counselhub.application.services.feedback_service import FeedbackService
from counselhub.application.services.notification_service import NotificationService
from counselhub.boundary.db.CRUD.feedback_crud import feedback_crud
from counselhub.boundary.db.models import SessionStatus, UserRole
from counselhub.core.exceptions import (
    CheckInNotFoundError,
    InvalidTransitionError,
    NotificationNotFoundError,
    PermissionDeniedError,
)


class TestCheckInService:
    """Test suite for CheckInService."""

    @pytest.mark.asyncio
    async def test_create_and_list_own_checkins(self, test_async_db, make_account) -> None:
        # Arrange
        service = CheckInService(test_async_db)
        member = await make_account()

        # Act
        created = await service.create_checkin(member, mood=4, note="  slept well ")
        await service.create_checkin(member, mood=2, note="   ")
        checkins = await service.list_checkins(member)

        # Assert
        assert created.note == "slept well"
        assert len(checkins) == 2
        assert {c.mood for c in checkins} == {4, 2}
        assert {c.note for c in checkins} == {"slept well", None}

    @pytest.mark.asyncio
    async def test_member_cannot_read_others(self, test_async_db, make_account) -> None:
        service = CheckInService(test_async_db)
        member = await make_account()
        other = await make_account()
        checkin = await service.create_checkin(other, mood=3)

        with pytest.raises(PermissionDeniedError):
            await service.list_checkins(member, user_id=other.id)
        with pytest.raises(CheckInNotFoundError):
            await service.get_checkin(member, checkin.id)

    @pytest.mark.asyncio
    async def test_counselor_can_read_member_checkins(self, test_async_db, make_account) -> None:
        service = CheckInService(test_async_db)
        member = await make_account()
        counselor = await make_account(UserRole.COUNSELOR)
        await service.create_checkin(member, mood=5)

        checkins = await service.list_checkins(counselor, user_id=member.id)

        assert [c.mood for c in checkins] == [5]


class TestFeedbackService:
    """Test suite for FeedbackService."""

    @pytest.mark.asyncio
    async def test_resubmitting_revises_single_row(
        self, test_async_db, make_account, make_session
    ) -> None:
        # Arrange
        service = FeedbackService(test_async_db)
        member = await make_account()
        counselor = await make_account(UserRole.COUNSELOR)
        session = await make_session(member, status=SessionStatus.COMPLETED, counselor=counselor)

        # Act
        first = await service.submit_feedback(member, session.id, rating=3, comment="ok")
        second = await service.submit_feedback(member, session.id, rating=5)

        # Assert
        assert second.id == first.id
        assert second.rating == 5
        assert second.comment is None
        assert len(await feedback_crud.list_by_user(test_async_db, member.id)) == 1

    @pytest.mark.asyncio
    async def test_first_submission_losing_insert_race_revises_winner(
        self, test_async_db, make_account, make_session, monkeypatch
    ) -> None:
        # Arrange: another submission lands between the lookup and the insert
        service = FeedbackService(test_async_db)
        member = await make_account()
        counselor = await make_account(UserRole.COUNSELOR)
        session = await make_session(member, status=SessionStatus.COMPLETED, counselor=counselor)
        member_id, session_id = member.id, session.id
        await feedback_crud.create(test_async_db, session_id=session_id, user_id=member_id, rating=2)
        await test_async_db.commit()

        lookup = feedback_crud.get_for_user_session
        calls = []

        async def lookup_missing_once(db, user_id, sid):
            calls.append(sid)
            if len(calls) == 1:
                return None
            return await lookup(db, user_id, sid)

        monkeypatch.setattr(feedback_crud, "get_for_user_session", lookup_missing_once)

        # Act
        saved = await service.submit_feedback(member, session_id, rating=5, comment="better")

        # Assert
        assert len(calls) == 2
        assert (saved.rating, saved.comment) == (5, "better")
        rows = await feedback_crud.list_by_user(test_async_db, member_id)
        assert [(r.rating, r.comment) for r in rows] == [(5, "better")]

    @pytest.mark.asyncio
    async def test_active_session_cannot_be_rated(
        self, test_async_db, make_account, make_session
    ) -> None:
        service = FeedbackService(test_async_db)
        member = await make_account()
        counselor = await make_account(UserRole.COUNSELOR)
        session = await make_session(member, status=SessionStatus.ACTIVE, counselor=counselor)

        with pytest.raises(InvalidTransitionError):
            await service.submit_feedback(member, session.id, rating=4)

    @pytest.mark.asyncio
    async def test_counselor_cannot_rate(self, test_async_db, make_account, make_session) -> None:
        service = FeedbackService(test_async_db)
        member = await make_account()
        counselor = await make_account(UserRole.COUNSELOR)
        session = await make_session(member, status=SessionStatus.COMPLETED, counselor=counselor)

        with pytest.raises(PermissionDeniedError):
            await service.submit_feedback(counselor, session.id, rating=5)

    @pytest.mark.asyncio
    async def test_average_rating_per_counselor(
        self, test_async_db, make_account, make_session
    ) -> None:
        service = FeedbackService(test_async_db)
        member = await make_account()
        counselor = await make_account(UserRole.COUNSELOR)
        for rating in (4, 5):
            session = await make_session(member, status=SessionStatus.COMPLETED, counselor=counselor)
            await service.submit_feedback(member, session.id, rating=rating)

        avg, count = await feedback_crud.average_rating(test_async_db, counselor_id=counselor.id)

        assert count == 2
        assert avg == pytest.approx(4.5)


class TestNotificationInbox:
    """Test suite for NotificationService inbox operations."""

    @pytest.mark.asyncio
    async def test_list_is_newest_first_and_delete_acknowledges(
        self, test_async_db, assignment_settings, make_account
    ) -> None:
        # Arrange
        service = NotificationService(test_async_db, assignment_settings)
        member = await make_account()
        older = await service.emit(member, title="first", message="one")
        newer = await service.emit(member, title="second", message="two")
        older.created_at = newer.created_at - timedelta(days=1)
        await test_async_db.commit()

        # Act
        inbox = await service.list_for(member)
        await service.delete(member, older.id)
        remaining = await service.list_for(member)

        # Assert
        assert [n.title for n in inbox] == ["second", "first"]
        assert [n.title for n in remaining] == ["second"]
        assert inbox[0].sender_role == "system"

    @pytest.mark.asyncio
    async def test_cannot_delete_someone_elses_notification(
        self, test_async_db, assignment_settings, make_account
    ) -> None:
        service = NotificationService(test_async_db, assignment_settings)
        member = await make_account()
        other = await make_account()
        notification = await service.emit(other, title="private", message="hidden")
        await test_async_db.commit()

        with pytest.raises(NotificationNotFoundError):
            await service.delete(member, notification.id)
        with pytest.raises(NotificationNotFoundError):
            await service.delete(member, uuid.uuid4())

    @pytest.mark.asyncio
    async def test_never_seen_account_is_offline(
        self, test_async_db, assignment_settings, make_account
    ) -> None:
        service = NotificationService(test_async_db, assignment_settings)
        member = await make_account()

        assert service.is_offline(member) is True
