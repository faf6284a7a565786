"""
Unit tests for dashboard statistics.
"""

from datetime import timedelta

import pytest

from counselhub.application.services.stats_service import StatsService
from counselhub.boundary.db.base import utcnow
from counselhub.boundary.db.CRUD.checkin_crud import checkin_crud
from counselhub.boundary.db.models import SessionStatus, UserRole
from counselhub.core.exceptions import PermissionDeniedError


@pytest.fixture
def service(test_async_db, assignment_settings) -> StatsService:
    return StatsService(test_async_db, assignment_settings)


class TestUserStats:
    @pytest.mark.asyncio
    async def test_mood_average_and_trend(self, test_async_db, service, make_account) -> None:
        # Arrange
        member = await make_account()
        now = utcnow()
        for mood, days_ago in [(4, 1), (5, 2), (2, 10)]:
            await checkin_crud.create(
                test_async_db, user_id=member.id, mood=mood, created_at=now - timedelta(days=days_ago)
            )
        await test_async_db.commit()

        # Act
        stats = await service.user_stats(member)

        # Assert
        assert stats.mood_average.value == "4.5/5"
        assert stats.mood_average.trend.value == "2.5"
        assert stats.mood_average.trend.is_up is True
        assert stats.wellness_score.value == "90%"

    @pytest.mark.asyncio
    async def test_empty_dashboard(self, service, make_account) -> None:
        member = await make_account()

        stats = await service.user_stats(member)

        assert stats.mood_average.value == "-"
        assert stats.mood_average.trend is None
        assert stats.total_sessions.value == "0"
        assert stats.next_session.value == "None"

    @pytest.mark.asyncio
    async def test_serializes_with_camel_case_keys(self, service, make_account) -> None:
        member = await make_account()

        payload = (await service.user_stats(member)).model_dump(by_alias=True)

        assert set(payload) == {
            "moodAverage",
            "totalSessions",
            "unreadMessages",
            "journalEntries",
            "nextSession",
            "wellnessScore",
        }


class TestRoleDashboards:
    @pytest.mark.asyncio
    async def test_counselor_stats_count_active_and_waiting(
        self, service, make_account, make_session
    ) -> None:
        member = await make_account()
        counselor = await make_account(UserRole.COUNSELOR)
        await make_session(member, status=SessionStatus.ACTIVE, counselor=counselor)
        await make_session(member, status=SessionStatus.WAITING)
        await make_session(member, status=SessionStatus.PENDING)

        stats = await service.counselor_stats(counselor)

        assert stats.active_sessions.value == "1"
        assert stats.active_sessions.subtitle == "of 2 slots"
        assert stats.waiting_list.value == "2"
        assert stats.total_clients.value == "1"

    @pytest.mark.asyncio
    async def test_admin_stats_require_admin(self, service, make_account) -> None:
        member = await make_account()

        with pytest.raises(PermissionDeniedError):
            await service.admin_stats(member)

    @pytest.mark.asyncio
    async def test_admin_stats_counts(self, service, make_account, make_session) -> None:
        admin = await make_account(UserRole.ADMIN)
        member = await make_account()
        await make_account(UserRole.COUNSELOR)
        await make_account(UserRole.COUNSELOR, is_available=False)
        await make_session(member, status=SessionStatus.WAITING)

        stats = await service.admin_stats(admin)

        assert stats.total_users.value == "1"
        assert stats.counselors.value == "2"
        assert stats.counselors.subtitle == "1 available"
        assert stats.active_sessions.subtitle == "1 waiting"
        assert stats.avg_response.value == "-"
