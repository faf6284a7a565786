"""
Dashboard statistics service.

Builds the stat cards shown on the member, counselor and admin
dashboards from live counts.

Dependencies: counselhub.boundary.db, counselhub.configs
System role: Dashboard read model
"""

import logging
from datetime import timedelta

from sqlalchemy.ext.asyncio import AsyncSession

from counselhub.boundary.db.base import as_utc, utcnow
from counselhub.boundary.db.CRUD import (
    checkin_crud,
    feedback_crud,
    message_crud,
    session_crud,
    user_crud,
)
from counselhub.boundary.db.models import SessionStatus, UserModel, UserRole
from counselhub.configs import get_settings
from counselhub.configs.assignment import AssignmentSettings
from counselhub.core.exceptions import PermissionDeniedError
from counselhub.core.session_lifecycle import OPEN_STATUSES
from counselhub.models.stats import AdminStats, CounselorStats, StatItem, Trend, UserStats

logger = logging.getLogger(__name__)

MOOD_WINDOW = timedelta(days=7)
NEW_USER_WINDOW = timedelta(days=7)
UPCOMING_STATUSES = (SessionStatus.PENDING, SessionStatus.WAITING, SessionStatus.ACTIVE)


def _score(avg: float | None, scale: int = 5) -> str:
    return "-" if avg is None else f"{avg:.1f}/{scale}"


def _percent(avg: float | None, scale: int = 5) -> str:
    return "-" if avg is None else f"{round(avg / scale * 100)}%"


def _wellness_label(avg: float | None) -> str:
    if avg is None:
        return "Check in to see your score"
    if avg >= 4:
        return "Doing well"
    if avg >= 3:
        return "Steady"
    return "Take it easy"


def _minutes(delta: timedelta) -> str:
    minutes = delta.total_seconds() / 60
    if minutes < 60:
        return f"{round(minutes)}m"
    return f"{minutes / 60:.1f}h"


class StatsService:
    """Dashboard stat cards per role."""

    def __init__(self, db: AsyncSession, settings: AssignmentSettings | None = None) -> None:
        self.db = db
        self.settings = settings or get_settings().assignment

    async def user_stats(self, actor: UserModel) -> UserStats:
        """Cards for a member's dashboard."""
        now = utcnow()
        mood_avg, _ = await checkin_crud.mood_summary(self.db, actor.id, since=now - MOOD_WINDOW)
        prev_avg, _ = await checkin_crud.mood_summary(
            self.db, actor.id, since=now - 2 * MOOD_WINDOW, until=now - MOOD_WINDOW
        )

        trend = None
        if mood_avg is not None and prev_avg is not None:
            diff = mood_avg - prev_avg
            trend = Trend(value=f"{abs(diff):.1f}", is_up=diff >= 0)

        total = await session_crud.count_filtered(self.db, user_id=actor.id)
        completed = await session_crud.count_filtered(
            self.db, user_id=actor.id, statuses=[SessionStatus.COMPLETED]
        )
        unread = await message_crud.count_unread_for(self.db, actor.id)
        journal = await checkin_crud.count_with_notes(self.db, actor.id)
        upcoming = await session_crud.next_scheduled(self.db, actor.id, now, UPCOMING_STATUSES)
        scheduled_at = as_utc(upcoming.scheduled_at) if upcoming else None

        return UserStats(
            mood_average=StatItem(value=_score(mood_avg), subtitle="Last 7 days", trend=trend),
            total_sessions=StatItem(value=str(total), subtitle=f"{completed} completed"),
            unread_messages=StatItem(value=str(unread), subtitle="From your counselor"),
            journal_entries=StatItem(value=str(journal), subtitle="Check-ins with notes"),
            next_session=StatItem(
                value=scheduled_at.strftime("%b %d, %H:%M") if scheduled_at else "None",
                subtitle="Scheduled (UTC)" if scheduled_at else "Nothing scheduled",
            ),
            wellness_score=StatItem(value=_percent(mood_avg), subtitle=_wellness_label(mood_avg)),
        )

    async def counselor_stats(self, actor: UserModel) -> CounselorStats:
        """Cards for a counselor's dashboard."""
        if actor.role != UserRole.COUNSELOR:
            raise PermissionDeniedError("Counselor statistics are only available to counselors")

        now = utcnow()
        day_start = now.replace(hour=0, minute=0, second=0, microsecond=0)
        active = await session_crud.count_filtered(
            self.db, counselor_id=actor.id, statuses=[SessionStatus.ACTIVE]
        )
        waiting = await session_crud.count_filtered(self.db, statuses=OPEN_STATUSES, unassigned=True)
        unread = await message_crud.count_unread_for(self.db, actor.id)
        clients = await session_crud.count_distinct_clients(self.db, actor.id)
        today = await session_crud.count_filtered(
            self.db,
            counselor_id=actor.id,
            scheduled_between=(day_start, day_start + timedelta(days=1)),
        )
        rating, reviews = await feedback_crud.average_rating(self.db, counselor_id=actor.id)

        return CounselorStats(
            active_sessions=StatItem(
                value=str(active),
                subtitle=f"of {self.settings.max_concurrent_sessions} slots",
            ),
            waiting_list=StatItem(value=str(waiting), subtitle="Unassigned sessions"),
            unread_messages=StatItem(value=str(unread), subtitle="From your clients"),
            total_clients=StatItem(value=str(clients), subtitle="All time"),
            todays_schedule=StatItem(value=str(today), subtitle="Sessions today"),
            session_rating=StatItem(value=_score(rating), subtitle=f"{reviews} reviews"),
        )

    async def admin_stats(self, actor: UserModel) -> AdminStats:
        """Cards for the admin dashboard."""
        if actor.role != UserRole.ADMIN:
            raise PermissionDeniedError("Admin statistics are only available to admins")

        now = utcnow()
        users = await user_crud.count_by_role(self.db, UserRole.USER)
        counselors = await user_crud.count_by_role(self.db, UserRole.COUNSELOR)
        available = len(await user_crud.list_eligible_counselors(self.db))
        active = await session_crud.count_filtered(self.db, statuses=[SessionStatus.ACTIVE])
        new_users = await user_crud.count_by_role(
            self.db, UserRole.USER, created_since=now - NEW_USER_WINDOW
        )
        completed = await session_crud.count_filtered(self.db, statuses=[SessionStatus.COMPLETED])
        waiting = await session_crud.count_filtered(self.db, statuses=OPEN_STATUSES, unassigned=True)

        waits = [
            as_utc(s.assigned_at) - as_utc(s.created_at)
            for s in await session_crud.list_assigned(self.db)
        ]
        avg_wait = sum(waits, timedelta()) / len(waits) if waits else None
        rating, reviews = await feedback_crud.average_rating(self.db)

        return AdminStats(
            total_users=StatItem(value=str(users), subtitle="Active members"),
            counselors=StatItem(value=str(counselors), subtitle=f"{available} available"),
            active_sessions=StatItem(value=str(active), subtitle=f"{waiting} waiting"),
            system_health=StatItem(value="Operational", subtitle="Database reachable"),
            new_users=StatItem(value=str(new_users), subtitle="Last 7 days"),
            sessions_completed=StatItem(value=str(completed), subtitle="All time"),
            avg_response=StatItem(
                value=_minutes(avg_wait) if avg_wait is not None else "-",
                subtitle="Request to assignment",
            ),
            satisfaction=StatItem(value=_percent(rating), subtitle=f"{reviews} ratings"),
        )
