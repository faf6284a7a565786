"""
Dashboard statistics schemas.

Each dashboard renders a fixed set of cards; every card is a StatItem.

Dependencies: pydantic
System role: Stats API contracts
"""

from pydantic import BaseModel, ConfigDict, Field


class Trend(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    value: str
    is_up: bool = Field(alias="isUp")


class StatItem(BaseModel):
    """A single dashboard card."""

    value: str
    subtitle: str
    trend: Trend | None = None


class UserStats(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    mood_average: StatItem = Field(alias="moodAverage")
    total_sessions: StatItem = Field(alias="totalSessions")
    unread_messages: StatItem = Field(alias="unreadMessages")
    journal_entries: StatItem = Field(alias="journalEntries")
    next_session: StatItem = Field(alias="nextSession")
    wellness_score: StatItem = Field(alias="wellnessScore")


class CounselorStats(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    active_sessions: StatItem = Field(alias="activeSessions")
    waiting_list: StatItem = Field(alias="waitingList")
    unread_messages: StatItem = Field(alias="unreadMessages")
    total_clients: StatItem = Field(alias="totalClients")
    todays_schedule: StatItem = Field(alias="todaysSchedule")
    session_rating: StatItem = Field(alias="sessionRating")


class AdminStats(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    total_users: StatItem = Field(alias="totalUsers")
    counselors: StatItem
    active_sessions: StatItem = Field(alias="activeSessions")
    system_health: StatItem = Field(alias="systemHealth")
    new_users: StatItem = Field(alias="newUsers")
    sessions_completed: StatItem = Field(alias="sessionsCompleted")
    avg_response: StatItem = Field(alias="avgResponse")
    satisfaction: StatItem
