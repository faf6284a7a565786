"""
Unit tests for counselor ranking.

Pure ordering logic, no database.
"""

import uuid
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

from counselhub.application.services.assignment_service import rank_counselors

BASE = datetime(2026, 1, 1, tzinfo=timezone.utc)


def counselor(name: str, last_active=None, created_offset: int = 0):
    return SimpleNamespace(
        id=uuid.uuid4(),
        username=name,
        last_active=last_active,
        created_at=BASE + timedelta(days=created_offset),
    )


class TestRankCounselors:
    def test_fewest_active_sessions_first(self) -> None:
        busy = counselor("busy", last_active=BASE)
        free = counselor("free", last_active=BASE + timedelta(hours=5))

        ranked = rank_counselors([(busy, 1), (free, 0)], max_concurrent=5)

        assert [c.username for c in ranked] == ["free", "busy"]

    def test_never_seen_then_longest_idle(self) -> None:
        # Arrange
        recent = counselor("recent", last_active=BASE + timedelta(hours=3))
        idle = counselor("idle", last_active=BASE)
        never = counselor("never")

        # Act
        ranked = rank_counselors([(recent, 0), (idle, 0), (never, 0)], max_concurrent=5)

        # Assert
        assert [c.username for c in ranked] == ["never", "idle", "recent"]

    def test_naive_timestamps_compare_as_utc(self) -> None:
        naive = counselor("naive", last_active=datetime(2025, 12, 31, 23, 0))
        aware = counselor("aware", last_active=BASE)

        ranked = rank_counselors([(aware, 0), (naive, 0)], max_concurrent=5)

        assert [c.username for c in ranked] == ["naive", "aware"]

    def test_oldest_account_breaks_remaining_ties(self) -> None:
        young = counselor("young", last_active=BASE, created_offset=10)
        old = counselor("old", last_active=BASE, created_offset=1)

        ranked = rank_counselors([(young, 0), (old, 0)], max_concurrent=5)

        assert [c.username for c in ranked] == ["old", "young"]

    def test_counselors_at_cap_are_dropped(self) -> None:
        full = counselor("full")
        ok = counselor("ok", last_active=BASE)

        ranked = rank_counselors([(full, 3), (ok, 2)], max_concurrent=3)

        assert [c.username for c in ranked] == ["ok"]

    def test_empty_pool(self) -> None:
        assert rank_counselors([], max_concurrent=3) == []
