"""
Check-in ORM model.

Mood time series recorded by users, independent of sessions.

Dependencies: sqlalchemy, counselhub.boundary.db.base
System role: Mood tracking persistence
"""

from uuid import UUID

from sqlalchemy import CheckConstraint, ForeignKey, Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from counselhub.boundary.db.base import Base, TimestampMixin, UUIDMixin


class CheckInModel(Base, UUIDMixin, TimestampMixin):
    """
    Check-in ORM model.

    Attributes:
        user_id: User who checked in
        mood: Ordinal mood score (1-5)
        note: Optional journal note
    """

    __tablename__ = "checkins"
    __table_args__ = (
        CheckConstraint("mood >= 1 AND mood <= 5", name="ck_checkins_mood"),
        Index("idx_checkins_user_created", "user_id", "created_at"),
    )

    user_id: Mapped[UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    mood: Mapped[int] = mapped_column(Integer, nullable=False)
    note: Mapped[str | None] = mapped_column(Text, nullable=True)
