"""
Feedback ORM model.

Dependencies: sqlalchemy, counselhub.boundary.db.base
System role: Session rating persistence
"""

from uuid import UUID

from sqlalchemy import CheckConstraint, ForeignKey, Integer, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from counselhub.boundary.db.base import Base, TimestampMixin, UUIDMixin


class FeedbackModel(Base, UUIDMixin, TimestampMixin):
    """
    Feedback ORM model, one row per (user, session).

    Attributes:
        session_id: Rated session
        user_id: Session owner who left the rating
        rating: Score (1-5)
        comment: Optional free text
    """

    __tablename__ = "feedback"
    __table_args__ = (
        CheckConstraint("rating >= 1 AND rating <= 5", name="ck_feedback_rating"),
        UniqueConstraint("user_id", "session_id", name="uq_feedback_user_session"),
    )

    session_id: Mapped[UUID] = mapped_column(
        ForeignKey("sessions.id", ondelete="CASCADE"),
        nullable=False,
    )
    user_id: Mapped[UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    rating: Mapped[int] = mapped_column(Integer, nullable=False)
    comment: Mapped[str | None] = mapped_column(Text, nullable=True)
