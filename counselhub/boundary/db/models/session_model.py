"""
Counseling session ORM model.

One counseling engagement between a user and, once assigned, a counselor.

Dependencies: sqlalchemy, counselhub.boundary.db.base
System role: Session persistence, single source of truth for lifecycle status
"""

import enum
from datetime import datetime
from uuid import UUID

from sqlalchemy import CheckConstraint, Enum, ForeignKey, Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from counselhub.boundary.db.base import Base, TimestampMixin, UTCDateTime, UUIDMixin


class SessionStatus(str, enum.Enum):
    """
    Counseling session states.

    PENDING: requested by the user, not yet queued or assigned
    WAITING: on the counselors' waiting list
    ACTIVE: bound to exactly one counselor
    COMPLETED: ended by a participant (terminal)
    CANCELLED: withdrawn before assignment (terminal)
    """

    PENDING = "pending"
    WAITING = "waiting"
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class SessionModel(Base, UUIDMixin, TimestampMixin):
    """
    Session ORM model.

    counselor_id is set exactly when status is ACTIVE or COMPLETED. Status
    changes are written with conditional updates (see SessionCRUD) so two
    concurrent writers can never both succeed.

    Attributes:
        user_id: Owning user
        counselor_id: Assigned counselor (nullable until assignment)
        status: SessionStatus
        pulse_level: Distress indicator (0-5) captured at creation
        notes: Counselor annotation
        message_count: Messages appended so far, also the next position
        scheduled_at: Optional requested start time
        assigned_at: When the session became ACTIVE
        completed_at: When the session became COMPLETED
        cancelled_at: When the session became CANCELLED

    Relationships:
        messages: One-to-many with MessageModel (cascade delete)
    """

    __tablename__ = "sessions"
    __table_args__ = (
        CheckConstraint(
            "pulse_level IS NULL OR (pulse_level >= 0 AND pulse_level <= 5)",
            name="ck_sessions_pulse_level",
        ),
        Index("idx_sessions_status", "status"),
        Index("idx_sessions_user_id", "user_id"),
        Index("idx_sessions_counselor_status", "counselor_id", "status"),
    )

    user_id: Mapped[UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    counselor_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("users.id"),
        nullable=True,
        default=None,
    )

    status: Mapped[SessionStatus] = mapped_column(
        Enum(SessionStatus, native_enum=False),
        nullable=False,
        default=SessionStatus.PENDING,
    )

    pulse_level: Mapped[int | None] = mapped_column(Integer, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    message_count: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        server_default="0",
        doc="Next message position; bumped atomically by every append",
    )

    scheduled_at: Mapped[datetime | None] = mapped_column(UTCDateTime(), nullable=True)
    assigned_at: Mapped[datetime | None] = mapped_column(UTCDateTime(), nullable=True)
    completed_at: Mapped[datetime | None] = mapped_column(UTCDateTime(), nullable=True)
    cancelled_at: Mapped[datetime | None] = mapped_column(UTCDateTime(), nullable=True)

    messages = relationship(
        "MessageModel",
        back_populates="session",
        cascade="all, delete-orphan",
    )
