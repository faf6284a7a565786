"""
Notification ORM model.

Event records consumed by polling clients. Deleting a row is the
acknowledgement; there is no read state.

Dependencies: sqlalchemy, counselhub.boundary.db.base
System role: Notification persistence
"""

import enum
from uuid import UUID

from sqlalchemy import Enum, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from counselhub.boundary.db.base import Base, TimestampMixin, UUIDMixin


class NotificationType(str, enum.Enum):
    """Severity shown by the client."""

    INFO = "info"
    SUCCESS = "success"
    ALERT = "alert"


class NotificationModel(Base, UUIDMixin, TimestampMixin):
    """
    Notification ORM model.

    Attributes:
        sender_id: Account that caused the event (None for system events)
        sender_role: Role of the sender, or "system"
        recipient_id: Account that sees the notification
        recipient_role: Role of the recipient
        type: NotificationType
        title: Short heading
        message: Body text
        session_id: Related session, if any
    """

    __tablename__ = "notifications"
    __table_args__ = (
        Index("idx_notifications_recipient_created", "recipient_id", "created_at"),
    )

    sender_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )
    sender_role: Mapped[str] = mapped_column(String(32), nullable=False, default="system")
    recipient_id: Mapped[UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    recipient_role: Mapped[str] = mapped_column(String(32), nullable=False)
    type: Mapped[NotificationType] = mapped_column(
        Enum(NotificationType, native_enum=False),
        nullable=False,
        default=NotificationType.INFO,
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    session_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("sessions.id", ondelete="SET NULL"),
        nullable=True,
    )
