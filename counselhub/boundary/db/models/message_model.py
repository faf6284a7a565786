"""
Message ORM model.

Append-only chat turns within a counseling session.

Dependencies: sqlalchemy, counselhub.boundary.db.base
System role: Messaging log persistence
"""

from uuid import UUID

from sqlalchemy import Boolean, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from counselhub.boundary.db.base import Base, TimestampMixin, UUIDMixin


class MessageModel(Base, UUIDMixin, TimestampMixin):
    """
    Message ORM model.

    Content never changes after insert; only the read receipt flips.
    position is the per-session insertion index and breaks created_at ties.

    Attributes:
        session_id: Parent session (required)
        sender_id: Account that wrote the message
        sender_role: Role of the sender at write time
        content: Message body
        position: 0-based insertion index within the session
        read: True once the counterpart fetched the history
    """

    __tablename__ = "messages"
    __table_args__ = (
        UniqueConstraint("session_id", "position", name="uq_messages_session_position"),
    )

    session_id: Mapped[UUID] = mapped_column(
        ForeignKey("sessions.id", ondelete="CASCADE"),
        nullable=False,
    )
    sender_id: Mapped[UUID] = mapped_column(ForeignKey("users.id"), nullable=False)
    sender_role: Mapped[str] = mapped_column(String(32), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    read: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    session = relationship("SessionModel", back_populates="messages")
