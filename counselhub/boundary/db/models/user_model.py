"""
User ORM model.

One table for every account; the role column separates members,
counselors and admins.

Dependencies: sqlalchemy, counselhub.boundary.db.base
System role: Account persistence for authentication and assignment
"""

import enum
from datetime import datetime

from sqlalchemy import Boolean, CheckConstraint, Enum, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from counselhub.boundary.db.base import Base, TimestampMixin, UTCDateTime, UUIDMixin


class UserRole(str, enum.Enum):
    """
    Account roles.

    USER: member who checks in and requests sessions
    COUNSELOR: professional who is assigned or claims sessions
    ADMIN: manages accounts and triggers assignment
    """

    USER = "user"
    COUNSELOR = "counselor"
    ADMIN = "admin"


class UserModel(Base, UUIDMixin, TimestampMixin):
    """
    User ORM model.

    Accounts are never removed; deletion clears is_active so that past
    sessions keep their counselor reference.

    Attributes:
        username: Unique login name
        email: Optional unique e-mail address
        password_hash: passlib hash of the password
        role: UserRole
        age_group: Optional age bucket (under_18, 18_25, ...)
        phone: Optional phone number
        pulse_level: Latest self-reported distress level (0-5)
        specialties: Free-text specialties (counselors)
        is_available: Counselor accepts new sessions
        is_active: False once the account is deleted
        last_active: Last authenticated request (UTC)
    """

    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint(
            "pulse_level IS NULL OR (pulse_level >= 0 AND pulse_level <= 5)",
            name="ck_users_pulse_level",
        ),
    )

    username: Mapped[str] = mapped_column(String(150), nullable=False, unique=True, index=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True, unique=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    role: Mapped[UserRole] = mapped_column(
        Enum(UserRole, native_enum=False),
        nullable=False,
        default=UserRole.USER,
        index=True,
    )

    age_group: Mapped[str | None] = mapped_column(String(32), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(32), nullable=True)
    pulse_level: Mapped[int | None] = mapped_column(Integer, nullable=True)
    specialties: Mapped[str | None] = mapped_column(Text, nullable=True)

    is_available: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    last_active: Mapped[datetime | None] = mapped_column(
        UTCDateTime(),
        nullable=True,
        doc="Stamped on every authenticated request",
    )
