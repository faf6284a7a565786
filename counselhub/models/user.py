"""
Account domain models and schemas.

Request/response schemas for users, counselors and admins.

Dependencies: pydantic
System role: Account API contracts
"""

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class UserResponse(BaseModel):
    """Public view of an account. Never carries the password hash."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    username: str
    email: str | None = None
    role: str
    age_group: str | None = None
    phone: str | None = None
    pulse_level: int | None = None
    specialties: str | None = None
    is_available: bool = True
    is_active: bool = True
    last_active: datetime | None = None
    created_at: datetime


class RegisterUserRequest(BaseModel):
    """Request schema for member self-registration."""

    username: str = Field(min_length=3, max_length=150)
    password: str = Field(min_length=6, max_length=128)
    email: str | None = Field(default=None, max_length=255)
    age_group: str | None = None
    phone: str | None = None


class RegisterCounselorRequest(BaseModel):
    """Request schema for counselor registration."""

    username: str = Field(min_length=3, max_length=150)
    password: str = Field(min_length=6, max_length=128)
    email: str | None = Field(default=None, max_length=255)
    specialties: str | None = None


class RegisterAdminRequest(BaseModel):
    """Request schema for admin registration, gated by a shared code."""

    username: str = Field(min_length=3, max_length=150)
    password: str = Field(min_length=6, max_length=128)
    email: str = Field(max_length=255)
    registration_code: str


class UpdateUserRequest(BaseModel):
    """
    Partial account update.

    `password` is the current password and is only required together
    with `newPassword`.
    """

    model_config = ConfigDict(populate_by_name=True)

    username: str | None = Field(default=None, min_length=3, max_length=150)
    email: str | None = Field(default=None, max_length=255)
    phone: str | None = None
    age_group: str | None = None
    pulse_level: int | None = Field(default=None, ge=0, le=5)
    specialties: str | None = None
    is_available: bool | None = None
    password: str | None = None
    new_password: str | None = Field(
        default=None,
        alias="newPassword",
        min_length=6,
        max_length=128,
    )
