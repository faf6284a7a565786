"""
Counseling session schemas.

Request/response schemas for session lifecycle operations.

Dependencies: pydantic
System role: Session API contracts
"""

import uuid
from datetime import datetime

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class CreateSessionRequest(BaseModel):
    """Request schema for creating a session."""

    user_id: uuid.UUID | None = Field(
        default=None,
        description="Owning user; defaults to the caller",
    )
    pulse_level: int | None = Field(
        default=None,
        ge=0,
        le=5,
        validation_alias=AliasChoices("pulse_level", "initial_pulse"),
        description="Distress indicator captured at creation",
    )
    scheduled_at: datetime | None = None


class UpdateNotesRequest(BaseModel):
    """Counselor annotation."""

    notes: str = Field(max_length=10000)


class SessionResponse(BaseModel):
    """Response schema for session operations."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    user_id: uuid.UUID
    counselor_id: uuid.UUID | None = None
    status: str
    pulse_level: int | None = None
    notes: str | None = None
    created_at: datetime
    updated_at: datetime
    scheduled_at: datetime | None = None
    assigned_at: datetime | None = None
    completed_at: datetime | None = None
    cancelled_at: datetime | None = None


class AutoAssignResponse(SessionResponse):
    """
    Session after an auto-assign attempt.

    assigned is False and advisory explains why when no counselor was free.
    """

    assigned: bool
    advisory: str | None = None
