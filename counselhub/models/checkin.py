"""
Check-in schemas.

Dependencies: pydantic
System role: Mood tracking API contracts
"""

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class CreateCheckInRequest(BaseModel):
    """Request schema for recording a mood check-in."""

    mood: int = Field(ge=1, le=5)
    note: str | None = Field(default=None, max_length=5000)


class CheckInResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    user_id: uuid.UUID
    mood: int
    note: str | None = None
    created_at: datetime
