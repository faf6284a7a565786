"""
Message schemas.

Dependencies: pydantic
System role: Messaging API contracts
"""

import uuid
from datetime import datetime

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class CreateMessageRequest(BaseModel):
    """
    Request schema for appending a message.

    session_id is accepted for client compatibility; the path wins.
    """

    session_id: uuid.UUID | None = None
    content: str = Field(min_length=1, max_length=5000)


class MessageResponse(BaseModel):
    """Response schema for a single message."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: uuid.UUID
    session_id: uuid.UUID
    sender: uuid.UUID = Field(validation_alias=AliasChoices("sender", "sender_id"))
    sender_role: str
    content: str
    position: int
    read: bool
    created_at: datetime
