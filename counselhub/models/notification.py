"""
Notification schemas.

Dependencies: pydantic
System role: Notification API contracts
"""

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict


class NotificationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    sender_id: uuid.UUID | None = None
    sender_role: str
    recipient_id: uuid.UUID
    recipient_role: str
    type: str
    title: str
    message: str
    session_id: uuid.UUID | None = None
    created_at: datetime
