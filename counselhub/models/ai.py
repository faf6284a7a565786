"""
AI companion schemas.

Dependencies: pydantic
System role: AI chat API contracts
"""

from typing import Literal

from pydantic import BaseModel, Field


class ChatTurn(BaseModel):
    """One prior turn of the conversation kept by the client."""

    role: Literal["user", "assistant", "ai", "system"] = Field(description="Turn author")
    content: str


class AIChatRequest(BaseModel):
    """Request schema for /ai/chat."""

    message: str = Field(min_length=1, max_length=4000, description="User message")
    history: list[ChatTurn] = Field(default_factory=list)


class AIChatResponse(BaseModel):
    response: str
