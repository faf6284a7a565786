"""
Session assignment configuration settings.

Dependencies: pydantic, pydantic_settings
System role: Tunables for the assignment engine and notification emitter
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from counselhub.configs.base import BaseSettings


class AssignmentSettings(BaseSettings):
    """Assignment engine and presence tunables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="ASSIGNMENT_",
        case_sensitive=False,
        extra="ignore",
    )

    max_concurrent_sessions: int = Field(
        default=3,
        ge=1,
        description="Maximum active sessions a counselor may hold at once",
    )
    offline_after_seconds: int = Field(
        default=60,
        ge=1,
        description="Seconds without activity after which a participant counts as offline",
    )
    stream_poll_seconds: float = Field(
        default=2.0,
        gt=0,
        description="Interval at which the message feed checks for new messages",
    )
