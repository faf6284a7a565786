"""
AI companion configuration settings.

Dependencies: pydantic, pydantic_settings
System role: Chat model configuration for the AI companion
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from counselhub.configs.base import BaseSettings


class CompanionSettings(BaseSettings):
    """Chat model configuration for /ai/chat."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="COMPANION_",
        case_sensitive=False,
        extra="ignore",
    )

    model_id: str = Field(default="gemini-2.5-flash", description="Gemini model identifier")
    temperature: float = Field(default=0.4, ge=0.0, le=2.0, description="Sampling temperature")
    history_window: int = Field(
        default=10,
        ge=0,
        description="Number of previous turns forwarded to the model",
    )
    google_api_key: str | None = Field(default=None, description="Google API key")
    max_attempts: int = Field(default=3, ge=1, description="Model calls per reply before giving up")
    retry_initial_wait: float = Field(
        default=1.0,
        ge=0.0,
        description="First retry backoff in seconds",
    )
