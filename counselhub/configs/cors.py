"""
CORS configuration settings.

Dependencies: pydantic_settings
System role: Allowed browser origins for the frontend
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from counselhub.configs.base import BaseSettings


class CORSSettings(BaseSettings):
    """Browser origins allowed to call the API."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="CORS_",
        case_sensitive=False,
        extra="ignore",
    )

    allow_origins: list[str] = Field(
        default=["http://localhost:3000", "http://127.0.0.1:3000", "http://localhost:5173"],
        description="Allowed origins (JSON list in the environment)",
    )
