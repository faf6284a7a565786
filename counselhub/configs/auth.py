"""
Authentication configuration settings.

JWT signing parameters and the admin registration code.

Dependencies: pydantic, pydantic_settings
System role: Token issuing and verification configuration
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from counselhub.configs.base import BaseSettings


class AuthSettings(BaseSettings):
    """JWT bearer token configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="AUTH_",
        case_sensitive=False,
        extra="ignore",
    )

    secret_key: str = Field(
        default="counselhub-dev-secret-change-in-prod",
        description="Secret used to sign JWT tokens",
    )
    algorithm: str = Field(default="HS256", description="JWT signing algorithm")
    access_token_expire_minutes: int = Field(
        default=60,
        description="Access token lifetime in minutes",
    )
    refresh_token_expire_days: int = Field(
        default=7,
        description="Refresh token lifetime in days",
    )
    admin_registration_code: str = Field(
        default="change-me",
        description="Code required to register an admin account",
    )
