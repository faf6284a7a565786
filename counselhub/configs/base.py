"""
Shared settings base.

Every config module inherits the .env loading and the environment,
debug and log level fields from here.

Dependencies: pydantic_settings
System role: Foundation for all configuration classes
"""

from pydantic import Field
from pydantic_settings import BaseSettings as PydanticBaseSettings, SettingsConfigDict


class BaseSettings(PydanticBaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = Field(default="CounselHub API")
    environment: str = Field(
        default="development",
        description="development, staging or production",
    )
    debug: bool = False
    log_level: str = Field(default="INFO", description="Root log level name")
