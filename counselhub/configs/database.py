"""
Database configuration settings.

PostgreSQL connection parameters for the async engine, with an optional
full URL override (``POSTGRES_URL``) for managed databases or local SQLite.

Dependencies: pydantic, pydantic_settings
System role: Database connection configuration for ORM
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from counselhub.configs.base import BaseSettings


class DatabaseSettings(BaseSettings):
    """Portal database configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="POSTGRES_",
        case_sensitive=False,
        extra="ignore",
    )

    url: str | None = Field(
        default=None,
        description="Full SQLAlchemy async URL; overrides host/port/user/password/db",
    )
    host: str = Field(default="localhost")
    port: int = Field(default=5432)
    user: str = Field(default="postgres")
    password: str = Field(default="postgres")
    db: str = Field(default="counselhub")

    pool_size: int = Field(default=10, ge=1)
    max_overflow: int = Field(default=20, ge=0)
    pool_timeout: int = Field(default=30, ge=1, description="Seconds to wait for a pooled connection")
    echo_sql: bool = Field(default=False)

    sslmode: str = Field(default="disable", description="'require' for managed databases")

    @property
    def async_database_url(self) -> str:
        if self.url:
            return self.url
        ssl_param = "?ssl=require" if self.sslmode == "require" else ""
        return (
            f"postgresql+asyncpg://{self.user}:{self.password}"
            f"@{self.host}:{self.port}/{self.db}{ssl_param}"
        )

    @property
    def uses_pool(self) -> bool:
        """SQLite URLs get the dialect's default pool instead of the queue pool."""
        return not self.async_database_url.startswith("sqlite")
