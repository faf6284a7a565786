"""
Unified application settings.

Aggregates all configuration modules into a single Settings class.
Provides dependency injection factory for FastAPI.

Dependencies: All config modules
System role: Central configuration aggregator for the application
"""

from functools import lru_cache

from counselhub.configs.assignment import AssignmentSettings
from counselhub.configs.auth import AuthSettings
from counselhub.configs.base import BaseSettings
from counselhub.configs.companion import CompanionSettings
from counselhub.configs.cors import CORSSettings
from counselhub.configs.database import DatabaseSettings
from counselhub.configs.observability import ObservabilitySettings


class Settings(BaseSettings):
    """Unified application settings aggregating all config modules."""

    # Aggregated settings
    database: DatabaseSettings = DatabaseSettings()
    auth: AuthSettings = AuthSettings()
    assignment: AssignmentSettings = AssignmentSettings()
    companion: CompanionSettings = CompanionSettings()
    observability: ObservabilitySettings = ObservabilitySettings()
    cors: CORSSettings = CORSSettings()


@lru_cache
def get_settings() -> Settings:
    """
    Get application settings singleton.

    Returns Settings instance, cached for dependency injection.
    Environment variables loaded once at startup.

    Returns:
        Settings: Application settings instance

    Usage:
        from counselhub.configs import get_settings
        settings = get_settings()
    """
    return Settings()
