"""
Unified application settings.

Aggregates all configuration modules into a single Settings class.
Provides dependency injection factory for FastAPI.

Dependencies: All config modules
System role: Central configuration aggregator for the application
"""

from functools import lru_cache

from tutor_backend.configs.base import BaseSettings
from tutor_backend.configs.database import DatabaseSettings
from tutor_backend.configs.gemini import GeminiSettings
from tutor_backend.configs.assistant import AssistantSettings


class Settings(BaseSettings):
    """Unified application settings aggregating all config modules."""

    # Aggregated settings
    database: DatabaseSettings = DatabaseSettings()
    gemini: GeminiSettings = GeminiSettings()
    assistant: AssistantSettings = AssistantSettings()


@lru_cache
def get_settings() -> Settings:
    """
    Get application settings singleton.

    Returns Settings instance, cached for dependency injection.
    Environment variables loaded once at startup.

    Returns:
        Settings: Application settings instance

    Usage:
        from tutor_backend.configs import get_settings
        settings = get_settings()
    """
    return Settings()
