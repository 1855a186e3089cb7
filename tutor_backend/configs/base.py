"""
Shared settings for the tutor backend.

Every concern-specific settings class inherits the .env handling from here.
The application-level fields (environment, debug, logging, CORS) are read by
the app factory and the lifespan.

Dependencies: pydantic_settings
System role: Foundation for all configuration classes
"""

from pydantic import Field
from pydantic_settings import BaseSettings as PydanticBaseSettings, SettingsConfigDict


class BaseSettings(PydanticBaseSettings):
    """Base configuration class with application-level settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    environment: str = Field(
        default="development",
        description="Deployment name reported at startup (development, staging, production)",
    )
    debug: bool = Field(default=False, description="Run FastAPI in debug mode")
    log_level: str = Field(default="INFO", description="Root log level")
    cors_origins: list[str] = Field(
        default=["*"],
        description="Origins allowed to call the API from a browser",
    )
