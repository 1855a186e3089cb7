"""
Gemini configuration settings.

Credentials, model identifiers, and request bounds for the Google Gemini
embedding and generation backends.

Dependencies: pydantic, pydantic_settings
System role: Upstream AI provider configuration
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from tutor_backend.configs.base import BaseSettings


class GeminiSettings(BaseSettings):
    """Google Gemini configuration (global key, models, timeouts)."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="GEMINI_",
        case_sensitive=False,
        extra="ignore",
    )

    api_key: str | None = Field(
        default=None,
        description="Global Gemini API key, used when a request carries no tenant",
    )
    generation_model: str = Field(
        default="gemini-2.5-flash-lite",
        description="Gemini model used for answer generation",
    )
    embedding_model: str = Field(
        default="models/gemini-embedding-001",
        description="Gemini embedding model ID",
    )
    embedding_dimension: int = Field(
        default=768,
        description="Output dimension for every embedding (must match the lesson_chunks column)",
    )
    request_timeout_seconds: float = Field(
        default=10.0,
        description="Upper bound for a single embedding or generation call",
        gt=0,
    )
    temperature: float = Field(default=0.2, description="Generation temperature")
    max_output_tokens: int = Field(default=500, description="Generation output token cap")
    embedding_concurrency: int = Field(
        default=4,
        description="Concurrent embedding calls while indexing a lesson",
        ge=1,
    )
