"""
Assistant pipeline configuration settings.

Rate limiting, prompt budget, history window, retrieval and chunking knobs
for the tutoring assistant.

Dependencies: pydantic, pydantic_settings
System role: Assistant behaviour configuration
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from tutor_backend.configs.base import BaseSettings


class AssistantSettings(BaseSettings):
    """Tutoring assistant configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="ASSISTANT_",
        case_sensitive=False,
        extra="ignore",
    )

    # Rate limiting
    rate_limit_requests: int = Field(default=20, description="Requests allowed per window", ge=1)
    rate_limit_window_seconds: float = Field(
        default=300.0,
        description="Sliding window duration in seconds",
        gt=0,
    )

    # Prompt assembly
    max_prompt_length: int = Field(
        default=6500,
        description="Character ceiling for the assembled prompt",
        ge=2000,
    )
    history_turns: int = Field(
        default=5,
        description="Most recent conversation turns fed to the prompt",
        ge=0,
    )
    context_char_limit: int = Field(
        default=4000,
        description="Character cap on retrieved context before assembly",
    )

    # Retrieval
    retrieval_top_k: int = Field(default=5, description="Chunks retrieved per question", ge=1, le=100)
    vector_store_type: str = Field(
        default="pgvector",
        description="Chunk store backend: 'pgvector' for PostgreSQL, 'memory' for local dev",
    )

    # Input validation
    message_min_length: int = Field(default=5, description="Minimum user message length")
    message_max_length: int = Field(default=1000, description="Maximum user message length")

    # Chunking
    chunk_target_size: int = Field(default=1000, description="Target chunk size in characters")
    chunk_min_size: int = Field(default=500, description="Minimum chunk size in characters")

    # Background work
    background_max_concurrency: int = Field(
        default=8,
        description="Concurrent background jobs (assistant turn writes, lesson indexing)",
        ge=1,
    )
