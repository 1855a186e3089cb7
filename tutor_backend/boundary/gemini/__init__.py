"""
Google Gemini boundary.

Embedding and text-generation clients with bounded latency and masked
failures.

Dependencies: langchain_google_genai
System role: Upstream AI provider adapters
"""

from tutor_backend.boundary.gemini.embedding_client import EmbeddingClient, FixedDimensionEmbeddings
from tutor_backend.boundary.gemini.generation_client import FALLBACK_RESPONSE, GenerationClient

__all__ = [
    "EmbeddingClient",
    "FixedDimensionEmbeddings",
    "GenerationClient",
    "FALLBACK_RESPONSE",
]
