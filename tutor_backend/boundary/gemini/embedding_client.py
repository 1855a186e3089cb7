"""
Gemini embedding client with fixed output dimensionality.

Wraps GoogleGenerativeAIEmbeddings so every vector has the dimension of the
lesson_chunks column, and converts every failure (missing key, timeout,
transport error, malformed vector) into ``None`` so callers can skip
retrieval instead of failing the chat turn. The SDK request carries the same
timeout as the asyncio bound, so an abandoned call does not keep running.

Dependencies: langchain_google_genai, python-dotenv, asyncio
System role: Embedding generation adapter
"""

import asyncio
import logging
from collections.abc import Callable, Sequence
from numbers import Real
from typing import List

from dotenv import load_dotenv
from langchain_core.embeddings import Embeddings
from langchain_google_genai import GoogleGenerativeAIEmbeddings

from tutor_backend.observability.log_utils import log_exception_with_context

load_dotenv()

logger = logging.getLogger(__name__)


class FixedDimensionEmbeddings(GoogleGenerativeAIEmbeddings):
    """
    GoogleGenerativeAIEmbeddings with a fixed output dimensionality.

    The base class does not apply a constructor-level dimension to each call,
    so both embed methods pass it explicitly.
    """

    _output_dimensionality: int = 768

    def __init__(
        self,
        model: str = "models/gemini-embedding-001",
        output_dimensionality: int = 768,
        **kwargs,
    ) -> None:
        """
        Initialize embeddings with fixed output dimensionality.

        Args:
            model: Google embedding model ID
            output_dimensionality: Dimension for all embeddings
            **kwargs: Additional arguments for GoogleGenerativeAIEmbeddings (google_api_key, ...)
        """
        super().__init__(model=model, **kwargs)
        self._output_dimensionality = output_dimensionality

    def embed_documents(self, texts: List[str], **kwargs) -> List[List[float]]:
        kwargs.setdefault("output_dimensionality", self._output_dimensionality)
        return super().embed_documents(texts, **kwargs)

    def embed_query(self, text: str, **kwargs) -> List[float]:
        kwargs.setdefault("output_dimensionality", self._output_dimensionality)
        return super().embed_query(text, **kwargs)

    async def aembed_query(self, text: str, **kwargs) -> List[float]:
        kwargs.setdefault("output_dimensionality", self._output_dimensionality)
        return await super().aembed_query(text, **kwargs)


EmbeddingsFactory = Callable[[str], Embeddings]


class EmbeddingClient:
    """
    Text → vector client that never raises.

    One underlying embeddings object is kept per API key so tenant keys are
    never mixed with the global key.
    """

    def __init__(
        self,
        api_key: str | None = None,
        model: str = "models/gemini-embedding-001",
        dimension: int = 768,
        timeout_seconds: float = 10.0,
        max_concurrency: int = 4,
        embeddings_factory: EmbeddingsFactory | None = None,
    ) -> None:
        """
        Initialize embedding client.

        Args:
            api_key: Global Gemini API key (None = embeddings unavailable without override)
            model: Embedding model ID
            dimension: Required vector length
            timeout_seconds: Upper bound per embedding call
            max_concurrency: Concurrent calls in embed_many
            embeddings_factory: Builds an Embeddings object for an API key
        """
        self._api_key = api_key
        self._model = model
        self.dimension = dimension
        self._timeout = timeout_seconds
        self._max_concurrency = max_concurrency
        self._factory = embeddings_factory or self._default_factory
        self._clients: dict[str, Embeddings] = {}

        if not api_key:
            logger.warning(f"{__name__}:__init__ - No global Gemini API key configured")

    def _default_factory(self, api_key: str) -> Embeddings:
        return FixedDimensionEmbeddings(
            model=self._model,
            output_dimensionality=self.dimension,
            google_api_key=api_key,
            request_options={"timeout": self._timeout},
        )

    def _client_for(self, api_key: str) -> Embeddings:
        client = self._clients.get(api_key)
        if client is None:
            client = self._factory(api_key)
            self._clients[api_key] = client
        return client

    def _validate(self, values: object) -> list[float] | None:
        if not isinstance(values, Sequence) or isinstance(values, (str, bytes)):
            logger.warning(f"{__name__}:_validate - Embedding is not a sequence: {type(values).__name__}")
            return None
        if len(values) != self.dimension:
            logger.warning(
                f"{__name__}:_validate - Expected {self.dimension} dimensions, got {len(values)}"
            )
            return None
        if not all(isinstance(v, Real) and not isinstance(v, bool) for v in values):
            logger.warning(f"{__name__}:_validate - Embedding contains non-numeric values")
            return None
        return [float(v) for v in values]

    async def embed(self, text: str, api_key: str | None = None) -> list[float] | None:
        """
        Embed text.

        Args:
            text: Text to embed
            api_key: Tenant key overriding the global key

        Returns:
            list[float] | None: Vector of ``dimension`` floats, or None on any failure
        """
        if not text or not text.strip():
            return None

        key = api_key or self._api_key
        if not key:
            logger.warning(f"{__name__}:embed - Skipping embedding: API key missing")
            return None

        try:
            client = self._client_for(key)
            values = await asyncio.wait_for(client.aembed_query(text), timeout=self._timeout)
        except asyncio.TimeoutError:
            logger.error(f"{__name__}:embed - Embedding timed out after {self._timeout}s")
            return None
        except Exception as e:
            log_exception_with_context(
                logger,
                f"{__name__}:embed - Embedding generation failed",
                e,
                text_length=len(text),
            )
            return None

        return self._validate(values)

    async def embed_many(
        self,
        texts: Sequence[str],
        api_key: str | None = None,
    ) -> list[list[float] | None]:
        """
        Embed several texts with bounded concurrency.

        Returns:
            list: One entry per input, None where embedding failed
        """
        semaphore = asyncio.Semaphore(self._max_concurrency)

        async def _one(text: str) -> list[float] | None:
            async with semaphore:
                return await self.embed(text, api_key=api_key)

        return list(await asyncio.gather(*(_one(t) for t in texts)))
