"""
Gemini text generation client.

Sends the assembled prompt to Gemini and returns plain text. Timeouts,
throttling, server errors and transport failures are logged in full and
surfaced as a single UpstreamUnavailableError with a stable message.

Dependencies: langchain_google_genai, asyncio
System role: Generation backend adapter
"""

import asyncio
import logging
from collections.abc import Callable
from typing import Any

from langchain_core.language_models.chat_models import BaseChatModel
from langchain_google_genai import ChatGoogleGenerativeAI

from tutor_backend.core.exceptions import UpstreamUnavailableError
from tutor_backend.observability.log_utils import log_exception_with_context

logger = logging.getLogger(__name__)

FALLBACK_RESPONSE = "I could not generate a response at this time."

ChatModelFactory = Callable[[str], BaseChatModel]


def _status_code(exc: BaseException) -> int | None:
    for attr in ("status_code", "code"):
        value = getattr(exc, attr, None)
        if isinstance(value, int):
            return value
    response = getattr(exc, "response", None)
    value = getattr(response, "status_code", None)
    return value if isinstance(value, int) else None


def _failure_reason(exc: BaseException) -> str:
    status = _status_code(exc)
    if status == 429:
        return "throttled"
    if status is not None and status >= 500:
        return "server_error"
    return "error"


def extract_text(message: Any) -> str:
    """
    Pull plain text out of a chat model response.

    Handles string content and lists of content parts.
    """
    if message is None:
        return ""
    content = getattr(message, "content", message)
    if isinstance(content, str):
        return content.strip()
    if isinstance(content, list):
        parts = []
        for part in content:
            if isinstance(part, str):
                parts.append(part)
            elif isinstance(part, dict) and isinstance(part.get("text"), str):
                parts.append(part["text"])
        return "".join(parts).strip()
    return ""


class GenerationClient:
    """Prompt → answer client for the Gemini generation model."""

    def __init__(
        self,
        api_key: str | None = None,
        model: str = "gemini-2.5-flash-lite",
        temperature: float = 0.2,
        max_output_tokens: int = 500,
        timeout_seconds: float = 10.0,
        model_factory: ChatModelFactory | None = None,
    ) -> None:
        """
        Initialize generation client.

        Args:
            api_key: Global Gemini API key
            model: Gemini model identifier
            temperature: Sampling temperature
            max_output_tokens: Output token cap
            timeout_seconds: Upper bound per generation call
            model_factory: Builds a chat model for an API key
        """
        self._api_key = api_key
        self._model = model
        self._temperature = temperature
        self._max_output_tokens = max_output_tokens
        self._timeout = timeout_seconds
        self._factory = model_factory or self._default_factory
        self._models: dict[str, BaseChatModel] = {}

        if not api_key:
            logger.warning(f"{__name__}:__init__ - No global Gemini API key configured")

    def _default_factory(self, api_key: str) -> BaseChatModel:
        return ChatGoogleGenerativeAI(
            model=self._model,
            temperature=self._temperature,
            max_output_tokens=self._max_output_tokens,
            google_api_key=api_key,
            timeout=self._timeout,
            max_retries=0,
        )

    def _model_for(self, api_key: str) -> BaseChatModel:
        model = self._models.get(api_key)
        if model is None:
            model = self._factory(api_key)
            self._models[api_key] = model
        return model

    async def generate(self, prompt: str, api_key: str | None = None) -> str:
        """
        Generate an answer for a prompt.

        Args:
            prompt: Fully assembled prompt
            api_key: Tenant key overriding the global key

        Returns:
            str: Model answer, or FALLBACK_RESPONSE when the model returned no text

        Raises:
            UpstreamUnavailableError: On missing credentials, timeout, or any backend failure
        """
        key = api_key or self._api_key
        if not key:
            logger.error(f"{__name__}:generate - AI settings misconfigured: no API key")
            raise UpstreamUnavailableError(
                operation="generate",
                details={"reason": "missing_api_key"},
            )

        try:
            model = self._model_for(key)
            message = await asyncio.wait_for(model.ainvoke(prompt), timeout=self._timeout)
        except asyncio.TimeoutError as e:
            logger.error(f"{__name__}:generate - Generation timed out after {self._timeout}s")
            raise UpstreamUnavailableError(
                operation="generate",
                details={"reason": "timeout"},
            ) from e
        except Exception as e:
            reason = _failure_reason(e)
            log_exception_with_context(
                logger,
                f"{__name__}:generate - Gemini API error",
                e,
                reason=reason,
                prompt_length=len(prompt),
            )
            raise UpstreamUnavailableError(
                operation="generate",
                details={"reason": reason},
            ) from e

        text = extract_text(message)
        if not text:
            logger.warning(f"{__name__}:generate - Gemini returned empty content")
            return FALLBACK_RESPONSE
        return text
