"""
Public assistant service.

Anonymous landing-page chatbot: IP-based rate limiting, tenant-level AI
switch, and a minimal prompt without retrieval or memory.

Dependencies: tutor_backend.boundary, tutor_backend.core
System role: Public chatbot orchestration
"""

import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from tutor_backend.boundary.db.CRUD import tenant_crud
from tutor_backend.boundary.gemini import GenerationClient
from tutor_backend.core.exceptions import (
    AIDisabledError,
    TenantKeyMissingError,
    TenantNotFoundError,
    TutorAssistantError,
    UpstreamUnavailableError,
)
from tutor_backend.core.prompt_builder import build_public_prompt
from tutor_backend.core.rate_limiter import SlidingWindowRateLimiter
from tutor_backend.models.chat import PublicStatusResponse
from tutor_backend.observability.log_utils import log_exception_with_context

logger = logging.getLogger(__name__)


class PublicAssistantService:
    """Tenant-gated public chatbot."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        rate_limiter: SlidingWindowRateLimiter,
        generation_client: GenerationClient,
    ) -> None:
        self.session_factory = session_factory
        self.rate_limiter = rate_limiter
        self.generation_client = generation_client

    async def evaluate_tenant(self, tenant_id: UUID) -> str:
        """
        Check that a tenant may use the public chatbot.

        Args:
            tenant_id: Tenant UUID

        Returns:
            str: The tenant's Gemini key

        Raises:
            TenantNotFoundError: Unknown tenant
            AIDisabledError: Tenant switched AI features off
            TenantKeyMissingError: Tenant has no Gemini key
        """
        async with self.session_factory() as db:
            tenant = await tenant_crud.get_by_id(db, tenant_id)

        if tenant is None:
            raise TenantNotFoundError(tenant_id)
        if not tenant.global_ai_enabled:
            raise AIDisabledError(details={"tenant_id": str(tenant_id)})
        if not tenant.gemini_api_key:
            raise TenantKeyMissingError(details={"tenant_id": str(tenant_id)})
        return tenant.gemini_api_key

    async def status(self, tenant_id: UUID) -> PublicStatusResponse:
        """Report whether the chatbot is available, with the denial reason if not."""
        try:
            await self.evaluate_tenant(tenant_id)
        except TutorAssistantError as e:
            return PublicStatusResponse(enabled=False, reason=e.message)
        return PublicStatusResponse(enabled=True)

    async def chat(self, tenant_id: UUID, ip_address: str, message: str) -> str:
        """
        Answer a visitor message.

        Args:
            tenant_id: Tenant serving the landing page
            ip_address: Visitor address (rate-limit principal)
            message: Visitor question

        Returns:
            str: Model answer

        Raises:
            RateLimitedError: Address exhausted its window
            AccessDeniedError: Tenant missing, disabled, or without key
            UpstreamUnavailableError: Generation failed
        """
        self.rate_limiter.enforce(f"ip-{ip_address}")
        api_key = await self.evaluate_tenant(tenant_id)

        try:
            return await self.generation_client.generate(build_public_prompt(message), api_key=api_key)
        except TutorAssistantError:
            raise
        except Exception as e:
            log_exception_with_context(
                logger,
                f"{__name__}:chat - Public AI chat error",
                e,
                tenant_id=tenant_id,
            )
            raise UpstreamUnavailableError(operation="public_chat") from e
