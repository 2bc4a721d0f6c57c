from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Optional

import openai
from azure.core.exceptions import AzureError, ClientAuthenticationError

from storefront_chat.llm.base import LLMProvider
from storefront_chat.llm.credentials import AzureCredentials, ConfigurationError
from storefront_chat.llm.errors import (
    LLMAuthError,
    LLMError,
    LLMInvalidRequest,
    LLMProviderError,
    LLMRateLimited,
    LLMTimeout,
    LLMUnavailable,
)
from storefront_chat.llm.types import LLMRequest, LLMResponse, LLMUsage

logger = logging.getLogger(__name__)

DEFAULT_API_VERSION = "2024-10-21"


def map_provider_error(exc: Exception) -> LLMError:
    """Translate an SDK exception into the LLMError hierarchy."""
    message = str(exc)
    if isinstance(exc, openai.APITimeoutError):
        return LLMTimeout(message)
    if isinstance(exc, openai.APIConnectionError):
        return LLMUnavailable(message)
    if isinstance(exc, openai.RateLimitError):
        return LLMRateLimited(message, status_code=exc.status_code)
    if isinstance(exc, (openai.AuthenticationError, openai.PermissionDeniedError)):
        return LLMAuthError(message, status_code=exc.status_code)
    if isinstance(exc, (openai.BadRequestError, openai.NotFoundError, openai.UnprocessableEntityError)):
        return LLMInvalidRequest(message, status_code=exc.status_code)
    if isinstance(exc, openai.APIStatusError):
        if exc.status_code >= 500:
            return LLMUnavailable(message, status_code=exc.status_code)
        return LLMProviderError(message, status_code=exc.status_code)
    if isinstance(exc, ClientAuthenticationError):
        return LLMAuthError(message)
    return LLMProviderError(message)


@dataclass
class AzureOpenAIProvider(LLMProvider):
    """
    Chat completions against an Azure OpenAI deployment.

    One ``AsyncAzureOpenAI`` client is created per process and reused for all
    requests (it owns the HTTP connection pool).
    """

    endpoint: Optional[str] = None
    credentials: Optional[AzureCredentials] = None
    api_version: str = DEFAULT_API_VERSION
    timeout_s: float = 30.0
    name: str = "azure_openai"
    client: Optional[Any] = None

    def __post_init__(self):
        if not self.endpoint:
            raise ConfigurationError("AZURE_OPENAI_ENDPOINT environment variable is not set")
        self._owns_client = self.client is None
        if self.client is None:
            if self.credentials is None:
                raise ConfigurationError("Azure OpenAI credentials are not configured")
            self.client = self._make_client()

    def _make_client(self) -> Any:
        return openai.AsyncAzureOpenAI(
            azure_endpoint=self.endpoint,
            api_version=self.api_version,
            max_retries=0,
            **self.credentials.openai_auth_kwargs(),
        )

    async def generate(self, req: LLMRequest) -> LLMResponse:
        messages = [{"role": m.role, "content": m.content} for m in req.messages]
        start = time.perf_counter()
        try:
            resp = await self.client.chat.completions.create(
                model=req.model,
                messages=messages,
                timeout=req.timeout_s or self.timeout_s,
            )
        except (openai.APIError, AzureError) as exc:
            raise map_provider_error(exc) from exc
        latency_ms = int((time.perf_counter() - start) * 1000)

        choices = getattr(resp, "choices", None) or []
        first = choices[0] if choices else None
        message = getattr(first, "message", None)
        content = getattr(message, "content", None)
        if content is not None:
            content = content.strip()
        usage = getattr(resp, "usage", None)

        return LLMResponse(
            content=content,
            model=getattr(resp, "model", None) or req.model,
            provider=self.name,
            usage=LLMUsage(
                prompt_tokens=getattr(usage, "prompt_tokens", 0) if usage else 0,
                completion_tokens=getattr(usage, "completion_tokens", 0) if usage else 0,
                total_tokens=getattr(usage, "total_tokens", 0) if usage else 0,
            ),
            latency_ms=latency_ms,
            finish_reason=getattr(first, "finish_reason", None),
        )

    async def aclose(self) -> None:
        if self._owns_client and self.client is not None:
            await self.client.close()
