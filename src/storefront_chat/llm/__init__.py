from storefront_chat.llm.base import LLMProvider
from storefront_chat.llm.errors import (
    LLMAuthError,
    LLMError,
    LLMInvalidRequest,
    LLMProviderError,
    LLMRateLimited,
    LLMTimeout,
    LLMUnavailable,
)
from storefront_chat.llm.types import LLMMessage, LLMRequest, LLMResponse, LLMUsage

__all__ = [
    "LLMProvider",
    "LLMError",
    "LLMTimeout",
    "LLMRateLimited",
    "LLMUnavailable",
    "LLMAuthError",
    "LLMInvalidRequest",
    "LLMProviderError",
    "LLMMessage",
    "LLMRequest",
    "LLMResponse",
    "LLMUsage",
]
