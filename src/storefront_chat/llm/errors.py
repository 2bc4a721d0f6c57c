from __future__ import annotations


class LLMError(Exception):
    """Base error of the completion layer."""
    code: str = "LLM_ERROR"

    def __init__(self, message: str, *, code: str | None = None, status_code: int | None = None):
        super().__init__(message)
        if code is not None:
            self.code = code
        self.status_code = status_code


class LLMTimeout(LLMError):
    code = "LLM_TIMEOUT"


class LLMRateLimited(LLMError):
    code = "LLM_RATE_LIMIT"


class LLMUnavailable(LLMError):
    code = "LLM_UNAVAILABLE"


class LLMAuthError(LLMError):
    code = "LLM_AUTH"


class LLMInvalidRequest(LLMError):
    code = "LLM_INVALID_REQUEST"


class LLMProviderError(LLMError):
    code = "LLM_PROVIDER_ERROR"
