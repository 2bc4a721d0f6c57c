from __future__ import annotations

import logging
from functools import lru_cache

from storefront_chat.api.config import get_settings
from storefront_chat.chat.pipeline import ChatPipeline
from storefront_chat.llm.azure_openai_provider import AzureOpenAIProvider
from storefront_chat.llm.credentials import AzureCredentials, ConfigurationError, build_azure_credentials
from storefront_chat.safety.azure_content_safety import AzureContentSafetyClassifier
from storefront_chat.secrets import get_secret

logger = logging.getLogger(__name__)


@lru_cache
def get_azure_credentials() -> AzureCredentials:
    return build_azure_credentials(get_secret("AZURE_OPENAI_API_KEY"))


@lru_cache
def get_chat_pipeline() -> ChatPipeline:
    settings = get_settings()
    logger.info(
        "Initializing chat pipeline with endpoint: %s, deployment: %s",
        settings.azure_openai_endpoint,
        settings.deployment_name,
    )
    # no credential is created for an unusable config
    if not settings.azure_openai_endpoint:
        raise ConfigurationError("AZURE_OPENAI_ENDPOINT environment variable is not set")
    credentials = get_azure_credentials()
    completion = AzureOpenAIProvider(
        endpoint=settings.azure_openai_endpoint,
        credentials=credentials,
        api_version=settings.api_version,
        timeout_s=settings.request_timeout_s,
    )
    safety = None
    if settings.content_safety_enabled:
        safety = AzureContentSafetyClassifier(
            endpoint=settings.content_safety_endpoint,
            credentials=credentials,
        )
    else:
        logger.warning("Content safety screening is disabled")
    return ChatPipeline(
        completion=completion,
        model=settings.deployment_name,
        safety=safety,
        timeout_s=settings.request_timeout_s,
        safety_timeout_s=settings.content_safety_timeout_s,
    )


async def close_chat_pipeline() -> None:
    if get_chat_pipeline.cache_info().currsize:
        await get_chat_pipeline().aclose()
        get_chat_pipeline.cache_clear()
    if get_azure_credentials.cache_info().currsize:
        await get_azure_credentials().aclose()
        get_azure_credentials.cache_clear()
