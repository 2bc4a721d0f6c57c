from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Literal, Optional

logger = logging.getLogger(__name__)

COGNITIVE_SERVICES_SCOPE = "https://cognitiveservices.azure.com/.default"

AuthMode = Literal["api_key", "managed_identity"]


class ConfigurationError(RuntimeError):
    pass


@dataclass
class AzureCredentials:
    """
    Credential shared by every Azure client of the process.

    Exactly one of the two modes is chosen at startup:
    - ``api_key``: a static key (local development)
    - ``managed_identity``: an async ``DefaultAzureCredential`` (managed identity,
      workload identity, az login, ...)

    The clients never look at the mode themselves; they ask for the auth
    arguments in the shape their SDK expects.
    """

    mode: AuthMode
    api_key: Optional[str] = None
    token_credential: Optional[Any] = None

    def openai_auth_kwargs(self) -> Dict[str, Any]:
        if self.mode == "api_key":
            return {"api_key": self.api_key}
        from azure.identity.aio import get_bearer_token_provider

        return {
            "azure_ad_token_provider": get_bearer_token_provider(
                self.token_credential, COGNITIVE_SERVICES_SCOPE
            )
        }

    def content_safety_credential(self) -> Any:
        if self.mode == "api_key":
            from azure.core.credentials import AzureKeyCredential

            return AzureKeyCredential(self.api_key)
        return self.token_credential

    async def aclose(self) -> None:
        if self.token_credential is not None:
            await self.token_credential.close()


def build_azure_credentials(api_key: str | None) -> AzureCredentials:
    # Never log the key itself.
    if api_key:
        logger.info("Using API key authentication")
        return AzureCredentials(mode="api_key", api_key=api_key)

    from azure.identity.aio import DefaultAzureCredential

    logger.info("Using DefaultAzureCredential (managed identity)")
    return AzureCredentials(mode="managed_identity", token_credential=DefaultAzureCredential())
