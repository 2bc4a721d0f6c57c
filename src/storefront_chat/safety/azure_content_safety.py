from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, List, Optional

from storefront_chat.llm.credentials import AzureCredentials, ConfigurationError
from storefront_chat.safety.base import SafetyClassifier
from storefront_chat.safety.types import CategorySeverity, SafetyCategory

logger = logging.getLogger(__name__)

_KNOWN_CATEGORIES = {c.value: c for c in SafetyCategory}


@dataclass
class AzureContentSafetyClassifier(SafetyClassifier):
    """Azure AI Content Safety text analysis (Hate, SelfHarm, Sexual, Violence)."""

    endpoint: Optional[str] = None
    credentials: Optional[AzureCredentials] = None
    name: str = "azure_content_safety"
    client: Optional[Any] = None

    def __post_init__(self):
        if not self.endpoint:
            raise ConfigurationError("AZURE_CONTENT_SAFETY_ENDPOINT is not set")
        self._owns_client = self.client is None
        if self.client is None:
            if self.credentials is None:
                raise ConfigurationError("Content Safety credentials are not configured")
            self.client = self._make_client()

    def _make_client(self) -> Any:
        from azure.ai.contentsafety.aio import ContentSafetyClient

        return ContentSafetyClient(self.endpoint, self.credentials.content_safety_credential())

    async def analyze(self, text: str) -> List[CategorySeverity]:
        from azure.ai.contentsafety.models import AnalyzeTextOptions, TextCategory

        options = AnalyzeTextOptions(
            text=text,
            categories=[
                TextCategory.HATE,
                TextCategory.SELF_HARM,
                TextCategory.SEXUAL,
                TextCategory.VIOLENCE,
            ],
        )
        result = await self.client.analyze_text(options)

        scores: List[CategorySeverity] = []
        for item in getattr(result, "categories_analysis", None) or []:
            category = _KNOWN_CATEGORIES.get(str(getattr(item.category, "value", item.category)))
            if category is None:
                continue
            scores.append(CategorySeverity(category=category, severity=int(item.severity or 0)))
        return scores

    async def aclose(self) -> None:
        if self._owns_client and self.client is not None:
            await self.client.close()
