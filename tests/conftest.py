import sys
from pathlib import Path

# make src/ importable without an install
sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))

import asyncio
from dataclasses import dataclass, field
from typing import Any, List

import pytest

from storefront_chat.llm.base import LLMProvider
from storefront_chat.llm.types import LLMRequest, LLMResponse, LLMUsage
from storefront_chat.safety.base import SafetyClassifier
from storefront_chat.safety.types import CategorySeverity


@dataclass
class FakeLLMProvider(LLMProvider):
    """Scripted completion provider: each item is returned (str/None) or raised (Exception)."""

    name: str = "fake"
    script: List[Any] = field(default_factory=lambda: ["ok"])
    delay_s: float = 0.0
    calls: List[LLMRequest] = field(default_factory=list)
    closed: bool = False

    async def generate(self, req: LLMRequest) -> LLMResponse:
        self.calls.append(req)
        await asyncio.sleep(self.delay_s)
        item = self.script.pop(0) if self.script else "ok"
        if isinstance(item, Exception):
            raise item
        return LLMResponse(
            content=item,
            model=req.model,
            provider=self.name,
            usage=LLMUsage(prompt_tokens=1, completion_tokens=1, total_tokens=2),
            latency_ms=1,
            finish_reason="stop",
        )

    async def aclose(self) -> None:
        self.closed = True


@dataclass
class FakeSafetyClassifier(SafetyClassifier):
    name: str = "fake_safety"
    scores: List[CategorySeverity] = field(default_factory=list)
    error: Exception | None = None
    delay_s: float = 0.0
    calls: List[str] = field(default_factory=list)
    closed: bool = False

    async def analyze(self, text: str) -> List[CategorySeverity]:
        self.calls.append(text)
        await asyncio.sleep(self.delay_s)
        if self.error is not None:
            raise self.error
        return list(self.scores)

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def fake_provider():
    return FakeLLMProvider()


@pytest.fixture
def fake_safety():
    return FakeSafetyClassifier()


@pytest.fixture
def tmp_secrets_dir(tmp_path, monkeypatch):
    secrets_dir = tmp_path / "secrets"
    secrets_dir.mkdir()
    monkeypatch.setenv("STOREFRONT_CHAT_SECRETS_DIR", str(secrets_dir))
    return secrets_dir


@pytest.fixture
def clear_app_caches():
    from storefront_chat.api.config import get_settings
    from storefront_chat.api.deps import get_azure_credentials, get_chat_pipeline

    def _clear():
        get_settings.cache_clear()
        get_azure_credentials.cache_clear()
        get_chat_pipeline.cache_clear()

    _clear()
    yield
    _clear()
