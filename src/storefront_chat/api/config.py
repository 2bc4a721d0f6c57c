from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache
from typing import List, Optional

from dotenv import load_dotenv

_TRUE = {"1", "true", "yes"}


def _split_csv(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in _TRUE


@dataclass(frozen=True)
class APISettings:
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "info"
    allowed_origins: List[str] = field(default_factory=list)
    debug_logging: bool = False

    azure_openai_endpoint: Optional[str] = None
    deployment_name: str = "gpt-4o-mini"
    api_version: str = "2024-10-21"
    content_safety_enabled: bool = True
    content_safety_endpoint: Optional[str] = None
    request_timeout_s: float = 30.0
    content_safety_timeout_s: float = 5.0

    @classmethod
    def from_env(cls) -> "APISettings":
        load_dotenv()
        openai_endpoint = os.getenv("AZURE_OPENAI_ENDPOINT") or None
        return cls(
            host=os.getenv("API_HOST", "0.0.0.0"),
            port=int(os.getenv("API_PORT", "8000")),
            log_level=os.getenv("API_LOG_LEVEL", "info"),
            allowed_origins=_split_csv(os.getenv("API_ALLOWED_ORIGINS", "")),
            debug_logging=_env_bool("STOREFRONT_CHAT_DEBUG_LOGGING", False),
            azure_openai_endpoint=openai_endpoint,
            # cost-effective default
            deployment_name=os.getenv("AZURE_OPENAI_DEPLOYMENT_NAME") or "gpt-4o-mini",
            api_version=os.getenv("AZURE_OPENAI_API_VERSION") or "2024-10-21",
            content_safety_enabled=_env_bool("CONTENT_SAFETY_ENABLED", True),
            content_safety_endpoint=os.getenv("AZURE_CONTENT_SAFETY_ENDPOINT") or openai_endpoint,
            request_timeout_s=float(os.getenv("CHAT_REQUEST_TIMEOUT_S", "30")),
            content_safety_timeout_s=float(os.getenv("CONTENT_SAFETY_TIMEOUT_S", "5")),
        )


@lru_cache
def get_settings() -> APISettings:
    return APISettings.from_env()
