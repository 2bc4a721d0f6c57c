from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, Literal, Optional, Sequence

Role = Literal["system", "user", "assistant"]
FinishReason = Optional[str]


@dataclass(frozen=True)
class LLMMessage:
    role: Role
    content: str


@dataclass(frozen=True)
class LLMUsage:
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


@dataclass(frozen=True)
class LLMResponse:
    # first text segment of the completion; None when the service returned none
    content: Optional[str]
    model: str
    provider: str
    usage: LLMUsage
    latency_ms: int
    finish_reason: FinishReason = None


@dataclass(frozen=True)
class LLMRequest:
    messages: Sequence[LLMMessage]
    model: str
    timeout_s: Optional[float] = None
    metadata: Dict[str, Any] = field(default_factory=dict)  # trace_id etc.
