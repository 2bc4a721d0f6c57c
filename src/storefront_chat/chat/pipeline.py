from __future__ import annotations

import asyncio
import json
import logging
import time
from dataclasses import dataclass
from typing import Optional

from storefront_chat.chat.errors import UnexpectedFailure, UpstreamFailure
from storefront_chat.llm.base import LLMProvider
from storefront_chat.llm.errors import LLMError
from storefront_chat.llm.types import LLMMessage, LLMRequest, LLMResponse
from storefront_chat.safety.base import SafetyClassifier
from storefront_chat.safety.policy import MIN_FLAGGED_SEVERITY, evaluate_severities
from storefront_chat.safety.types import SafetyVerdict

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a helpful AI assistant for the Zava Storefront. "
    "You help customers with product inquiries and general questions. "
    "Be friendly, concise, and helpful."
)
REFUSAL_TEXT = (
    "I'm sorry, but I cannot process that message as it may contain inappropriate content. "
    "Please rephrase your question."
)
FALLBACK_TEXT = "I'm sorry, I couldn't generate a response. Please try again."

DEFAULT_REQUEST_TIMEOUT_S = 30.0
DEFAULT_SAFETY_TIMEOUT_S = 5.0


@dataclass(frozen=True)
class ChatReply:
    text: str
    blocked: bool = False
    model: Optional[str] = None


def _remaining(deadline: float | None, cap: float | None = None) -> float | None:
    if deadline is None:
        return cap
    left = max(0.0, deadline - time.monotonic())
    return left if cap is None else min(left, cap)


class ChatPipeline:
    """
    Single-turn chat: optional content-safety screening, then one completion call.

    The safety classifier is optional. When it is configured its verdict gates
    the completion call; when it fails the message is let through (fail-open).
    Both calls share one deadline of ``timeout_s`` seconds; the safety check is
    additionally capped at ``safety_timeout_s``.
    """

    def __init__(
        self,
        *,
        completion: LLMProvider,
        model: str,
        safety: SafetyClassifier | None = None,
        timeout_s: float | None = DEFAULT_REQUEST_TIMEOUT_S,
        safety_timeout_s: float | None = DEFAULT_SAFETY_TIMEOUT_S,
        severity_threshold: int = MIN_FLAGGED_SEVERITY,
        system_prompt: str = SYSTEM_PROMPT,
    ):
        self.completion = completion
        self.model = model
        self.safety = safety
        self.timeout_s = timeout_s
        self.safety_timeout_s = safety_timeout_s
        self.severity_threshold = severity_threshold
        self.system_prompt = system_prompt

    @property
    def safety_enabled(self) -> bool:
        return self.safety is not None

    def is_configured(self) -> bool:
        return bool(self.model)

    async def run(self, message: str, *, trace_id: str | None = None) -> ChatReply:
        deadline = None if self.timeout_s is None else time.monotonic() + self.timeout_s

        verdict = await self.check_content_safety(message, deadline=deadline, trace_id=trace_id)
        if not verdict.is_safe:
            logger.warning("Unsafe content detected: %s", verdict.reason)
            return ChatReply(text=REFUSAL_TEXT, blocked=True, model=self.model)

        logger.info("Sending chat request to %s", self.completion.name)
        try:
            response = await asyncio.wait_for(
                self.completion.generate(self._build_request(message, deadline, trace_id)),
                timeout=_remaining(deadline),
            )
        except (LLMError, OSError, asyncio.TimeoutError) as exc:
            if isinstance(exc, asyncio.TimeoutError) and deadline is not None and _remaining(deadline) == 0:
                detail = f"completion request timed out after {self.timeout_s}s"
            else:
                detail = str(exc) or type(exc).__name__
            code = getattr(exc, "code", type(exc).__name__)
            logger.error("Completion request failed: %s (%s)", detail, code, exc_info=exc)
            raise UpstreamFailure(detail) from exc
        except Exception as exc:
            logger.exception("Unexpected error during chat request: %s", exc)
            raise UnexpectedFailure(str(exc)) from exc

        return self._to_reply(response, trace_id)

    async def check_content_safety(
        self,
        message: str,
        *,
        deadline: float | None = None,
        trace_id: str | None = None,
    ) -> SafetyVerdict:
        if self.safety is None:
            return SafetyVerdict.safe()

        start = time.perf_counter()
        try:
            scores = await asyncio.wait_for(
                self.safety.analyze(message),
                timeout=_remaining(deadline, self.safety_timeout_s),
            )
        except Exception as exc:
            # fail-open
            logger.error("Content safety check failed: %r", exc)
            return SafetyVerdict.safe()

        verdict = evaluate_severities(scores, threshold=self.severity_threshold)
        logger.info(
            json.dumps(
                {
                    "event": "safety_check",
                    "trace_id": trace_id,
                    "classifier": self.safety.name,
                    "is_safe": verdict.is_safe,
                    "reason": verdict.reason or None,
                    "latency_ms": int((time.perf_counter() - start) * 1000),
                },
                ensure_ascii=False,
            )
        )
        return verdict

    def _build_request(self, message: str, deadline: float | None, trace_id: str | None) -> LLMRequest:
        return LLMRequest(
            messages=[
                LLMMessage(role="system", content=self.system_prompt),
                LLMMessage(role="user", content=message),
            ],
            model=self.model,
            timeout_s=_remaining(deadline),
            metadata={"trace_id": trace_id},
        )

    def _to_reply(self, response: LLMResponse, trace_id: str | None) -> ChatReply:
        text = response.content
        if not text:
            logger.warning("Completion returned no text; using fallback reply")
            return ChatReply(text=FALLBACK_TEXT, model=response.model)

        logger.info(
            json.dumps(
                {
                    "event": "completion",
                    "trace_id": trace_id,
                    "provider": response.provider,
                    "model": response.model,
                    "latency_ms": response.latency_ms,
                    "finish_reason": response.finish_reason,
                    "tokens_total": response.usage.total_tokens,
                },
                ensure_ascii=False,
            )
        )
        return ChatReply(text=text, model=response.model)

    async def aclose(self) -> None:
        await self.completion.aclose()
        if self.safety is not None:
            await self.safety.aclose()
