import json
import logging
import time

from fastapi import APIRouter, Depends, Request

from storefront_chat.api.config import get_settings
from storefront_chat.api.deps import get_chat_pipeline
from storefront_chat.api.schemas import ChatRequest, ChatResponse, ErrorResponse
from storefront_chat.chat.pipeline import ChatPipeline
from storefront_chat.chat.validation import validate_message

router = APIRouter()


@router.post(
    "/chat",
    response_model=ChatResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    summary="Send one chat message",
    description=(
        "Example request:\n\n"
        "```\n"
        "curl -X POST http://localhost:8000/v1/chat \\\n"
        "  -H 'Content-Type: application/json' \\\n"
        "  -d '{\"message\":\"Do you ship to Canada?\"}'\n"
        "```\n"
    ),
)
async def chat(
    payload: ChatRequest,
    request: Request,
    pipeline: ChatPipeline = Depends(get_chat_pipeline),
) -> ChatResponse:
    logger = logging.getLogger(__name__)
    settings = get_settings()
    trace_id = getattr(request.state, "trace_id", None)
    start = time.perf_counter()

    message = validate_message(payload.message)

    log_payload = {
        "event": "chat_request",
        "trace_id": trace_id,
        "message_chars": len(message),
        "model": pipeline.model,
        "safety_enabled": pipeline.safety_enabled,
    }
    if settings.debug_logging:
        log_payload["message"] = message
    logger.info(json.dumps(log_payload, ensure_ascii=False))

    reply = await pipeline.run(message, trace_id=trace_id)

    logger.info(
        json.dumps(
            {
                "event": "chat_response",
                "trace_id": trace_id,
                "blocked": reply.blocked,
                "model_used": reply.model,
                "answer_chars": len(reply.text),
                "latency_ms_total": int((time.perf_counter() - start) * 1000),
            },
            ensure_ascii=False,
        )
    )
    return ChatResponse(response=reply.text)
