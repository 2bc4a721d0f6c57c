from __future__ import annotations

import logging

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from storefront_chat.chat.errors import ChatError, UnexpectedFailure


def _error_response(request: Request, status_code: int, message: str) -> JSONResponse:
    trace_id = getattr(request.state, "trace_id", None)
    response = JSONResponse(status_code=status_code, content={"error": message})
    if trace_id:
        response.headers["X-Trace-Id"] = trace_id
    return response


def register_exception_handlers(app) -> None:
    logger = logging.getLogger(__name__)

    @app.exception_handler(RequestValidationError)
    async def handle_validation(request: Request, exc: RequestValidationError):
        logger.warning("Invalid request body", extra={"path": request.url.path, "errors": exc.errors()})
        return _error_response(request, 400, "Invalid request body")

    @app.exception_handler(ChatError)
    async def handle_chat_error(request: Request, exc: ChatError):
        trace_id = getattr(request.state, "trace_id", None)
        if exc.status_code >= 500:
            logger.error(
                "Error processing chat message: %s",
                exc,
                exc_info=exc,
                extra={"trace_id": trace_id, "code": exc.code},
            )
        else:
            logger.warning("Rejected chat message: %s", exc, extra={"trace_id": trace_id, "code": exc.code})
        return _error_response(request, exc.status_code, exc.client_message)

    @app.exception_handler(Exception)
    async def handle_unknown(request: Request, exc: Exception):  # noqa: ARG001
        trace_id = getattr(request.state, "trace_id", None)
        logger.exception("Unexpected error in chat endpoint", extra={"trace_id": trace_id, "path": request.url.path})
        return _error_response(request, 500, UnexpectedFailure.default_message)
