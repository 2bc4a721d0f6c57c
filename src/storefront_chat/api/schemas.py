from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, Field


class ChatRequest(BaseModel):
    message: Optional[str] = Field(
        default=None,
        description="User message. Trimmed server-side; 1..1000 characters after trimming.",
        examples=["Do you have the red sneakers in size 42?"],
    )


class ChatResponse(BaseModel):
    response: str = Field(..., description="Assistant reply")


class ErrorResponse(BaseModel):
    error: str


class HealthResponse(BaseModel):
    status: Literal["ok"] = "ok"
    chat_configured: bool = True
