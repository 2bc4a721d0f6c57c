from fastapi import APIRouter, Depends

from storefront_chat.api.deps import get_chat_pipeline
from storefront_chat.api.schemas import HealthResponse
from storefront_chat.chat.pipeline import ChatPipeline

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health(pipeline: ChatPipeline = Depends(get_chat_pipeline)) -> HealthResponse:
    return HealthResponse(chat_configured=pipeline.is_configured())
