from fastapi import APIRouter

from storefront_chat.api.routers import chat_router, health_router

router = APIRouter(prefix="/v1")
router.include_router(health_router)
router.include_router(chat_router)
