from storefront_chat.api.routers.chat import router as chat_router
from storefront_chat.api.routers.health import router as health_router

__all__ = ["health_router", "chat_router"]
