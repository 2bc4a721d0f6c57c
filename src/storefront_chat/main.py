from __future__ import annotations

from contextlib import asynccontextmanager
import json
import logging

from fastapi import FastAPI

from storefront_chat import __version__
from storefront_chat.api.config import get_settings
from storefront_chat.api.deps import close_chat_pipeline, get_chat_pipeline
from storefront_chat.api.exception_handlers import register_exception_handlers
from storefront_chat.api.middleware import setup_middlewares
from storefront_chat.api.routes import router

logging.basicConfig(
    level=get_settings().log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI):  # noqa: ARG001
    # Build the API clients up front so a missing endpoint fails the boot, not the first request.
    logging.info(json.dumps({"event": "startup", "message": "Initializing chat pipeline..."}, ensure_ascii=False))
    pipeline = get_chat_pipeline()
    logging.info(
        json.dumps(
            {
                "event": "startup",
                "message": "Chat pipeline ready",
                "model": pipeline.model,
                "safety_enabled": pipeline.safety_enabled,
            },
            ensure_ascii=False,
        )
    )
    try:
        yield
    finally:
        await close_chat_pipeline()
        logging.info(json.dumps({"event": "shutdown", "message": "Chat pipeline closed"}, ensure_ascii=False))


def create_app() -> FastAPI:
    app = FastAPI(
        title="storefront-chat",
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )
    setup_middlewares(app)
    register_exception_handlers(app)
    app.include_router(router)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run("storefront_chat.main:app", host=settings.host, port=settings.port, log_level=settings.log_level)
