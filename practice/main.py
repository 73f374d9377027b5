from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from practice.api import deps
from practice.api.api import api_router
from practice.api.endpoints.practice import websocket_practice
from practice.config.logging_config import setup_logging
from practice.config.settings import settings
from practice.system.exceptions import BaseHTTPException, common_exception_handler

setup_logging()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    yield
    await deps.shutdown()


def prepare_app() -> FastAPI:
    app = FastAPI(
        title=settings.APP_NAME,
        description="Interview practice sessions",
        version="1.0.0",
        lifespan=lifespan
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router, prefix="/api/v1")
    app.add_exception_handler(BaseHTTPException, common_exception_handler)
    app.websocket("/api/v1/practice/ws")(websocket_practice)

    @app.get("/health")
    async def health():
        return {
            "status": "ok",
            "service": settings.APP_NAME,
            "analyzer": settings.ANALYZER_BACKEND,
            "open_sessions": len(deps.get_storage().list_ids()),
        }

    return app


def start_service() -> None:
    uvicorn.run(
        prepare_app(),
        host=settings.APP_ADDRESS,
        port=settings.APP_PORT,
    )


app = prepare_app()

if __name__ == "__main__":
    start_service()
