"""FastAPI application entry point."""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from relaychat.api.routes import health, messages
from relaychat.api.ws.chat import router as ws_chat_router
from relaychat.api.ws.manager import ConnectionManager
from relaychat.config import Settings, get_settings
from relaychat.core.exceptions import RelayChatException
from relaychat.core.logging import configure_logging
from relaychat.services.broadcast_service import BroadcastEngine
from relaychat.services.message_backend import MessageBackend


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    backend = await MessageBackend.try_connect(settings.redis_url, settings.messages_key)
    manager = ConnectionManager()

    app.state.message_backend = backend
    app.state.connection_manager = manager
    app.state.broadcast_engine = BroadcastEngine(manager, backend)
    yield
    await backend.close()


async def relaychat_exception_handler(request: Request, exc: RelayChatException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "code": exc.code},
    )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Real-time chat relay with optional message history",
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(RelayChatException, relaychat_exception_handler)

    app.include_router(health.router, tags=["Health"])
    app.include_router(messages.router, prefix="/api/messages", tags=["Messages"])
    app.include_router(ws_chat_router, prefix="/ws", tags=["WebSocket"])

    return app


app = create_app()
