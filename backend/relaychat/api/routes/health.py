"""Status and health check endpoints."""

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel

from relaychat.api.deps import (
    get_app_settings,
    get_connection_manager,
    get_message_backend,
)
from relaychat.api.ws.manager import ConnectionManager
from relaychat.config import Settings
from relaychat.services.message_backend import MessageBackend

router = APIRouter()


class StatusResponse(BaseModel):
    status: str


class HealthResponse(BaseModel):
    status: str
    version: str


class ReadyResponse(BaseModel):
    status: str
    persistence: str
    connections: int


@router.get("/", response_model=StatusResponse)
async def root(settings: Settings = Depends(get_app_settings)):
    return StatusResponse(status=settings.status_message)


@router.get("/health", response_model=HealthResponse)
async def health(settings: Settings = Depends(get_app_settings)):
    return HealthResponse(status="healthy", version=settings.app_version)


@router.get("/health/ready", response_model=ReadyResponse, status_code=status.HTTP_200_OK)
async def ready(
    backend: MessageBackend = Depends(get_message_backend),
    manager: ConnectionManager = Depends(get_connection_manager),
):
    persistence_status = "disabled"

    if backend.is_available:
        if await backend.ping():
            persistence_status = "connected"
        else:
            persistence_status = "error"

    overall = "ready" if persistence_status == "connected" else "degraded"
    return ReadyResponse(
        status=overall,
        persistence=persistence_status,
        connections=manager.total_connections,
    )
