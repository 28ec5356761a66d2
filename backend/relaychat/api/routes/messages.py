"""Message history endpoint."""

import logging

from fastapi import APIRouter, Depends

from relaychat.api.deps import get_message_backend
from relaychat.core.exceptions import HistoryUnavailableError, StorageReadError
from relaychat.models.schemas.message import ChatMessage
from relaychat.services.message_backend import MessageBackend

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get(
    "",
    response_model=list[ChatMessage],
    summary="List chat history",
    description=(
        "All persisted messages ordered by timestamp ascending. "
        "Returns a single placeholder message when persistence is disabled."
    ),
)
async def list_messages(
    backend: MessageBackend = Depends(get_message_backend),
) -> list[ChatMessage]:
    try:
        return await backend.list_all()
    except StorageReadError as e:
        logger.error("History fetch failed: %s", str(e))
        raise HistoryUnavailableError()
