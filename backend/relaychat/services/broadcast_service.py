"""Broadcast of incoming chat messages to every connected client."""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from relaychat.api.ws.manager import ConnectionManager
from relaychat.api.ws.schemas import ServerMessage
from relaychat.models.schemas.message import AckPayload, ChatMessage
from relaychat.services.message_backend import MessageBackend

logger = logging.getLogger(__name__)


@dataclass
class BroadcastResult:
    """Outcome of handling one incoming message."""

    message: ChatMessage
    delivered: int
    persisted: bool
    ack: Optional[AckPayload] = None


class BroadcastEngine:
    """
    Stamp, persist and fan out chat messages.

    Every registered connection receives each message, the sender included.
    Persistence is best effort and never blocks the broadcast.
    """

    def __init__(self, manager: ConnectionManager, backend: MessageBackend):
        self.manager = manager
        self.backend = backend
        self._last_timestamp: Optional[datetime] = None

    def _next_timestamp(self) -> datetime:
        now = datetime.now(timezone.utc)
        if self._last_timestamp is not None and now < self._last_timestamp:
            now = self._last_timestamp
        self._last_timestamp = now
        return now

    async def handle_incoming(
        self,
        sender_id: str,
        text: str,
        want_ack: bool = False,
    ) -> BroadcastResult:
        message = ChatMessage(
            text=text,
            sender_id=sender_id,
            timestamp=self._next_timestamp(),
        )

        persisted = False
        if self.backend.is_available:
            persisted = await self.backend.save(message)

        delivered = await self.manager.broadcast(
            ServerMessage.chat_message(message).dump()
        )

        logger.info(
            "Message broadcast: sender=%s len=%d delivered=%d persisted=%s",
            sender_id,
            len(text),
            delivered,
            persisted,
        )

        return BroadcastResult(
            message=message,
            delivered=delivered,
            persisted=persisted,
            ack=AckPayload() if want_ack else None,
        )
