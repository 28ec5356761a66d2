"""WebSocket connection management."""

import asyncio
import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional

from fastapi import WebSocket, WebSocketDisconnect

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class ActiveConnection:
    """Represents an active WebSocket connection."""

    connection_id: str
    websocket: WebSocket
    connected_at: datetime = field(default_factory=_utcnow)
    last_ping: datetime = field(default_factory=_utcnow)


class ConnectionManager:
    """
    Registry of connected chat clients.

    Each connection gets an opaque id on connect. The registry is owned by
    the application and handed to handlers, never reached through a global.
    """

    def __init__(self):
        self._connections: dict[str, ActiveConnection] = {}
        self._lock = asyncio.Lock()

    def _generate_connection_id(self) -> str:
        return uuid.uuid4().hex

    async def connect(self, websocket: WebSocket) -> str:
        """
        Accept a WebSocket connection and register it.

        Returns the connection_id for tracking.
        """
        await websocket.accept()
        connection_id = self._generate_connection_id()

        async with self._lock:
            self._connections[connection_id] = ActiveConnection(
                connection_id=connection_id,
                websocket=websocket,
            )

        logger.info("User connected: connection_id=%s", connection_id)
        return connection_id

    async def disconnect(self, connection_id: str) -> None:
        """Remove a connection from tracking. Unknown ids are ignored."""
        async with self._lock:
            connection = self._connections.pop(connection_id, None)

        if connection is None:
            return

        logger.info("User disconnected: connection_id=%s", connection_id)

    async def send_message(
        self,
        connection_id: str,
        message: dict[str, Any],
    ) -> bool:
        """
        Send a JSON message to a specific connection.

        Returns True if sent successfully, False if connection not found or failed.
        """
        connection = self._connections.get(connection_id)
        if connection is None:
            return False

        try:
            await connection.websocket.send_json(message)
            return True
        except WebSocketDisconnect:
            await self.disconnect(connection_id)
            return False
        except Exception as e:
            logger.warning(
                "Failed to send message to connection %s: %s",
                connection_id,
                str(e),
            )
            return False

    async def broadcast(self, message: dict[str, Any]) -> int:
        """
        Send a message to every registered connection.

        Returns the number of successful sends.
        """
        success_count = 0
        for conn_id in self.connection_ids:
            if await self.send_message(conn_id, message):
                success_count += 1

        return success_count

    async def update_ping(self, connection_id: str) -> None:
        """Update the last ping time for a connection."""
        connection = self._connections.get(connection_id)
        if connection:
            connection.last_ping = _utcnow()

    def get_connection(self, connection_id: str) -> Optional[ActiveConnection]:
        """Get connection info by ID."""
        return self._connections.get(connection_id)

    def is_connected(self, connection_id: str) -> bool:
        return connection_id in self._connections

    @property
    def connection_ids(self) -> list[str]:
        """Snapshot of the currently registered ids."""
        return list(self._connections)

    @property
    def total_connections(self) -> int:
        """Get total number of active connections."""
        return len(self._connections)
