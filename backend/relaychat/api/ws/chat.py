"""WebSocket chat endpoint."""

import json
import logging
from typing import Any

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect
from pydantic import ValidationError

from relaychat.api.deps import get_broadcast_engine, get_connection_manager
from relaychat.api.ws.manager import ConnectionManager
from relaychat.api.ws.schemas import (
    ClientMessage,
    ClientMessageType,
    ServerMessage,
)
from relaychat.services.broadcast_service import BroadcastEngine

logger = logging.getLogger(__name__)

router = APIRouter()


@router.websocket("/chat")
async def websocket_chat(
    websocket: WebSocket,
    manager: ConnectionManager = Depends(get_connection_manager),
    engine: BroadcastEngine = Depends(get_broadcast_engine),
):
    """
    WebSocket endpoint for the shared chat room.

    Protocol:
    - Client sends: {type: "chat_message" | "ping", payload: "<text>" | {text}, ack_id?}
      A bare JSON string is treated as a chat_message without ack.
    - Server sends: {type: "connected" | "chat_message" | "ack" | "pong" | "error", payload: {...}}
    """
    connection_id = await manager.connect(websocket)

    try:
        connected_msg = ServerMessage.connected(connection_id)
        await manager.send_message(connection_id, connected_msg.dump())

        while True:
            try:
                data = await receive_frame(websocket)
            except ValueError as e:
                error_msg = ServerMessage.error(
                    code="INVALID_MESSAGE",
                    message=f"Invalid message format: {str(e)}",
                    recoverable=True,
                )
                await manager.send_message(connection_id, error_msg.dump())
                continue

            await handle_client_message(
                connection_id=connection_id,
                data=data,
                manager=manager,
                engine=engine,
            )

    except WebSocketDisconnect:
        logger.debug("WebSocket closed by peer: connection_id=%s", connection_id)
    except Exception as e:
        logger.exception("WebSocket error: %s", str(e))
        error_msg = ServerMessage.error(
            code="INTERNAL_ERROR",
            message="An unexpected error occurred",
            recoverable=False,
        )
        if not await manager.send_message(connection_id, error_msg.dump()):
            logger.debug("Could not report error to connection_id=%s", connection_id)
    finally:
        await manager.disconnect(connection_id)


async def receive_frame(websocket: WebSocket) -> Any:
    """
    Receive one frame and decode it as JSON.

    Text and binary frames are both accepted; binary payloads must be UTF-8.
    Raises ValueError for undecodable frames.
    """
    message = await websocket.receive()
    if message["type"] == "websocket.disconnect":
        raise WebSocketDisconnect(message.get("code", 1000), message.get("reason"))

    text = message.get("text")
    if text is None:
        text = (message.get("bytes") or b"").decode("utf-8")
    return json.loads(text)


async def handle_client_message(
    connection_id: str,
    data: Any,
    manager: ConnectionManager,
    engine: BroadcastEngine,
) -> None:
    """Process a client message and route to appropriate handler."""
    if isinstance(data, str):
        data = {"type": ClientMessageType.CHAT_MESSAGE.value, "payload": data}

    if not isinstance(data, dict):
        error_msg = ServerMessage.error(
            code="INVALID_MESSAGE",
            message="Message must be a JSON object or string",
            recoverable=True,
        )
        await manager.send_message(connection_id, error_msg.dump())
        return

    try:
        message = ClientMessage.model_validate(data)
    except ValidationError as e:
        error_msg = ServerMessage.error(
            code="INVALID_MESSAGE",
            message=f"Failed to parse message: {str(e)}",
            recoverable=True,
        )
        await manager.send_message(connection_id, error_msg.dump())
        return

    if message.type == ClientMessageType.PING:
        await manager.update_ping(connection_id)
        await manager.send_message(connection_id, ServerMessage.pong().dump())
        return

    await handle_chat_message(
        connection_id=connection_id,
        message=message,
        manager=manager,
        engine=engine,
    )


async def handle_chat_message(
    connection_id: str,
    message: ClientMessage,
    manager: ConnectionManager,
    engine: BroadcastEngine,
) -> None:
    """Broadcast a chat message and acknowledge it if the sender asked."""
    try:
        text = message.chat_text()
    except ValueError as e:
        error_msg = ServerMessage.error(
            code="INVALID_PAYLOAD",
            message=str(e),
            recoverable=True,
        )
        await manager.send_message(connection_id, error_msg.dump())
        return

    if not text.strip():
        error_msg = ServerMessage.error(
            code="EMPTY_MESSAGE",
            message="Message text cannot be empty",
            recoverable=True,
        )
        await manager.send_message(connection_id, error_msg.dump())
        return

    logger.info(
        "Message received: connection_id=%s len=%d",
        connection_id,
        len(text),
    )

    result = await engine.handle_incoming(
        sender_id=connection_id,
        text=text,
        want_ack=message.wants_ack,
    )

    if result.ack is not None:
        ack_msg = ServerMessage.ack(message.ack_id, result.ack)
        await manager.send_message(connection_id, ack_msg.dump())
