"""WebSocket message schemas."""

from enum import Enum
from typing import Any, Optional, Union

from pydantic import BaseModel, field_validator

from relaychat.models.schemas.message import AckPayload, ChatMessage


class ClientMessageType(str, Enum):
    """Types of messages the client can send."""

    CHAT_MESSAGE = "chat_message"
    PING = "ping"


# Event names used by older clients
CLIENT_TYPE_ALIASES = {
    "chat message": ClientMessageType.CHAT_MESSAGE.value,
}


class ServerMessageType(str, Enum):
    """Types of messages the server can send."""

    CONNECTED = "connected"
    CHAT_MESSAGE = "chat_message"
    ACK = "ack"
    ERROR = "error"
    PONG = "pong"


class ChatMessagePayload(BaseModel):
    """Object form of an outgoing chat message."""

    text: str


class ClientMessage(BaseModel):
    """Base model for client -> server messages."""

    type: ClientMessageType
    payload: Optional[Union[str, dict[str, Any]]] = None
    ack_id: Optional[str] = None

    @field_validator("type", mode="before")
    @classmethod
    def _normalize_type(cls, value: Any) -> Any:
        if isinstance(value, str):
            return CLIENT_TYPE_ALIASES.get(value, value)
        return value

    @property
    def wants_ack(self) -> bool:
        return self.ack_id is not None

    def chat_text(self) -> str:
        """
        Extract the message text from a raw string or {"text": ...} payload.

        Raises ValueError if no text is present.
        """
        if isinstance(self.payload, str):
            return self.payload
        if isinstance(self.payload, dict):
            return ChatMessagePayload(**self.payload).text
        raise ValueError("chat_message payload must be a string or an object with 'text'")


class ConnectedPayload(BaseModel):
    """Payload for connection established message."""

    connection_id: str


class ErrorPayload(BaseModel):
    """Payload for error messages."""

    code: str
    message: str
    recoverable: bool = True


class ServerMessage(BaseModel):
    """Base model for server -> client messages."""

    type: ServerMessageType
    payload: dict[str, Any]
    ack_id: Optional[str] = None

    def dump(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)

    @classmethod
    def connected(cls, connection_id: str):
        return cls(
            type=ServerMessageType.CONNECTED,
            payload=ConnectedPayload(connection_id=connection_id).model_dump(),
        )

    @classmethod
    def chat_message(cls, message: ChatMessage):
        return cls(
            type=ServerMessageType.CHAT_MESSAGE,
            payload=message.to_wire(),
        )

    @classmethod
    def ack(cls, ack_id: str, payload: AckPayload):
        return cls(
            type=ServerMessageType.ACK,
            payload=payload.model_dump(),
            ack_id=ack_id,
        )

    @classmethod
    def error(cls, code: str, message: str, recoverable: bool = True):
        return cls(
            type=ServerMessageType.ERROR,
            payload=ErrorPayload(
                code=code,
                message=message,
                recoverable=recoverable,
            ).model_dump(),
        )

    @classmethod
    def pong(cls):
        return cls(
            type=ServerMessageType.PONG,
            payload={},
        )
