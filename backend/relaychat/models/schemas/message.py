"""Chat message schemas shared by the socket, store and HTTP layers."""

from datetime import datetime, timezone
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

SYSTEM_SENDER_ID = "System"
BACKEND_UNAVAILABLE_TEXT = "<backend unavailable>"


class ChatMessage(BaseModel):
    """A chat message as broadcast to clients and kept in history."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    text: str
    sender_id: str = Field(..., alias="senderId")
    timestamp: datetime

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)

    @classmethod
    def backend_unavailable(cls, timestamp: Optional[datetime] = None) -> "ChatMessage":
        """Placeholder returned as history when persistence is disabled."""
        return cls(
            text=BACKEND_UNAVAILABLE_TEXT,
            sender_id=SYSTEM_SENDER_ID,
            timestamp=timestamp or datetime.now(timezone.utc),
        )


class AckPayload(BaseModel):
    """Acknowledgement sent to a sender once its message was broadcast."""

    status: Literal["ok"] = "ok"
