"""WebSocket API module."""

from relaychat.api.ws.manager import ConnectionManager

__all__ = ["ConnectionManager"]
