"""Persistence backend for chat history."""

import logging
from typing import Optional

from redis.asyncio import Redis

from relaychat.core.exceptions import StorageWriteError
from relaychat.infrastructure.redis import close_redis, open_redis
from relaychat.models.schemas.message import ChatMessage
from relaychat.repositories.message_repository import MessageRepository

logger = logging.getLogger(__name__)


class MessageBackend:
    """
    Best-effort message persistence.

    Availability is decided once by try_connect() and never re-checked.
    Failures of an available backend are handled per call: writes are
    logged and swallowed, reads raise StorageReadError to the caller.
    """

    def __init__(
        self,
        repository: Optional[MessageRepository] = None,
        client: Optional[Redis] = None,
    ):
        self._repository = repository
        self._client = client

    @classmethod
    async def try_connect(
        cls,
        redis_url: Optional[str],
        key: str = "chat:messages",
    ) -> "MessageBackend":
        client = await open_redis(redis_url)
        if client is None:
            if redis_url:
                logger.warning("Message persistence disabled: backend unreachable")
            else:
                logger.warning("Message persistence disabled: no redis_url configured")
            return cls()

        logger.info("Message persistence enabled: key=%s", key)
        return cls(MessageRepository(client, key), client)

    @property
    def is_available(self) -> bool:
        return self._repository is not None

    async def save(self, message: ChatMessage) -> bool:
        """Append a message. Returns False if it was not stored."""
        if self._repository is None:
            return False

        try:
            await self._repository.append(message)
        except StorageWriteError as e:
            logger.warning(
                "Failed to persist message from %s: %s",
                message.sender_id,
                str(e),
            )
            return False
        return True

    async def list_all(self) -> list[ChatMessage]:
        """Return stored messages by ascending timestamp, or the fallback sentinel."""
        if self._repository is None:
            return [ChatMessage.backend_unavailable()]

        messages = await self._repository.all()
        # stable sort keeps insertion order for equal timestamps
        return sorted(messages, key=lambda m: m.timestamp)

    async def ping(self) -> bool:
        """Check the backend still answers. Does not change availability."""
        if self._repository is None:
            return False
        return await self._repository.ping()

    async def close(self) -> None:
        await close_redis(self._client)
        self._client = None
