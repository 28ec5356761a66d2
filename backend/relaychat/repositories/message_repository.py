"""Message repository for Redis operations."""

from redis.asyncio import Redis
from redis.exceptions import RedisError

from relaychat.core.exceptions import StorageReadError, StorageWriteError
from relaychat.models.schemas.message import ChatMessage


class MessageRepository:
    """Append-only message log stored as JSON documents in a Redis list."""

    def __init__(self, redis: Redis, key: str = "chat:messages"):
        self.redis = redis
        self.key = key

    async def append(self, message: ChatMessage) -> None:
        try:
            await self.redis.rpush(self.key, message.model_dump_json(by_alias=True))
        except RedisError as e:
            raise StorageWriteError(str(e)) from e

    async def all(self) -> list[ChatMessage]:
        """Return every stored message in insertion order."""
        try:
            raw = await self.redis.lrange(self.key, 0, -1)
        except RedisError as e:
            raise StorageReadError(str(e)) from e

        try:
            return [ChatMessage.model_validate_json(item) for item in raw]
        except ValueError as e:
            raise StorageReadError(f"Corrupt message document: {e}") from e

    async def count(self) -> int:
        try:
            return await self.redis.llen(self.key)
        except RedisError as e:
            raise StorageReadError(str(e)) from e

    async def ping(self) -> bool:
        try:
            return bool(await self.redis.ping())
        except RedisError:
            return False
