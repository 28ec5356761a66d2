"""Redis connection management."""

import logging
from typing import Optional

import redis.asyncio as redis
from redis.exceptions import RedisError

logger = logging.getLogger(__name__)


async def open_redis(url: Optional[str]) -> Optional[redis.Redis]:
    """
    Connect to Redis and verify it answers PING.

    Returns None when no URL is configured or the server is unreachable.
    """
    if not url:
        return None

    client = redis.from_url(url, decode_responses=True)
    try:
        await client.ping()
    except (RedisError, OSError) as e:
        logger.warning("Redis unreachable at startup: %s", str(e))
        await client.aclose()
        return None

    return client


async def close_redis(client: Optional[redis.Redis]) -> None:
    if client:
        await client.aclose()
