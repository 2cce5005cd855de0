"""
Redis client management.

One ``redis.asyncio`` client is shared by the session manager, the flow
store and the rate limiter. It is created lazily from ``settings.redis`` and
closed by the application lifespan.
"""

from __future__ import annotations

from typing import Optional

import redis.asyncio as aioredis

from gradii.core.logging_config import get_logger
from gradii.server.core.config import settings

logger = get_logger(__name__)

_redis_client: Optional[aioredis.Redis] = None


def create_redis(url: str, socket_timeout: Optional[float] = None) -> aioredis.Redis:
    """Create a Redis client that decodes responses to ``str``."""
    return aioredis.from_url(url, decode_responses=True, socket_timeout=socket_timeout)


def get_redis() -> aioredis.Redis:
    """Return the shared Redis client, creating it on first use."""
    global _redis_client
    if _redis_client is None:
        config = settings.redis
        _redis_client = create_redis(config.url, config.socket_timeout)
        logger.info("Redis client created")
    return _redis_client


async def close_redis() -> None:
    """Close the shared Redis client if one was created."""
    global _redis_client
    if _redis_client is not None:
        await _redis_client.aclose()
        _redis_client = None
        logger.info("Redis client closed")


async def ping(client: aioredis.Redis) -> bool:
    """Check Redis connectivity."""
    try:
        return bool(await client.ping())
    except aioredis.RedisError as e:
        logger.warning(f"Redis ping failed: {e}")
        return False
