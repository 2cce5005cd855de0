from unittest.mock import AsyncMock

import pytest
import redis.asyncio as aioredis

from gradii.integrations import redis_client
from gradii.integrations.redis_client import close_redis, get_redis, ping


@pytest.mark.asyncio
async def test_ping_ok(redis_client):
    assert await ping(redis_client) is True


@pytest.mark.asyncio
async def test_ping_failure_returns_false():
    broken = AsyncMock()
    broken.ping.side_effect = aioredis.ConnectionError("down")

    assert await ping(broken) is False


@pytest.mark.asyncio
async def test_get_redis_is_shared_and_closable():
    first = get_redis()

    assert get_redis() is first

    await close_redis()
    assert redis_client._redis_client is None
