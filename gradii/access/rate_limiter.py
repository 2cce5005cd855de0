"""
Sliding-window rate limiting on Redis sorted sets.

Each identifier owns a sorted set ``rate_limit:{identifier}`` whose members
are request timestamps. A check trims entries older than the window, counts
the rest and records the current request, all in one pipeline.

The limiter fails open: when Redis is unavailable requests are allowed.
"""

from __future__ import annotations

import time
import uuid
from dataclasses import dataclass

import redis.asyncio as aioredis

from gradii.core.logging_config import get_logger

logger = get_logger(__name__)

RATE_LIMIT_PREFIX = "rate_limit:"


@dataclass(frozen=True)
class RateLimitResult:
    allowed: bool
    remaining: int
    reset_at: float
    total_hits: int

    @property
    def retry_after_seconds(self) -> int:
        return max(0, int(self.reset_at - time.time()))


class RedisRateLimiter:
    """Redis-backed sliding window limiter."""

    def __init__(self, redis: aioredis.Redis) -> None:
        self._redis = redis

    @staticmethod
    def _key(identifier: str) -> str:
        return f"{RATE_LIMIT_PREFIX}{identifier}"

    async def check(self, identifier: str, max_requests: int, window_seconds: int) -> RateLimitResult:
        """Record a request for ``identifier`` and report whether it is within the limit.

        Args:
            identifier: Who is being limited, e.g. ``otp:{email}``
            max_requests: Requests allowed per window
            window_seconds: Window length in seconds

        Returns:
            RateLimitResult; ``reset_at`` is a unix timestamp in seconds
        """
        key = self._key(identifier)
        now = time.time()
        window_start = now - window_seconds
        reset_at = now + window_seconds

        try:
            async with self._redis.pipeline(transaction=True) as pipe:
                pipe.zremrangebyscore(key, 0, window_start)
                pipe.zcard(key)
                pipe.zadd(key, {f"{now}-{uuid.uuid4().hex}": now})
                pipe.expire(key, int(window_seconds))
                results = await pipe.execute()
        except aioredis.RedisError as e:
            logger.error(f"Rate limit check failed for {identifier}: {e}")
            return RateLimitResult(allowed=True, remaining=max_requests - 1, reset_at=reset_at, total_hits=1)

        total_hits = int(results[1] or 0) + 1
        return RateLimitResult(
            allowed=total_hits <= max_requests,
            remaining=max(0, max_requests - total_hits),
            reset_at=reset_at,
            total_hits=total_hits,
        )

    async def status(self, identifier: str, max_requests: int, window_seconds: int) -> RateLimitResult:
        """Report the current window without recording a request."""
        key = self._key(identifier)
        now = time.time()
        try:
            await self._redis.zremrangebyscore(key, 0, now - window_seconds)
            count = int(await self._redis.zcard(key))
        except aioredis.RedisError as e:
            logger.error(f"Failed to get rate limit status for {identifier}: {e}")
            return RateLimitResult(allowed=True, remaining=max_requests, reset_at=now + window_seconds, total_hits=0)
        return RateLimitResult(
            allowed=count < max_requests,
            remaining=max(0, max_requests - count),
            reset_at=now + window_seconds,
            total_hits=count,
        )

    async def reset(self, identifier: str) -> bool:
        """Forget every request recorded for ``identifier``."""
        try:
            return bool(await self._redis.delete(self._key(identifier)))
        except aioredis.RedisError as e:
            logger.error(f"Failed to reset rate limit for {identifier}: {e}")
            return False
