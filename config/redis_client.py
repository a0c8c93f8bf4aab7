"""
config/redis_client.py
Async Redis client used by the rate limiter and the health check.
"""

from typing import Optional
import redis.asyncio as aioredis

from config.settings import settings


# ── Global client (initialized on startup) ───────────────────
redis_client: Optional[aioredis.Redis] = None


async def init_redis() -> None:
    """Initialize the Redis connection pool."""
    global redis_client
    redis_client = aioredis.from_url(
        settings.REDIS_URL,
        encoding="utf-8",
        decode_responses=True,
        max_connections=50,
    )
    # Test connection
    await redis_client.ping()


async def close_redis() -> None:
    """Close Redis connection pool."""
    global redis_client
    if redis_client:
        await redis_client.aclose()
        redis_client = None


# ── Rate Limiting ─────────────────────────────────────────────
class RateLimiter:
    """Fixed-window request counter keyed by client."""

    def __init__(self, client: aioredis.Redis, limit: int, window_seconds: int = 60):
        self.client = client
        self.limit = limit
        self.window_seconds = window_seconds

    async def hit(self, key: str) -> bool:
        """
        Count one request against ``key``.
        Returns True if the request is allowed, False if rate limited.
        """
        count = await self.client.incr(key)
        if count == 1:
            await self.client.expire(key, self.window_seconds)
        return count <= self.limit
