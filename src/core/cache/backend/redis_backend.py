from typing import Any

from redis import asyncio as aioredis

from src.core.cache.backend.interface import CacheBackend


class RedisCacheBackend(CacheBackend):
    """
    Shared cache for multi-instance deployments.

    Until ``connect`` runs every read is a miss and every write is dropped, so
    callers fall back to computing values directly.
    """

    def __init__(self) -> None:
        self.redis: aioredis.Redis | None = None

    async def connect(self, url: str) -> None:
        """Connect to the Redis server."""
        if self.redis is None:
            self.redis = aioredis.Redis.from_url(url)

    async def close(self) -> None:
        """Close the Redis connection."""
        if self.redis is not None:
            await self.redis.aclose()
            self.redis = None

    async def get_value(self, key: str) -> Any:
        if self.redis is not None:
            return await self.redis.get(key)
        return None

    async def set_value(self, key: str, value: Any, ttl: int) -> None:
        if self.redis is not None:
            await self.redis.set(key, value, ex=ttl)

    async def delete(self, key: str) -> None:
        if self.redis is not None:
            await self.redis.delete(key)

    def is_initialized(self) -> bool:
        return self.redis is not None
