"""
Redis cache utilities
"""

import json
from typing import Any, Optional

import redis.asyncio as redis
from redis.asyncio.connection import ConnectionPool

from app.config import get_settings


def _get_settings():
    """Lazy settings loader"""
    return get_settings()

# Connection pool
_pool = None


async def get_redis_pool():
    """Get or create Redis connection pool"""
    global _pool
    if _pool is None:
        settings = _get_settings()
        _pool = ConnectionPool.from_url(
            settings.REDIS_URL,
            max_connections=20,
            decode_responses=True,
        )
    return _pool


async def get_redis():
    """Get Redis client"""
    pool = await get_redis_pool()
    return redis.Redis(connection_pool=pool)


async def close_redis():
    """Close Redis connections"""
    global _pool
    if _pool is not None:
        await _pool.disconnect()
        _pool = None


class CacheService:
    """JSON cache over Redis with prefixed keys"""

    def __init__(self, prefix: str = "split"):
        self.prefix = prefix

    def _key(self, key: str) -> str:
        """Generate full cache key with prefix"""
        return f"{self.prefix}:{key}"

    async def get(self, key: str) -> Optional[Any]:
        """Get value from cache"""
        client = await get_redis()
        value = await client.get(self._key(key))
        if value is None:
            return None
        try:
            return json.loads(value)
        except json.JSONDecodeError:
            return value

    async def set(
        self,
        key: str,
        value: Any,
        ttl: Optional[int] = None
    ) -> bool:
        """Set value in cache with optional TTL (seconds)"""
        client = await get_redis()
        if ttl is None:
            ttl = _get_settings().VISIBILITY_CACHE_TTL

        if isinstance(value, (dict, list)):
            value = json.dumps(value)

        return await client.setex(self._key(key), ttl, value)

    async def delete(self, key: str) -> bool:
        """Delete value from cache"""
        client = await get_redis()
        return await client.delete(self._key(key)) > 0

    async def exists(self, key: str) -> bool:
        """Check if key exists in cache"""
        client = await get_redis()
        return await client.exists(self._key(key)) > 0


class VisibilityCache(CacheService):
    """Workspace-keyed cache for visibility results"""

    def __init__(self, prefix: Optional[str] = None):
        super().__init__(prefix=prefix or _get_settings().VISIBILITY_CACHE_PREFIX)

    async def get_result(self, workspace_id: str) -> Optional[dict]:
        """Get cached visibility result"""
        return await self.get(workspace_id)

    async def set_result(
        self,
        workspace_id: str,
        result: dict,
        ttl: Optional[int] = None
    ) -> bool:
        """Cache visibility result"""
        return await self.set(workspace_id, result, ttl)

    async def invalidate(self, workspace_id: str) -> bool:
        """Drop the cached result, e.g. when an assessment completes"""
        return await self.delete(workspace_id)


# Initialize cache instances
visibility_cache = VisibilityCache()
