"""Generic Redis cache operations"""
import logging
from typing import List, Optional

import redis.asyncio as redis

from app.config import get_settings

settings = get_settings()
logger = logging.getLogger(__name__)


class CacheService:
    """
    Generic service for Redis cache operations.

    Every operation absorbs its own errors: a failed read behaves as a cache
    miss and a failed write or delete as a no-op, so callers never see a
    Redis exception.
    """

    _redis_client: Optional[redis.Redis] = None

    @classmethod
    async def get_redis_client(cls) -> redis.Redis:
        """
        Get or create Redis client singleton.

        Returns:
            Redis client instance
        """
        if cls._redis_client is None:
            cls._redis_client = redis.from_url(
                settings.redis_url,
                encoding="utf-8",
                decode_responses=True
            )
        return cls._redis_client

    @classmethod
    async def close_redis_client(cls):
        """Close Redis connection"""
        if cls._redis_client:
            await cls._redis_client.aclose()
            cls._redis_client = None

    @classmethod
    async def get(cls, key: str) -> Optional[str]:
        """
        Get value from cache.

        Args:
            key: Cache key

        Returns:
            Cached value if exists, None otherwise
        """
        try:
            client = await cls.get_redis_client()
            return await client.get(key)
        except Exception:
            logger.exception("Cache get error for key '%s'", key)
            return None

    @classmethod
    async def set(cls, key: str, value: str, ttl: int = 3600) -> bool:
        """
        Set value in cache with TTL.

        Args:
            key: Cache key
            value: Value to cache
            ttl: Time to live in seconds (default: 3600 = 1 hour)

        Returns:
            True if successful, False otherwise
        """
        try:
            client = await cls.get_redis_client()
            await client.setex(key, ttl, value)
            return True
        except Exception:
            logger.exception("Cache set error for key '%s'", key)
            return False

    @classmethod
    async def delete(cls, key: str) -> bool:
        """
        Delete value from cache.

        Args:
            key: Cache key

        Returns:
            True if successful, False otherwise
        """
        try:
            client = await cls.get_redis_client()
            await client.delete(key)
            return True
        except Exception:
            logger.exception("Cache delete error for key '%s'", key)
            return False

    @classmethod
    async def delete_multiple(cls, keys: List[str]) -> bool:
        """
        Delete multiple values from cache using pipeline.

        Args:
            keys: List of cache keys

        Returns:
            True if successful, False otherwise
        """
        if not keys:
            return True

        try:
            client = await cls.get_redis_client()
            pipeline = client.pipeline()

            for key in keys:
                pipeline.delete(key)

            await pipeline.execute()
            return True
        except Exception:
            logger.exception("Cache delete multiple error for %d keys", len(keys))
            return False

    @classmethod
    async def keys_matching(cls, pattern: str) -> List[str]:
        """
        List keys matching a glob pattern.

        Uses SCAN so a large keyspace doesn't block the server.

        Args:
            pattern: Redis glob pattern, e.g. "dashboard_summary:*"

        Returns:
            Matching keys, empty list on error
        """
        try:
            client = await cls.get_redis_client()
            return [key async for key in client.scan_iter(match=pattern, count=100)]
        except Exception:
            logger.exception("Cache scan error for pattern '%s'", pattern)
            return []

    @classmethod
    async def invalidate_all(cls, prefix: str) -> int:
        """
        Delete every key starting with `prefix`.

        Args:
            prefix: Key prefix, e.g. "dashboard_summary:"

        Returns:
            Number of keys scheduled for deletion (0 on error)
        """
        keys = await cls.keys_matching(f"{prefix}*")
        if not keys:
            return 0
        if not await cls.delete_multiple(keys):
            return 0
        logger.info("Invalidated %d cache keys with prefix '%s'", len(keys), prefix)
        return len(keys)

    @classmethod
    async def health_check(cls) -> bool:
        """
        Check if Redis connection is healthy.

        Returns:
            True if Redis is accessible, False otherwise
        """
        try:
            client = await cls.get_redis_client()
            await client.ping()
            return True
        except Exception:
            return False
