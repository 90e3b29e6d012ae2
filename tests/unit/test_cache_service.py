"""Unit tests for the Redis cache gateway"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from app.services.cache_service import CacheService


@pytest.fixture
def redis_client(monkeypatch):
    """Install a mock Redis client on the singleton"""
    client = MagicMock()
    monkeypatch.setattr(CacheService, "_redis_client", client)
    return client


@pytest.fixture
def broken_redis(redis_client):
    """Redis client whose every call fails"""
    error = RedisConnectionError("connection refused")
    redis_client.get = AsyncMock(side_effect=error)
    redis_client.setex = AsyncMock(side_effect=error)
    redis_client.delete = AsyncMock(side_effect=error)
    redis_client.ping = AsyncMock(side_effect=error)
    redis_client.scan_iter = MagicMock(side_effect=error)
    redis_client.pipeline = MagicMock(side_effect=error)
    return redis_client


async def _aiter(items):
    for item in items:
        yield item


class TestCacheOperations:
    """Test happy-path operations"""

    @pytest.mark.asyncio
    async def test_get_and_set(self, redis_client):
        redis_client.get = AsyncMock(return_value="value")
        redis_client.setex = AsyncMock()

        assert await CacheService.get("key") == "value"
        assert await CacheService.set("key", "value", ttl=300) is True
        redis_client.setex.assert_called_once_with("key", 300, "value")

    @pytest.mark.asyncio
    async def test_invalidate_all_scans_then_deletes(self, redis_client):
        keys = ["dashboard_summary:a", "dashboard_summary:b"]
        redis_client.scan_iter = MagicMock(return_value=_aiter(keys))
        pipeline = MagicMock()
        pipeline.execute = AsyncMock(return_value=[1, 1])
        redis_client.pipeline = MagicMock(return_value=pipeline)

        removed = await CacheService.invalidate_all("dashboard_summary:")

        assert removed == 2
        redis_client.scan_iter.assert_called_once_with(match="dashboard_summary:*", count=100)
        assert pipeline.delete.call_count == 2
        pipeline.execute.assert_called_once()

    @pytest.mark.asyncio
    async def test_invalidate_all_with_no_keys(self, redis_client):
        redis_client.scan_iter = MagicMock(return_value=_aiter([]))
        redis_client.pipeline = MagicMock()

        assert await CacheService.invalidate_all("dashboard_summary:") == 0
        redis_client.pipeline.assert_not_called()

    @pytest.mark.asyncio
    async def test_delete_multiple_empty(self, redis_client):
        redis_client.pipeline = MagicMock()

        assert await CacheService.delete_multiple([]) is True
        redis_client.pipeline.assert_not_called()


class TestCacheFailures:
    """Redis errors never reach callers"""

    @pytest.mark.asyncio
    async def test_get_failure_is_a_miss(self, broken_redis):
        assert await CacheService.get("key") is None

    @pytest.mark.asyncio
    async def test_set_failure_is_a_noop(self, broken_redis):
        assert await CacheService.set("key", "value") is False

    @pytest.mark.asyncio
    async def test_delete_failure_is_a_noop(self, broken_redis):
        assert await CacheService.delete("key") is False
        assert await CacheService.delete_multiple(["a", "b"]) is False

    @pytest.mark.asyncio
    async def test_invalidate_all_failure(self, broken_redis):
        assert await CacheService.keys_matching("dashboard_summary:*") == []
        assert await CacheService.invalidate_all("dashboard_summary:") == 0

    @pytest.mark.asyncio
    async def test_health_check_failure(self, broken_redis):
        assert await CacheService.health_check() is False
