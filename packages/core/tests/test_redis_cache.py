"""Tests for RedisCache."""

import json
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from pydantic import BaseModel
from redis.exceptions import ConnectionError as RedisConnectionError

from fluent_cache.adapters.redis import RedisCache
from fluent_cache.domain.cached_value import CacheOrigin
from fluent_cache.domain.expiration import CacheExpiration
from fluent_cache.primitives.exceptions import CacheStoreError


class User(BaseModel):
    id: int
    name: str


def _envelope(value, *, version=1, expiration=None, cached_at=None):
    return json.dumps(
        {
            "value": value,
            "cached_at": (cached_at or datetime.now(timezone.utc)).isoformat(),
            "version": version,
            "expiration": (expiration or CacheExpiration()).model_dump(mode="json"),
        }
    )


@pytest.mark.asyncio
class TestRedisCache:
    @pytest_asyncio.fixture
    async def redis_client(self):
        client = AsyncMock()
        client.get.return_value = None
        return client

    @pytest_asyncio.fixture
    async def cache(self, redis_client):
        return RedisCache(redis_client)

    async def test_get_missing(self, cache, redis_client):
        assert await cache.get("user:1", "R") is None
        redis_client.get.assert_awaited_once_with("R:user:1")

    async def test_get_hit(self, cache, redis_client):
        redis_client.get.return_value = _envelope("A", version=3)

        cached = await cache.get("user:1", "R")

        assert cached is not None
        assert cached.value == "A"
        assert cached.version == 3
        assert cached.origin is CacheOrigin.HIT
        redis_client.expire.assert_not_called()

    async def test_set_without_expiration(self, cache, redis_client):
        stored = await cache.set("user:1", None, {"name": "A"}, CacheExpiration())

        key, payload = redis_client.set.call_args[0]
        assert key == "user:1"
        assert json.loads(payload)["value"] == {"name": "A"}
        assert stored.version == 1
        assert stored.origin is CacheOrigin.RETRIEVED

    async def test_set_with_ttl_bumps_version(self, cache, redis_client):
        redis_client.get.return_value = _envelope("old", version=4)
        expiration = CacheExpiration.absolute_for(timedelta(minutes=2))

        stored = await cache.set("user:1", "R", "new", expiration)

        key, ttl, _payload = redis_client.setex.call_args[0]
        assert (key, ttl) == ("R:user:1", 120)
        assert stored.version == 5

    async def test_sliding_entry_refreshed_on_read(self, cache, redis_client):
        expiration = CacheExpiration.sliding_for(timedelta(seconds=30))
        redis_client.get.return_value = _envelope("A", expiration=expiration)

        await cache.get("user:1", "R")

        redis_client.expire.assert_awaited_once_with("R:user:1", 30)

    async def test_pydantic_round_trip(self, redis_client):
        cache = RedisCache(redis_client, value_type=User)

        await cache.set("user:1", None, User(id=1, name="A"), CacheExpiration())
        redis_client.get.return_value = redis_client.set.call_args[0][1]
        cached = await cache.get("user:1", None)

        assert cached is not None
        assert cached.value == User(id=1, name="A")

    async def test_driver_error_raises_store_error(self, cache, redis_client):
        redis_client.get.side_effect = RedisConnectionError("down")

        with pytest.raises(CacheStoreError) as exc_info:
            await cache.get("user:1", "R")

        assert isinstance(exc_info.value.__cause__, RedisConnectionError)
        assert exc_info.value.operation == "get"

    async def test_corrupt_entry_raises_store_error(self, cache, redis_client):
        redis_client.get.return_value = b"not json"

        with pytest.raises(CacheStoreError):
            await cache.get("user:1", "R")

    async def test_remove(self, cache, redis_client):
        await cache.remove("user:1", "R")
        redis_client.delete.assert_awaited_once_with("R:user:1")

    async def test_clear_region_scans_prefix(self, cache, redis_client):
        redis_client.scan.side_effect = [(5, [b"R:a"]), (0, [b"R:b"])]

        await cache.clear_region("R")

        assert redis_client.scan.call_args_list[0].kwargs == {"match": "R:*"}
        assert redis_client.delete.await_count == 2

    async def test_clear_region_requires_region(self, cache):
        with pytest.raises(CacheStoreError):
            await cache.clear_region(None)
