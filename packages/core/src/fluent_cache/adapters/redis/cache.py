"""Redis implementation of the cache port."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING, Any

from redis.exceptions import RedisError

from fluent_cache.domain.cached_value import CachedValue, CacheOrigin
from fluent_cache.domain.expiration import CacheExpiration
from fluent_cache.instrumentation import get_hook_registry
from fluent_cache.ports.cache import ICache
from fluent_cache.primitives.exceptions import CacheStoreError

if TYPE_CHECKING:
    from redis.asyncio import Redis

logger = logging.getLogger("fluent_cache.redis")


class RedisCache(ICache):
    """
    Redis implementation of ICache.

    Each entry is a JSON envelope holding the value and its metadata, stored
    under ``"{region}:{item_key}"``.  Expiration maps onto Redis TTLs; sliding
    windows are refreshed on every read.  Pass *value_type* (a pydantic model)
    to re-validate values on read.
    """

    def __init__(
        self,
        redis_client: Redis[bytes],
        value_type: type[Any] | None = None,
    ) -> None:
        self._redis = redis_client
        self._value_type = value_type

    @staticmethod
    def storage_key(item_key: str, region: str | None) -> str:
        return f"{region}:{item_key}" if region else item_key

    async def get(self, item_key: str, region: str | None) -> CachedValue[Any] | None:
        return await get_hook_registry().execute_all(  # type: ignore[no-any-return]
            f"cache.get.{region or 'default'}",
            {"cache.item_key": item_key, "cache.region": region},
            lambda: self._get_internal(item_key, region),
        )

    async def set(
        self,
        item_key: str,
        region: str | None,
        value: Any,
        expiration: CacheExpiration,
    ) -> CachedValue[Any]:
        return await get_hook_registry().execute_all(  # type: ignore[no-any-return]
            f"cache.set.{region or 'default'}",
            {"cache.item_key": item_key, "cache.region": region},
            lambda: self._set_internal(item_key, region, value, expiration),
        )

    async def remove(self, item_key: str, region: str | None) -> None:
        try:
            await self._redis.delete(self.storage_key(item_key, region))
        except RedisError as e:
            logger.warning("Redis delete failed for key %s: %s", item_key, e)
            raise CacheStoreError("remove", item_key, str(e)) from e

    async def clear_region(self, region: str | None) -> None:
        """Caution: This is expensive (SCAN)."""
        if not region:
            raise CacheStoreError(
                "clear_region", "*", "refusing to clear the un-namespaced keyspace"
            )
        try:
            cursor: int = 0
            while True:
                cursor, keys = await self._redis.scan(cursor, match=f"{region}:*")
                if keys:
                    await self._redis.delete(*keys)
                if cursor == 0:
                    break
        except RedisError as e:
            logger.warning("Redis clear_region failed for %s: %s", region, e)
            raise CacheStoreError("clear_region", f"{region}:*", str(e)) from e

    # --- Helpers ---

    async def _get_internal(
        self, item_key: str, region: str | None
    ) -> CachedValue[Any] | None:
        key = self.storage_key(item_key, region)
        try:
            raw = await self._redis.get(key)
            if not raw:
                return None
            cached = self._decode(item_key, region, raw)
            if cached.expiration.sliding is not None:
                await self._redis.expire(key, self._refreshed_ttl(cached))
            return cached
        except RedisError as e:
            logger.warning("Redis get failed for key %s: %s", key, e)
            raise CacheStoreError("get", item_key, str(e)) from e

    async def _set_internal(
        self,
        item_key: str,
        region: str | None,
        value: Any,
        expiration: CacheExpiration,
    ) -> CachedValue[Any]:
        key = self.storage_key(item_key, region)
        try:
            # Version bump is read-then-write; concurrent writers may collide.
            previous = await self._redis.get(key)
            version = 1
            if previous:
                version = self._decode(item_key, region, previous).version + 1
            cached = CachedValue(
                value=value,
                item_key=item_key,
                region=region,
                origin=CacheOrigin.RETRIEVED,
                version=version,
                expiration=expiration,
            )
            payload = self._encode(cached)
            ttl = expiration.ttl_seconds
            if ttl:
                await self._redis.setex(key, ttl, payload)
            else:
                await self._redis.set(key, payload)
            return cached
        except RedisError as e:
            logger.warning("Redis set failed for key %s: %s", key, e)
            raise CacheStoreError("set", item_key, str(e)) from e

    @staticmethod
    def _encode(cached: CachedValue[Any]) -> str:
        value = cached.value
        if hasattr(value, "model_dump"):
            value = value.model_dump(mode="json")
        return json.dumps(
            {
                "value": value,
                "cached_at": cached.cached_at.isoformat(),
                "version": cached.version,
                "expiration": cached.expiration.model_dump(mode="json"),
            },
            default=str,
        )

    def _decode(
        self, item_key: str, region: str | None, raw: bytes | str
    ) -> CachedValue[Any]:
        try:
            envelope = json.loads(raw)
            value = envelope["value"]
            if self._value_type is not None and hasattr(
                self._value_type, "model_validate"
            ):
                value = self._value_type.model_validate(value)
            return CachedValue(
                value=value,
                item_key=item_key,
                region=region,
                origin=CacheOrigin.HIT,
                cached_at=datetime.fromisoformat(envelope["cached_at"]),
                version=int(envelope["version"]),
                expiration=CacheExpiration.model_validate(envelope["expiration"]),
            )
        except (ValueError, KeyError, TypeError) as e:
            logger.warning("Undecodable cache entry %s: %s", item_key, e)
            raise CacheStoreError("decode", item_key, str(e)) from e

    @staticmethod
    def _refreshed_ttl(cached: CachedValue[Any]) -> int:
        """TTL after a read: the sliding window, capped by the absolute deadline."""
        expiration = cached.expiration
        window = expiration.sliding or timedelta(0)
        if expiration.absolute is not None:
            remaining = (
                cached.cached_at + expiration.absolute - datetime.now(timezone.utc)
            )
            window = min(window, remaining)
        return max(1, int(window.total_seconds()))
