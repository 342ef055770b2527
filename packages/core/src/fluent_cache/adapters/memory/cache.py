"""InMemoryCache — dict-backed cache port with expiration enforcement."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

from fluent_cache.domain.cached_value import CachedValue, CacheOrigin
from fluent_cache.instrumentation import get_hook_registry
from fluent_cache.ports.cache import ICache

if TYPE_CHECKING:
    from collections.abc import Callable

    from fluent_cache.domain.expiration import CacheExpiration

logger = logging.getLogger("fluent_cache.memory")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class _Entry:
    value: Any
    written_at: datetime
    last_accessed_at: datetime
    version: int
    expiration: CacheExpiration


class InMemoryCache(ICache):
    """In-memory implementation of ``ICache``.

    Entries live in one dict per region (``None`` is the default region).
    Expired entries are dropped lazily when they are read.  Pass *clock* to
    control time in tests.
    """

    def __init__(self, clock: Callable[[], datetime] | None = None) -> None:
        self._clock = clock or _utcnow
        self._regions: dict[str | None, dict[str, _Entry]] = {}

    def __len__(self) -> int:
        return sum(len(partition) for partition in self._regions.values())

    def __contains__(self, address: object) -> bool:
        if not isinstance(address, tuple) or len(address) != 2:
            return False
        item_key, region = address
        return item_key in self._regions.get(region, {})

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
        self._regions.get(region, {}).pop(item_key, None)

    async def clear_region(self, region: str | None) -> None:
        self._regions.pop(region, None)

    async def _get_internal(
        self, item_key: str, region: str | None
    ) -> CachedValue[Any] | None:
        partition = self._regions.get(region)
        if partition is None:
            return None
        entry = partition.get(item_key)
        if entry is None:
            return None

        now = self._clock()
        if entry.expiration.is_expired(now, entry.written_at, entry.last_accessed_at):
            del partition[item_key]
            logger.debug("Evicted expired entry %s (region=%s)", item_key, region)
            return None

        entry.last_accessed_at = now
        return self._to_cached_value(item_key, region, entry, CacheOrigin.HIT)

    async def _set_internal(
        self,
        item_key: str,
        region: str | None,
        value: Any,
        expiration: CacheExpiration,
    ) -> CachedValue[Any]:
        partition = self._regions.setdefault(region, {})
        previous = partition.get(item_key)
        now = self._clock()
        entry = _Entry(
            value=value,
            written_at=now,
            last_accessed_at=now,
            version=previous.version + 1 if previous else 1,
            expiration=expiration,
        )
        partition[item_key] = entry
        return self._to_cached_value(item_key, region, entry, CacheOrigin.RETRIEVED)

    @staticmethod
    def _to_cached_value(
        item_key: str, region: str | None, entry: _Entry, origin: CacheOrigin
    ) -> CachedValue[Any]:
        return CachedValue(
            value=entry.value,
            item_key=item_key,
            region=region,
            origin=origin,
            cached_at=entry.written_at,
            version=entry.version,
            expiration=entry.expiration,
        )
