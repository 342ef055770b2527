"""FluentCache — entry point that creates strategies over a cache port."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .domain.expiration import CacheExpiration
from .keys import build_item_key, method_key
from .strategies.bulk import BulkCacheStrategy
from .strategies.single import CacheStrategy

if TYPE_CHECKING:
    from collections.abc import Iterable

    from .keys import KeyBuilder
    from .ports.cache import ICache


class FluentCache:
    """Creates cache strategies that share a port and default settings.

    Usage::

        cache = FluentCache(InMemoryCache(), default_region="users")
        users = await (
            cache.with_keys("user", [1, 2, 3])
            .retrieve_using_async(load_users)
            .get_all_values()
        )
    """

    def __init__(
        self,
        cache: ICache,
        *,
        default_region: str | None = None,
        default_expiration: CacheExpiration | None = None,
        key_builder: KeyBuilder | None = None,
    ) -> None:
        self._cache = cache
        self.default_region = default_region
        self.default_expiration = default_expiration or CacheExpiration.none()
        self._key_builder: KeyBuilder = key_builder or build_item_key

    @property
    def port(self) -> ICache:
        return self._cache

    def with_key(self, item_key: str) -> CacheStrategy[Any]:
        return CacheStrategy(
            self._cache, item_key, self.default_region, self.default_expiration
        )

    def with_keys(
        self, base_key: str, keys: Iterable[Any]
    ) -> BulkCacheStrategy[Any, Any]:
        return BulkCacheStrategy(
            self._cache,
            base_key,
            keys,
            region=self.default_region,
            expiration=self.default_expiration,
            key_builder=self._key_builder,
        )

    def method_key(self, base_key: str, *args: Any, **kwargs: Any) -> str:
        """Item key for a call such as ``get_user(42, active=True)``."""
        return method_key(base_key, *args, **kwargs)
