"""BulkCacheStrategy — reconcile many keys against the cache in one operation."""

from __future__ import annotations

import logging
from collections.abc import Hashable, Iterable
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from ..domain.expiration import CacheExpiration
from ..instrumentation import get_hook_registry
from ..keys import build_item_key
from ..primitives.exceptions import CacheConfigurationError
from .callbacks import (
    SingleKeyRetriever,
    ensure_callable,
    normalize_retrieved,
    predicate_validator,
    predicate_validator_async,
    wrap_sync_retriever,
    wrap_sync_validator,
)
from .single import CacheStrategy

if TYPE_CHECKING:
    from ..domain.cached_value import CachedValue
    from ..keys import KeyBuilder
    from ..ports.cache import ICache
    from .callbacks import (
        AsyncInvalidatePredicate,
        InvalidatePredicate,
        RetrieveCallback,
        SyncRetrieveCallback,
        SyncValidateCallback,
        ValidateCallback,
    )

K = TypeVar("K", bound=Hashable)
T = TypeVar("T")

logger = logging.getLogger("fluent_cache.bulk")


class BulkCacheStrategy(Generic[K, T]):
    """
    Read-through access to a collection of keys sharing one base key.

    ``get_all`` runs two phases:

    1. Per key, in the order supplied: resolve through a single-key
       ``CacheStrategy`` (validator attached, and the bulk retriever adapted
       into a one-key fallback when configured).
    2. Once, if a retriever is configured and keys are still missing: call the
       retriever with every missing key, store what it returns, and append the
       stored values in the retriever's order.

    Keys the retriever omits are dropped from the result without error, so
    the result can be shorter than ``keys``.  Exceptions from the cache or
    from callbacks propagate unchanged and abort the operation.

    Configuration calls mutate and return the same strategy.  Setting a
    callback twice keeps only the last one; callbacks are never composed.
    """

    def __init__(
        self,
        cache: ICache,
        base_key: str,
        keys: Iterable[K],
        region: str | None = None,
        expiration: CacheExpiration | None = None,
        key_builder: KeyBuilder | None = None,
    ) -> None:
        if not base_key:
            raise CacheConfigurationError("base_key must be a non-empty string")
        if keys is None or isinstance(keys, (str, bytes)):
            raise CacheConfigurationError("keys must be a collection of keys")
        self._cache = cache
        self.base_key = base_key
        # Private copy; duplicates collapse to their first occurrence.
        self.keys: tuple[K, ...] = tuple(dict.fromkeys(keys))
        self.region = region
        self.expiration = expiration or CacheExpiration.none()
        self._key_builder: KeyBuilder = key_builder or build_item_key
        self.validate_callback: ValidateCallback | None = None
        self.retrieve_callback: RetrieveCallback | None = None

    # ── Configuration ────────────────────────────────────────────

    def with_region(self, region: str | None) -> BulkCacheStrategy[K, T]:
        self.region = region
        return self

    def expire_after(self, expiration: CacheExpiration) -> BulkCacheStrategy[K, T]:
        self.expiration = expiration
        return self

    def with_key_builder(self, key_builder: KeyBuilder) -> BulkCacheStrategy[K, T]:
        ensure_callable(key_builder, "key_builder")
        self._key_builder = key_builder
        return self

    def validate_async(self, validate: ValidateCallback) -> BulkCacheStrategy[K, T]:
        ensure_callable(validate, "validate")
        self._replace_callback("validate_callback", validate)
        return self

    def validate(self, validate: SyncValidateCallback) -> BulkCacheStrategy[K, T]:
        return self.validate_async(wrap_sync_validator(validate))

    def invalidate_if_async(
        self, keep: AsyncInvalidatePredicate
    ) -> BulkCacheStrategy[K, T]:
        """Keep cached values for which *keep* resolves to True."""
        return self.validate_async(predicate_validator_async(keep))

    def invalidate_if(self, keep: InvalidatePredicate) -> BulkCacheStrategy[K, T]:
        return self.validate_async(predicate_validator(keep))

    def retrieve_using_async(
        self, retrieve: RetrieveCallback
    ) -> BulkCacheStrategy[K, T]:
        """Set the bulk retriever: ``async (keys) -> {key: value}``."""
        ensure_callable(retrieve, "retrieve")
        self._replace_callback("retrieve_callback", retrieve)
        return self

    def retrieve_using(self, retrieve: SyncRetrieveCallback) -> BulkCacheStrategy[K, T]:
        return self.retrieve_using_async(wrap_sync_retriever(retrieve))

    def _replace_callback(self, slot: str, callback: Any) -> None:
        if getattr(self, slot) is not None:
            logger.debug("Replacing %s on bulk strategy %s", slot, self.base_key)
        setattr(self, slot, callback)

    # ── Operations ───────────────────────────────────────────────

    def item_key(self, key: K) -> str:
        return self._key_builder(self.base_key, key)

    async def get_all(self) -> list[CachedValue[T]]:
        """Resolve every key; see the class docstring for ordering rules."""
        if not self.keys:
            return []
        return await get_hook_registry().execute_all(  # type: ignore[no-any-return]
            f"cache.bulk.get_all.{self.base_key}",
            {
                "cache.base_key": self.base_key,
                "cache.region": self.region,
                "cache.key_count": len(self.keys),
            },
            self._get_all_internal,
        )

    async def get_all_values(self) -> list[T]:
        return [cached.value for cached in await self.get_all()]

    # --- Helpers ---

    def _item_strategy(self, key: K) -> CacheStrategy[T]:
        strategy: CacheStrategy[T] = CacheStrategy(
            self._cache, self.item_key(key), self.region, self.expiration
        )
        if self.retrieve_callback is not None:
            strategy.retrieve_using_async(
                SingleKeyRetriever(self.retrieve_callback, key)
            )
        if self.validate_callback is not None:
            strategy.validate_async(self.validate_callback)
        return strategy

    async def _get_all_internal(self) -> list[CachedValue[T]]:
        missing: dict[K, K] = {key: key for key in self.keys}
        results: list[CachedValue[T]] = []

        for key in self.keys:
            cached = await self._item_strategy(key).get()
            if cached is not None:
                del missing[key]
                results.append(cached)

        resolved_per_key = len(results)
        if self.retrieve_callback is not None and missing:
            results.extend(await self._fill_missing(self.retrieve_callback, missing))

        logger.debug(
            "Bulk get %s (region=%s): %d per-key, %d bulk-filled, %d unresolved",
            self.base_key,
            self.region,
            resolved_per_key,
            len(results) - resolved_per_key,
            len(missing),
        )
        return results

    async def _fill_missing(
        self, retrieve: RetrieveCallback, missing: dict[K, K]
    ) -> list[CachedValue[T]]:
        """Call the retriever once for *missing* and store what it returns.

        Filled keys are removed from *missing*, which maps each pending key to
        itself.  Values are stored under the requested key object, so a
        retriever answering with an equal key of another type (``1.0`` for
        ``1``) still fills the entry ``get_all`` reads.  Keys that were not
        pending are ignored so no key appears twice in a result.
        """
        retrieved = normalize_retrieved(await retrieve(list(missing)))
        filled: list[CachedValue[T]] = []
        for key, value in retrieved:
            if key not in missing:
                logger.debug("Ignoring retrieved key %r: not pending", key)
                continue
            requested = missing.pop(key)
            stored: CachedValue[T] = await self._cache.set(
                self.item_key(requested), self.region, value, self.expiration
            )
            filled.append(stored)
        return filled

    def __repr__(self) -> str:
        return (
            f"BulkCacheStrategy(base_key={self.base_key!r}, "
            f"region={self.region!r}, keys={len(self.keys)})"
        )
