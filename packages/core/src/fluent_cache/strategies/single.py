"""CacheStrategy — fluent accessor for a single cached item."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Generic, TypeVar

from ..domain.expiration import CacheExpiration
from ..domain.validation import CacheValidationResult
from ..primitives.exceptions import CacheConfigurationError
from ..primitives.sentinel import MISSING
from .callbacks import (
    ensure_callable,
    predicate_validator,
    predicate_validator_async,
    wrap_sync_validator,
)

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from ..domain.cached_value import CachedValue
    from ..ports.cache import ICache
    from .callbacks import (
        AsyncInvalidatePredicate,
        InvalidatePredicate,
        SingleRetrieveCallback,
        SyncValidateCallback,
        ValidateCallback,
    )

T = TypeVar("T")

logger = logging.getLogger("fluent_cache.strategy")


class CacheStrategy(Generic[T]):
    """
    Read-through access to one item key.

    Pattern:
    - get(): Check cache -> Validate -> Retrieve on miss -> Store result
    - set(value): Store directly
    - clear(): Remove the item

    Configuration calls mutate and return the same strategy; setting a
    callback again replaces the previous one.
    """

    def __init__(
        self,
        cache: ICache,
        item_key: str,
        region: str | None = None,
        expiration: CacheExpiration | None = None,
    ) -> None:
        if not item_key:
            raise CacheConfigurationError("item_key must be a non-empty string")
        self._cache = cache
        self.item_key = item_key
        self.region = region
        self.expiration = expiration or CacheExpiration.none()
        self.validate_callback: ValidateCallback | None = None
        self.retrieve_callback: SingleRetrieveCallback | None = None

    # ── Configuration ────────────────────────────────────────────

    def with_region(self, region: str | None) -> CacheStrategy[T]:
        self.region = region
        return self

    def expire_after(self, expiration: CacheExpiration) -> CacheStrategy[T]:
        self.expiration = expiration
        return self

    def validate_async(self, validate: ValidateCallback) -> CacheStrategy[T]:
        ensure_callable(validate, "validate")
        self.validate_callback = validate
        return self

    def validate(self, validate: SyncValidateCallback) -> CacheStrategy[T]:
        return self.validate_async(wrap_sync_validator(validate))

    def invalidate_if_async(self, keep: AsyncInvalidatePredicate) -> CacheStrategy[T]:
        return self.validate_async(predicate_validator_async(keep))

    def invalidate_if(self, keep: InvalidatePredicate) -> CacheStrategy[T]:
        return self.validate_async(predicate_validator(keep))

    def retrieve_using_async(
        self, retrieve: Callable[[], Awaitable[T]]
    ) -> CacheStrategy[T]:
        """Set the miss fallback. It may return ``MISSING`` to report absence."""
        ensure_callable(retrieve, "retrieve")
        self.retrieve_callback = retrieve
        return self

    def retrieve_using(self, retrieve: Callable[[], T]) -> CacheStrategy[T]:
        ensure_callable(retrieve, "retrieve")

        async def _retrieve() -> T:
            return retrieve()

        return self.retrieve_using_async(_retrieve)

    # ── Operations ───────────────────────────────────────────────

    async def get(self) -> CachedValue[T] | None:
        """Return a valid cached value, a freshly retrieved one, or None."""
        cached: CachedValue[T] | None = await self._cache.get(
            self.item_key, self.region
        )

        if cached is not None and self.validate_callback is not None:
            verdict = await self.validate_callback(cached)
            if verdict == CacheValidationResult.INVALID:
                logger.debug("Cached value for %s failed validation", self.item_key)
                cached = None

        if cached is not None:
            return cached

        if self.retrieve_callback is None:
            return None

        value = await self.retrieve_callback()
        if value is MISSING:
            return None
        return await self.set(value)

    async def get_value(self) -> T | None:
        cached = await self.get()
        return cached.value if cached is not None else None

    async def set(self, value: T) -> CachedValue[T]:
        stored: CachedValue[T] = await self._cache.set(
            self.item_key, self.region, value, self.expiration
        )
        return stored

    async def clear(self) -> None:
        await self._cache.remove(self.item_key, self.region)

    def __repr__(self) -> str:
        return f"CacheStrategy(item_key={self.item_key!r}, region={self.region!r})"
