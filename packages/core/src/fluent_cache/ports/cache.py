"""ICache — Protocol for the cache store behind every strategy."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from ..domain.cached_value import CachedValue
    from ..domain.expiration import CacheExpiration


@runtime_checkable
class ICache(Protocol):
    """
    Abstract interface for cache stores.

    Entries are addressed by an item key inside an optional region.
    Expiration is enforced by the store; strategies only pass the policy
    through.  Failures must be raised, not swallowed: strategies are
    fail-fast and rely on the port to surface store errors.
    """

    async def get(self, item_key: str, region: str | None) -> CachedValue[Any] | None:
        """Return the live entry for *item_key*, or None if missing or expired."""
        ...

    async def set(
        self,
        item_key: str,
        region: str | None,
        value: Any,
        expiration: CacheExpiration,
    ) -> CachedValue[Any]:
        """Store *value* and return the stored entry."""
        ...

    async def remove(self, item_key: str, region: str | None) -> None:
        """Remove an entry. Missing entries are ignored."""
        ...

    async def clear_region(self, region: str | None) -> None:
        """Remove every entry of *region*."""
        ...
