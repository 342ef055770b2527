"""CachedValue — a resolved value together with its cache metadata."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Generic, TypeVar

from .expiration import CacheExpiration

T = TypeVar("T")


class CacheOrigin(str, Enum):
    """Where a ``CachedValue`` came from during the current operation."""

    HIT = "hit"
    RETRIEVED = "retrieved"


@dataclass(frozen=True)
class CachedValue(Generic[T]):
    """Immutable wrapper around a cached value.

    Produced by a cache port on read (``HIT``) or after a retrieval has been
    written back (``RETRIEVED``).
    """

    value: T
    item_key: str
    region: str | None = None
    origin: CacheOrigin = CacheOrigin.HIT
    cached_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    version: int = 1
    expiration: CacheExpiration = field(default_factory=CacheExpiration.none)

    @property
    def is_hit(self) -> bool:
        return self.origin is CacheOrigin.HIT
