"""CacheExpiration — immutable expiration policy value object."""

from __future__ import annotations

import math
from datetime import datetime, timedelta

from pydantic import BaseModel, ConfigDict, field_validator


class CacheExpiration(BaseModel):
    """Expiration policy attached to a cached entry.

    ``absolute`` is a time-to-live counted from the write; ``sliding`` is an
    idle window counted from the last read or write.  With both set the entry
    expires at whichever deadline comes first; with neither it never expires.

    Usage::

        CacheExpiration.sliding_for(timedelta(minutes=5))
        CacheExpiration(absolute=timedelta(hours=1), sliding=timedelta(minutes=5))
    """

    model_config = ConfigDict(frozen=True)

    sliding: timedelta | None = None
    absolute: timedelta | None = None

    @field_validator("sliding", "absolute")
    @classmethod
    def _must_be_positive(cls, value: timedelta | None) -> timedelta | None:
        if value is not None and value <= timedelta(0):
            raise ValueError("expiration windows must be positive")
        return value

    # ── Factory methods ──────────────────────────────────────────

    @classmethod
    def none(cls) -> CacheExpiration:
        return cls()

    @classmethod
    def sliding_for(cls, window: timedelta) -> CacheExpiration:
        return cls(sliding=window)

    @classmethod
    def absolute_for(cls, ttl: timedelta) -> CacheExpiration:
        return cls(absolute=ttl)

    # ── Deadlines ────────────────────────────────────────────────

    @property
    def never_expires(self) -> bool:
        return self.sliding is None and self.absolute is None

    @property
    def ttl_seconds(self) -> int | None:
        """Shortest configured window in whole seconds, rounded up."""
        windows = [w for w in (self.sliding, self.absolute) if w is not None]
        if not windows:
            return None
        return max(1, math.ceil(min(windows).total_seconds()))

    def expires_at(
        self, written_at: datetime, last_accessed_at: datetime | None = None
    ) -> datetime | None:
        """Return the deadline for an entry, or ``None`` if it never expires."""
        deadlines: list[datetime] = []
        if self.absolute is not None:
            deadlines.append(written_at + self.absolute)
        if self.sliding is not None:
            deadlines.append((last_accessed_at or written_at) + self.sliding)
        return min(deadlines) if deadlines else None

    def is_expired(
        self,
        now: datetime,
        written_at: datetime,
        last_accessed_at: datetime | None = None,
    ) -> bool:
        deadline = self.expires_at(written_at, last_accessed_at)
        return deadline is not None and now >= deadline
