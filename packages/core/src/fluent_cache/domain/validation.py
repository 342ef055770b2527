"""CacheValidationResult — outcome of revalidating an existing cached value."""

from __future__ import annotations

from enum import Enum


class CacheValidationResult(str, Enum):
    """Verdict of a validation callback.

    ``INVALID`` makes the value count as absent for the current operation
    only. Eviction stays the store's decision.
    """

    VALID = "valid"
    INVALID = "invalid"

    @classmethod
    def from_bool(cls, keep: bool) -> CacheValidationResult:
        return cls.VALID if keep else cls.INVALID
