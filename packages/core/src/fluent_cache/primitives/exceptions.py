"""Exceptions raised by fluent-cache."""

from __future__ import annotations


class FluentCacheError(Exception):
    """Root exception for the fluent-cache library."""


class CacheConfigurationError(FluentCacheError):
    """Raised when a strategy or cache port is constructed with invalid input.

    Usage: Strategies raise this for a missing key collection, an empty base
    key, or a callback that is not callable.
    """


class CacheStoreError(FluentCacheError):
    """Raised when the backing store of a cache port fails.

    The original driver error is chained as ``__cause__``.
    """

    def __init__(self, operation: str, item_key: str, reason: str) -> None:
        self.operation = operation
        self.item_key = item_key
        self.reason = reason
        super().__init__(f"Cache {operation} failed for {item_key!r}: {reason}")
