"""Callback types and the adapters that fit user functions into strategy slots."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Collection, Hashable, Iterable, Mapping
from typing import Any, Union

from ..domain.cached_value import CachedValue
from ..domain.validation import CacheValidationResult
from ..primitives.exceptions import CacheConfigurationError
from ..primitives.sentinel import MISSING, _Missing


logger = logging.getLogger("fluent_cache.callbacks")

RetrievedValues = Union[Mapping[Any, Any], Iterable[tuple[Any, Any]], None]

ValidateCallback = Callable[[CachedValue[Any]], Awaitable[CacheValidationResult]]
SyncValidateCallback = Callable[[CachedValue[Any]], CacheValidationResult]
InvalidatePredicate = Callable[[CachedValue[Any]], bool]
AsyncInvalidatePredicate = Callable[[CachedValue[Any]], Awaitable[bool]]

RetrieveCallback = Callable[[Collection[Any]], Awaitable[RetrievedValues]]
SyncRetrieveCallback = Callable[[Collection[Any]], RetrievedValues]
SingleRetrieveCallback = Callable[[], Awaitable[Any]]


def ensure_callable(fn: Any, slot: str) -> None:
    if not callable(fn):
        raise CacheConfigurationError(
            f"{slot} callback must be callable, got {type(fn).__name__}"
        )


# ── Validation ───────────────────────────────────────────────────


def wrap_sync_validator(validate: SyncValidateCallback) -> ValidateCallback:
    """Fit a plain validator into the async slot without adding work."""
    ensure_callable(validate, "validate")

    async def _validate(existing: CachedValue[Any]) -> CacheValidationResult:
        return validate(existing)

    return _validate


def predicate_validator_async(keep: AsyncInvalidatePredicate) -> ValidateCallback:
    """``True`` from *keep* means VALID, ``False`` means INVALID."""
    ensure_callable(keep, "invalidate_if")

    async def _validate(existing: CachedValue[Any]) -> CacheValidationResult:
        return CacheValidationResult.from_bool(await keep(existing))

    return _validate


def predicate_validator(keep: InvalidatePredicate) -> ValidateCallback:
    ensure_callable(keep, "invalidate_if")

    async def _validate(existing: CachedValue[Any]) -> CacheValidationResult:
        return CacheValidationResult.from_bool(keep(existing))

    return _validate


# ── Retrieval ────────────────────────────────────────────────────


def wrap_sync_retriever(retrieve: SyncRetrieveCallback) -> RetrieveCallback:
    ensure_callable(retrieve, "retrieve")

    async def _retrieve(keys: Collection[Any]) -> RetrievedValues:
        return retrieve(keys)

    return _retrieve


def normalize_retrieved(result: RetrievedValues) -> list[tuple[Any, Any]]:
    """Return retrieved ``(key, value)`` pairs in the callback's own order.

    Accepts a mapping or an iterable of pairs.  ``None`` counts as "nothing
    resolved".
    """
    if result is None:
        return []
    if isinstance(result, Mapping):
        return list(result.items())
    pairs: list[tuple[Any, Any]] = []
    for pair in result:
        try:
            key, value = pair
        except (TypeError, ValueError) as e:
            raise CacheConfigurationError(
                f"retrieve callback must yield (key, value) pairs, got {pair!r}"
            ) from e
        pairs.append((key, value))
    return pairs


class SingleKeyRetriever:
    """Adapts a bulk retriever into the single-shot fallback of one key.

    Each invocation calls the bulk retriever once with ``[key]`` and returns
    the value for *key*, or ``MISSING`` when the returned mapping omits it.
    """

    def __init__(self, retrieve: RetrieveCallback, key: Hashable) -> None:
        self._retrieve = retrieve
        self.key = key
        self.calls = 0

    async def __call__(self) -> Any | _Missing:
        self.calls += 1
        for found_key, value in normalize_retrieved(await self._retrieve([self.key])):
            if found_key == self.key:
                return value
        logger.debug("Retriever did not resolve key %r", self.key)
        return MISSING
