"""Shared fixtures for fluent-cache tests."""

from __future__ import annotations

from collections.abc import Collection
from datetime import datetime, timedelta, timezone
from typing import Any

import pytest
import pytest_asyncio

from fluent_cache.adapters.memory import InMemoryCache
from fluent_cache.domain.expiration import CacheExpiration
from fluent_cache.instrumentation import HookRegistry, set_hook_registry


class FakeClock:
    """Manually advanced UTC clock."""

    def __init__(self) -> None:
        self.now = datetime(2024, 1, 1, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **delta: float) -> None:
        self.now += timedelta(**delta)


class RecordingRetriever:
    """Bulk retriever backed by a dict that records every call it receives."""

    def __init__(self, source: dict[Any, Any], *, bulk_only: bool = False) -> None:
        self.source = source
        self.bulk_only = bulk_only
        self.calls: list[list[Any]] = []

    async def __call__(self, keys: Collection[Any]) -> dict[Any, Any]:
        self.calls.append(list(keys))
        if self.bulk_only and len(keys) == 1:
            return {}
        # Answers in the source dict's order, not the request order.
        return {k: v for k, v in self.source.items() if k in keys}

    @property
    def bulk_calls(self) -> list[list[Any]]:
        return [c for c in self.calls if len(c) > 1]

    @property
    def offered(self) -> list[Any]:
        return [k for call in self.calls for k in call]


@pytest.fixture(autouse=True)
def hook_registry() -> HookRegistry:
    """Fresh instrumentation registry per test."""
    registry = HookRegistry()
    set_hook_registry(registry)
    return registry


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(clock: FakeClock) -> InMemoryCache:
    return InMemoryCache(clock=clock)


@pytest_asyncio.fixture
async def user_cache(cache: InMemoryCache) -> InMemoryCache:
    """Region "R" holding user:1 -> "A" and user:2 -> "B"."""
    await cache.set("user:1", "R", "A", CacheExpiration.none())
    await cache.set("user:2", "R", "B", CacheExpiration.none())
    return cache


@pytest.fixture
def make_retriever():
    def _make(source: dict[Any, Any], *, bulk_only: bool = False) -> RecordingRetriever:
        return RecordingRetriever(source, bulk_only=bulk_only)

    return _make
