"""Tests for the FluentCache entry point."""

from __future__ import annotations

from datetime import timedelta

import pytest

from fluent_cache import (
    BulkCacheStrategy,
    CacheExpiration,
    CacheStrategy,
    FluentCache,
    InMemoryCache,
)


@pytest.mark.asyncio
class TestFluentCache:
    async def test_with_key_applies_defaults(self, cache):
        expiration = CacheExpiration.sliding_for(timedelta(minutes=1))
        fluent = FluentCache(cache, default_region="R", default_expiration=expiration)

        strategy = fluent.with_key("user:1")
        stored = await strategy.set("A")

        assert isinstance(strategy, CacheStrategy)
        assert stored.region == "R"
        assert stored.expiration == expiration

    async def test_with_keys_end_to_end(self, user_cache, make_retriever):
        fluent = FluentCache(user_cache, default_region="R")
        retriever = make_retriever({3: "C"})

        strategy = fluent.with_keys("user", [1, 2, 3])
        values = await strategy.retrieve_using_async(retriever).get_all_values()

        assert isinstance(strategy, BulkCacheStrategy)
        assert values == ["A", "B", "C"]
        cached = await fluent.with_key("user:3").get_value()
        assert cached == "C"

    async def test_method_key_addresses_single_strategy(self):
        fluent = FluentCache(InMemoryCache())
        calls = []

        def load():
            calls.append(1)
            return {"id": 42}

        key = fluent.method_key("get_user", 42)
        first = await fluent.with_key(key).retrieve_using(load).get_value()
        second = await fluent.with_key(key).retrieve_using(load).get_value()

        assert key == "get_user:42"
        assert first == second == {"id": 42}
        assert calls == [1]

    async def test_custom_key_builder_flows_to_bulk(self, cache):
        fluent = FluentCache(cache, key_builder=lambda base, k: f"{base}#{k}")

        await fluent.with_keys("user", [1]).retrieve_using(
            lambda keys: {k: "v" for k in keys}
        ).get_all()

        assert ("user#1", None) in cache
        assert fluent.port is cache
