"""Tests for item-key derivation."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum
from uuid import UUID

from pydantic import BaseModel

from fluent_cache.keys import build_item_key, key_fragment, method_key


class Color(Enum):
    RED = "red"


@dataclass(frozen=True)
class Entity:
    id: int


class Query(BaseModel):
    term: str
    limit: int = 10


def test_primitives():
    assert build_item_key("user", 3) == "user:3"
    assert build_item_key("user", "abc") == "user:abc"
    assert key_fragment(None) == "null"
    assert key_fragment(2.5) == "2.5"


def test_equal_numbers_share_a_fragment():
    assert build_item_key("user", 1.0) == build_item_key("user", 1) == "user:1"
    assert key_fragment(True) == key_fragment(1) == "1"
    assert key_fragment(False) == "0"
    assert key_fragment(Decimal("1.00")) == "1"
    assert key_fragment(Decimal("2.50")) == key_fragment(Decimal("2.5")) == "2.5"
    assert key_fragment(float("inf")) == "inf"
    assert key_fragment({"a": 1}) == key_fragment({"a": 1.0})
    assert key_fragment((1, 2.0)) == key_fragment([1.0, 2])


def test_enum_date_and_uuid():
    assert key_fragment(Color.RED) == "red"
    assert key_fragment(date(2024, 1, 2)) == "2024-01-02"
    uid = UUID("12345678-1234-5678-1234-567812345678")
    assert key_fragment(uid) == str(uid)


def test_entities_use_their_id():
    assert build_item_key("user", Entity(id=7)) == "user:7"


def test_pydantic_models_use_json():
    assert key_fragment(Query(term="x")) == '{"term":"x","limit":10}'


def test_containers_are_order_stable():
    assert key_fragment({"b": 1, "a": 2}) == key_fragment({"a": 2, "b": 1})
    assert key_fragment(frozenset({3, 1})) == key_fragment(frozenset({1, 3}))
    assert key_fragment((1, "a")) == '["1", "a"]'


def test_method_key():
    assert method_key("get_user") == "get_user"
    assert method_key("get_user", 42, active=True, role="x") == (
        "get_user:42:active=1:role=x"
    )
    assert method_key("f", b=1, a=2) == method_key("f", a=2, b=1)
