"""Item-key derivation: ``base_key`` + domain key -> fully-qualified cache key."""

from __future__ import annotations

import json
import numbers
from collections.abc import Callable, Hashable, Mapping
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any

KeyBuilder = Callable[[str, Any], str]

_SEPARATOR = ":"


def key_fragment(key: Any) -> str:
    """Render a domain key as a stable string fragment.

    Equal keys render to equal fragments, so numbers that compare equal
    (``1``, ``1.0``, ``True``, ``Decimal("1.00")``) share one.  Entities are
    keyed by their ``id`` attribute, pydantic models by their JSON dump,
    containers by sorted JSON of their rendered items.
    """
    if key is None:
        return "null"
    if isinstance(key, Enum):
        return key_fragment(key.value)
    if isinstance(key, str):
        return key
    if isinstance(key, numbers.Number) and not isinstance(key, complex):
        return _number_fragment(key)
    if isinstance(key, (datetime, date)):
        return key.isoformat()
    entity_id = getattr(key, "id", None)
    if entity_id is not None:
        return key_fragment(entity_id)
    if hasattr(key, "model_dump_json"):
        return str(key.model_dump_json())
    if isinstance(key, Mapping):
        return json.dumps(
            {key_fragment(k): key_fragment(v) for k, v in key.items()}, sort_keys=True
        )
    if isinstance(key, (set, frozenset)):
        return json.dumps(sorted(key_fragment(k) for k in key))
    if isinstance(key, (list, tuple)):
        return json.dumps([key_fragment(k) for k in key])
    return str(key)


def _number_fragment(key: Any) -> str:
    try:
        integral = int(key)
    except (ValueError, OverflowError):
        # nan and infinities
        return str(key)
    if integral == key:
        return str(integral)
    if isinstance(key, Decimal):
        return str(key.normalize())
    return str(key)


def build_item_key(base_key: str, key: Hashable) -> str:
    """Default key builder: ``"{base_key}:{fragment}"``."""
    return f"{base_key}{_SEPARATOR}{key_fragment(key)}"


def method_key(base_key: str, *args: Any, **kwargs: Any) -> str:
    """Build an item key from a base key and call parameters.

    Keyword arguments are ordered by name so call sites that differ only in
    argument order share an entry.
    """
    parts = [key_fragment(a) for a in args]
    parts.extend(f"{name}={key_fragment(kwargs[name])}" for name in sorted(kwargs))
    if not parts:
        return base_key
    return _SEPARATOR.join([base_key, *parts])
