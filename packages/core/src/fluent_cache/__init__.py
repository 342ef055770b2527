"""fluent-cache — fluent read-through caching with bulk reconciliation.

Optional redis support lives in ``fluent_cache.adapters.redis``.
"""

from __future__ import annotations

# ── Adapters ────────────────────────────────────────────────────
from .adapters.memory import InMemoryCache
from .cache import FluentCache

# ── Domain ───────────────────────────────────────────────────────
from .domain import (
    CachedValue,
    CacheExpiration,
    CacheOrigin,
    CacheValidationResult,
)

# ── Instrumentation ──────────────────────────────────────────────
from .instrumentation import (
    HookRegistration,
    HookRegistry,
    InstrumentationHook,
    get_hook_registry,
    set_hook_registry,
)
from .keys import build_item_key, key_fragment, method_key

# ── Ports & primitives ───────────────────────────────────────────
from .ports import ICache
from .primitives import (
    MISSING,
    CacheConfigurationError,
    CacheStoreError,
    FluentCacheError,
)

# ── Strategies ───────────────────────────────────────────────────
from .strategies import (
    BulkCacheStrategy,
    CacheStrategy,
    SingleKeyRetriever,
)

__all__ = [
    "MISSING",
    "BulkCacheStrategy",
    "CacheConfigurationError",
    "CacheExpiration",
    "CacheOrigin",
    "CacheStoreError",
    "CacheStrategy",
    "CacheValidationResult",
    "CachedValue",
    "FluentCache",
    "FluentCacheError",
    "HookRegistration",
    "HookRegistry",
    "ICache",
    "InMemoryCache",
    "InstrumentationHook",
    "SingleKeyRetriever",
    "build_item_key",
    "get_hook_registry",
    "key_fragment",
    "method_key",
    "set_hook_registry",
]
