from .exceptions import CacheConfigurationError, CacheStoreError, FluentCacheError
from .sentinel import MISSING

__all__ = [
    "MISSING",
    "CacheConfigurationError",
    "CacheStoreError",
    "FluentCacheError",
]
