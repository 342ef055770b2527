from .cached_value import CachedValue, CacheOrigin
from .expiration import CacheExpiration
from .validation import CacheValidationResult

__all__ = [
    "CacheExpiration",
    "CacheOrigin",
    "CacheValidationResult",
    "CachedValue",
]
