"""Redis-backed cache port. Requires the ``redis`` package."""

from .cache import RedisCache

__all__ = ["RedisCache"]
