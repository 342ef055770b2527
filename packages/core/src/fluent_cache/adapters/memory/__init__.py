from .cache import InMemoryCache

__all__ = ["InMemoryCache"]
