from .memory import InMemoryCache

__all__ = ["InMemoryCache"]
