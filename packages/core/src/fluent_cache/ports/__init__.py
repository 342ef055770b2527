from .cache import ICache

__all__ = ["ICache"]
