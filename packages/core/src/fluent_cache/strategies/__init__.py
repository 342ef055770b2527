from .bulk import BulkCacheStrategy
from .callbacks import (
    RetrieveCallback,
    SingleKeyRetriever,
    ValidateCallback,
    normalize_retrieved,
    predicate_validator,
    predicate_validator_async,
    wrap_sync_retriever,
    wrap_sync_validator,
)
from .single import CacheStrategy

__all__ = [
    "BulkCacheStrategy",
    "CacheStrategy",
    "RetrieveCallback",
    "SingleKeyRetriever",
    "ValidateCallback",
    "normalize_retrieved",
    "predicate_validator",
    "predicate_validator_async",
    "wrap_sync_retriever",
    "wrap_sync_validator",
]
