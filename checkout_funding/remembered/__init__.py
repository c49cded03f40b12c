"""Remembered-funding cache, its state stores and the metadata client."""

from checkout_funding.remembered.cache import (
    QueryStatus,
    RememberedFundingCache,
    RememberedFundingError,
)
from checkout_funding.remembered.metadata import MetadataClient, MetadataFetchError
from checkout_funding.remembered.state import (
    FundingStore,
    MemoryFundingStore,
    MemoryStateStore,
    RedisFundingStore,
    StateStore,
    create_redis_store,
)

__all__ = [
    "QueryStatus",
    "RememberedFundingCache",
    "RememberedFundingError",
    "MetadataClient",
    "MetadataFetchError",
    "FundingStore",
    "MemoryFundingStore",
    "MemoryStateStore",
    "RedisFundingStore",
    "StateStore",
    "create_redis_store",
]
