"""
Core Module

Foundational components: configuration, logging, exceptions and tier interfaces.
"""

from .exceptions import (
    CacheConnectionError,
    CacheError,
    CacheKeyError,
    CacheSerializationError,
    ConfigurationError,
    TierCacheError,
    TierOperationError,
)
from .interfaces import CacheLookup, CacheObserverSink, CacheTier, TierEvent
from .logging import (
    clear_correlation_id,
    get_correlation_id,
    get_logger,
    log_stage,
    set_correlation_id,
    setup_logging,
)

__all__ = [
    "setup_logging",
    "get_logger",
    "set_correlation_id",
    "get_correlation_id",
    "clear_correlation_id",
    "log_stage",
    "TierCacheError",
    "ConfigurationError",
    "CacheError",
    "CacheConnectionError",
    "CacheKeyError",
    "CacheSerializationError",
    "TierOperationError",
    "CacheLookup",
    "CacheObserverSink",
    "CacheTier",
    "TierEvent",
]
