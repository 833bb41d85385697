"""
tiercache - multi-tier read-through cache coordinator.

Usage:
    from tiercache import MemoryTier, RedisTier, TierCoordinator

    coordinator = TierCoordinator([MemoryTier(), RedisTier(redis_client)])
    value = await coordinator.resolve("u:42", load_user, base_ttl=120)
"""

from tiercache.caching import (
    CacheObserver,
    SingleFlight,
    StaggeredExpiryPolicy,
    TierCoordinator,
    UniformExpiryPolicy,
    build_coordinator,
)
from tiercache.core.interfaces import CacheLookup, CacheTier, TierEvent
from tiercache.infrastructure.cache import MemoryTier, RedisClient, RedisTier

__version__ = "1.0.0"

__all__ = [
    "TierCoordinator",
    "StaggeredExpiryPolicy",
    "UniformExpiryPolicy",
    "CacheObserver",
    "SingleFlight",
    "build_coordinator",
    "CacheLookup",
    "CacheTier",
    "TierEvent",
    "MemoryTier",
    "RedisTier",
    "RedisClient",
]
