"""
Interfaces Module

Protocols and data contracts shared between the coordinator and its tiers.
"""

from tiercache.core.interfaces.cache import (
    CacheLookup,
    CacheObserverSink,
    CacheTier,
    TierEvent,
)

__all__ = [
    "CacheLookup",
    "CacheObserverSink",
    "CacheTier",
    "TierEvent",
]
