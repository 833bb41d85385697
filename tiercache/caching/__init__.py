"""
Caching Module

Read-through / write-through coordination over an ordered chain of tiers.
"""

from .coordinator import Loader, TierCoordinator
from .expiry import ExpiryPolicy, StaggeredExpiryPolicy, UniformExpiryPolicy
from .factory import build_coordinator, close_coordinator, get_coordinator, init_coordinator
from .observer import CacheObserver
from .single_flight import SingleFlight

__all__ = [
    "TierCoordinator",
    "Loader",
    "ExpiryPolicy",
    "StaggeredExpiryPolicy",
    "UniformExpiryPolicy",
    "CacheObserver",
    "SingleFlight",
    "build_coordinator",
    "get_coordinator",
    "init_coordinator",
    "close_coordinator",
]
