"""
Cache Tier Module

Concrete tiers for the coordinator: in-process LRU and Redis.
"""

from .memory_tier import MemoryTier
from .redis_client import RedisClient, close_redis, get_redis_client, init_redis
from .redis_tier import RedisTier

__all__ = [
    "MemoryTier",
    "RedisTier",
    "RedisClient",
    "get_redis_client",
    "init_redis",
    "close_redis",
]
