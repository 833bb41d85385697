"""
In-Memory Cache Tier

Process-local LRU tier, normally tier 0 of the coordinator chain.

Implementation Details:
- OrderedDict for O(1) access and LRU ordering
- asyncio.Lock around every mutation
- Values stored as orjson payloads, so every get returns a fresh copy and
  a caller mutating its result cannot change what later callers see
- Per-entry expiry deadline on a monotonic clock; expired entries read as
  misses and are dropped on access
- Evicts least recently used entries beyond max_size

This cache is per-process and not shared across workers.
"""

import asyncio
import time
from collections import OrderedDict
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

import orjson

from tiercache.core.config.constants import L1_CACHE_MAX_SIZE
from tiercache.core.exceptions import CacheSerializationError, ConfigurationError
from tiercache.core.interfaces.cache import CacheLookup


@dataclass
class _Entry:
    payload: bytes
    expires_at: float


class MemoryTier:
    """
    In-memory LRU cache tier with per-entry TTL.

    Accepts the same JSON-compatible values as RedisTier, so both tiers
    hand back equal values for the same key.

    Usage:
        tier = MemoryTier(max_size=500)
        await tier.put("u:42", {"name": "Ada"}, ttl=120)
        lookup = await tier.get("u:42")   # CacheLookup(found=True, ...)
    """

    def __init__(
        self,
        max_size: int = L1_CACHE_MAX_SIZE,
        name: str = "memory",
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Args:
            max_size: Maximum number of entries
            name: Tier name reported in diagnostics
            clock: Monotonic seconds source (injectable for tests)
        """
        if max_size < 1:
            raise ConfigurationError("max_size must be >= 1", details={"max_size": max_size})
        self.name = name
        self._max_size = max_size
        self._clock = clock
        self._cache: OrderedDict[str, _Entry] = OrderedDict()
        self._lock = asyncio.Lock()

    async def get(self, key: str) -> CacheLookup[Any]:
        """
        Get value from cache.

        LRU Update: Moves accessed entry to the end (most recently used)
        """
        async with self._lock:
            entry = self._cache.get(key)
            if entry is None:
                return CacheLookup.miss()
            if entry.expires_at <= self._clock():
                del self._cache[key]
                return CacheLookup.miss()
            self._cache.move_to_end(key)
            payload = entry.payload

        return CacheLookup.hit(orjson.loads(payload))

    async def put(self, key: str, value: Any, ttl: float) -> None:
        """
        Store a value for ``ttl`` seconds, evicting LRU entries at capacity.

        A non-positive TTL expires immediately: any existing entry is
        dropped and nothing is stored.

        Raises:
            CacheSerializationError: value is not JSON-compatible
        """
        if ttl > 0:
            try:
                payload = orjson.dumps(value)
            except (orjson.JSONEncodeError, TypeError) as e:
                raise CacheSerializationError(
                    f"Cannot encode value: {e}",
                    details={"key": key, "tier": self.name, "value_type": type(value).__name__},
                ) from e

        async with self._lock:
            if ttl <= 0:
                self._cache.pop(key, None)
                return

            self._cache[key] = _Entry(payload=payload, expires_at=self._clock() + ttl)
            self._cache.move_to_end(key)

            while len(self._cache) > self._max_size:
                self._cache.popitem(last=False)

    async def delete(self, key: str) -> None:
        """Delete value from cache. Absent keys are ignored."""
        async with self._lock:
            self._cache.pop(key, None)

    async def clear(self) -> None:
        """Clear all entries."""
        async with self._lock:
            self._cache.clear()

    @property
    def size(self) -> int:
        """Current number of entries, expired ones included until touched."""
        return len(self._cache)

    @property
    def max_size(self) -> int:
        return self._max_size

    def keys(self) -> list[str]:
        """Keys in LRU order (oldest first)."""
        return list(self._cache.keys())

    async def health_check(self) -> dict[str, Any]:
        return {
            "status": "healthy",
            "size": self.size,
            "max_size": self._max_size,
            "utilization_pct": round(self.size / self._max_size * 100, 2),
        }

    def __repr__(self) -> str:
        return f"MemoryTier(name={self.name!r}, size={self.size}, max_size={self._max_size})"
