"""
Cache Tier Protocol

This module defines the capability interface every cache tier implements,
the explicit presence wrapper a tier read returns, and the diagnostic event
the coordinator hands to its observer.

Architectural Decision: Protocol-based abstraction
- Any object with name/get/put/delete is a tier; no inheritance required
- Facilitates testing with spy and failing tiers
- Type-safe interface with runtime checking

Author: System Architect
Date: 2025-12-08
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Generic, Protocol, TypeVar, runtime_checkable

from tiercache.core.config.constants import TierEventKind

T = TypeVar("T")


@dataclass(frozen=True)
class CacheLookup(Generic[T]):
    """
    Result of a single tier read.

    ``found`` is the presence flag. A stored ``None`` comes back as
    ``CacheLookup(found=True, value=None)`` and is a hit, never a miss.
    """

    found: bool
    value: T | None = None

    @classmethod
    def hit(cls, value: T) -> "CacheLookup[T]":
        return cls(found=True, value=value)

    @classmethod
    def miss(cls) -> "CacheLookup[T]":
        return cls(found=False)


@runtime_checkable
class CacheTier(Protocol):
    """
    Protocol defining one storage backend in the coordinator's chain.

    Implementations:
    - MemoryTier: process-local LRU
    - RedisTier: shared remote tier

    Contract:
    - get() surfaces backend errors by raising; absence is CacheLookup.miss()
    - put() raises on failure; ttl <= 0 leaves the key absent
    - delete() of an absent key succeeds
    """

    name: str

    async def get(self, key: str) -> CacheLookup[Any]:
        """
        Read a key.

        Returns:
            CacheLookup: hit with the stored value, or miss

        Raises:
            Exception: on backend failure
        """
        ...

    async def put(self, key: str, value: Any, ttl: float) -> None:
        """
        Store a value for ``ttl`` seconds.

        Raises:
            Exception: on backend failure
        """
        ...

    async def delete(self, key: str) -> None:
        """
        Remove a key. Absent keys are not an error.

        Raises:
            Exception: on backend failure
        """
        ...


@dataclass(frozen=True)
class TierEvent:
    """
    One observable outcome of a coordinator operation.

    Attributes:
        kind: What happened
        key: Cache key
        tier: Tier name (None for loader events)
        tier_index: Tier position (None for loader events)
        ttl: Effective TTL for write events
        error: Exception for failure events
        duration_ms: Time spent in the operation
    """

    kind: TierEventKind
    key: str
    tier: str | None = None
    tier_index: int | None = None
    ttl: float | None = None
    error: BaseException | None = None
    duration_ms: float | None = None
    at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def is_failure(self) -> bool:
        return self.error is not None


@runtime_checkable
class CacheObserverSink(Protocol):
    """Receives every TierEvent the coordinator emits."""

    def record(self, event: TierEvent) -> None:
        ...
