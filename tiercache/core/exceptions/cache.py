"""
Cache-Related Exceptions

Exceptions raised by concrete cache backends (Redis, in-memory) and by
the coordinator when it reports per-tier outcomes.

Author: System Architect
Date: 2025-12-08
"""

from typing import Any

from tiercache.core.exceptions.base import TierCacheError


class CacheError(TierCacheError):
    """Base exception for cache backend errors."""
    pass


class CacheConnectionError(CacheError):
    """
    Raised when unable to connect to a cache backend (Redis).

    Common causes:
    - Redis server is down
    - Network connectivity issues
    - Incorrect host/port configuration
    - Authentication failure
    """
    pass


class CacheKeyError(CacheError):
    """
    Raised when a cache key operation fails on the backend.

    Common causes:
    - Operation timeout
    - Memory limit exceeded
    - Connection dropped mid-command
    """
    pass


class CacheSerializationError(CacheError):
    """Raised when a stored value cannot be encoded or decoded."""
    pass


class TierOperationError(TierCacheError):
    """
    A single tier operation failed while the coordinator was driving it.

    These are never raised to callers of ``resolve`` or ``invalidate``; the
    coordinator hands them to its observer inside a ``TierEvent``.

    Attributes:
        tier: Tier name
        tier_index: Position of the tier (0 = nearest)
        operation: "get", "put" or "delete"
        cause: The underlying exception, if any
    """

    operation = "unknown"

    def __init__(
        self,
        message: str,
        tier: str,
        tier_index: int,
        cause: BaseException | None = None,
        details: dict[str, Any] | None = None,
    ):
        merged = {"tier": tier, "tier_index": tier_index, "operation": self.operation}
        if cause is not None:
            merged["original_error"] = cause.__class__.__name__
            merged["original_message"] = str(cause)
        merged.update(details or {})
        super().__init__(message, details=merged)
        self.tier = tier
        self.tier_index = tier_index
        self.cause = cause


class TierReadError(TierOperationError):
    """A tier ``get`` raised. Treated as a miss for probing, reported distinctly."""

    operation = "get"


class TierWriteError(TierOperationError):
    """A tier ``put`` raised during backfill."""

    operation = "put"


class TierDeleteError(TierOperationError):
    """A tier ``delete`` raised during invalidation."""

    operation = "delete"


class TierTimeoutError(TierOperationError):
    """A tier operation exceeded the coordinator's bounded wait."""

    def __init__(
        self,
        message: str,
        tier: str,
        tier_index: int,
        operation: str,
        timeout: float,
    ):
        self.operation = operation
        super().__init__(message, tier, tier_index, details={"timeout": timeout})
        self.timeout = timeout
