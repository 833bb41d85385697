#!/usr/bin/env python3
"""
Tier Coordinator - Read-Through / Write-Through over an Ordered Tier Chain

Architecture:
    TierCoordinator (Public API)
        ├── tiers[0..n] (CacheTier: memory, redis, ...)
        ├── ExpiryPolicy (per-tier backfill TTL)
        └── CacheObserverSink (logging & counters)

Algorithm:
    RESOLVE:    probe tier 0 → 1 → ... → n, first hit wins
                full miss → loader() once → backfill every tier → return
    INVALIDATE: delete on every tier in order, never raises

Failure Policy:
    - Tier read error/timeout: reported as tier_read_failed, probing continues
    - Tier write/delete error/timeout: reported, never raised
    - Loader error: propagated verbatim, nothing written

The coordinator owns no mutable state beyond its immutable tier tuple, so
one instance is shared by all concurrent callers without locking.

Author: System Architect
Date: 2025-12-13
"""

import asyncio
import hashlib
import inspect
import time
from collections.abc import Awaitable, Callable, Sequence
from typing import Any

from tiercache.caching.expiry import ExpiryPolicy, StaggeredExpiryPolicy
from tiercache.caching.observer import CacheObserver
from tiercache.core.config.constants import (
    CACHE_KEY_HASH_PREFIX,
    DEFAULT_OPERATION_TIMEOUT,
    Stage,
    TierEventKind,
    TierOperation,
)
from tiercache.core.config.settings import get_settings
from tiercache.core.exceptions import (
    ConfigurationError,
    TierDeleteError,
    TierOperationError,
    TierReadError,
    TierTimeoutError,
    TierWriteError,
)
from tiercache.core.interfaces.cache import CacheLookup, CacheObserverSink, CacheTier, TierEvent
from tiercache.core.logging.logger import get_logger, log_stage

logger = get_logger(__name__)

# Zero-argument producer of the authoritative value; may return an awaitable
Loader = Callable[[], Any]

_OPERATION_ERRORS: dict[TierOperation, type[TierOperationError]] = {
    TierOperation.GET: TierReadError,
    TierOperation.PUT: TierWriteError,
    TierOperation.DELETE: TierDeleteError,
}


class TierCoordinator:
    """
    Multi-tier cache coordinator.

    Usage:
        coordinator = TierCoordinator([MemoryTier(), RedisTier(redis_client)])

        user = await coordinator.resolve("u:42", lambda: load_user(42), base_ttl=120)
        await coordinator.invalidate("u:42")

    With the default StaggeredExpiryPolicy the memory tier above keeps the
    value for 120s and the redis tier for 240s.
    """

    def __init__(
        self,
        tiers: Sequence[CacheTier],
        policy: ExpiryPolicy | None = None,
        observer: CacheObserverSink | None = None,
        operation_timeout: float | None = DEFAULT_OPERATION_TIMEOUT,
        default_ttl: float | None = None,
        parallel_backfill: bool = False,
    ):
        """
        Initialize coordinator.

        Args:
            tiers: Ordered tiers, nearest first (at least one)
            policy: Backfill TTL policy (default: StaggeredExpiryPolicy())
            observer: Diagnostic sink (default: CacheObserver())
            operation_timeout: Seconds to wait on one tier operation (None = unbounded)
            default_ttl: Base TTL when resolve() gets none (default: CACHE_DEFAULT_TTL)
            parallel_backfill: Issue backfill writes concurrently instead of in tier order

        Raises:
            ConfigurationError: No tiers, or a non-positive timeout
        """
        if not tiers:
            raise ConfigurationError("TierCoordinator requires at least one tier")
        if operation_timeout is not None and operation_timeout <= 0:
            raise ConfigurationError(
                "operation_timeout must be positive", details={"operation_timeout": operation_timeout}
            )

        self._tiers: tuple[CacheTier, ...] = tuple(tiers)
        self._names: tuple[str, ...] = tuple(
            getattr(tier, "name", type(tier).__name__) for tier in self._tiers
        )
        self._policy = policy or StaggeredExpiryPolicy()
        self._observer = observer if observer is not None else CacheObserver()
        self._timeout = operation_timeout
        self._default_ttl = (
            default_ttl if default_ttl is not None else get_settings().cache.CACHE_DEFAULT_TTL
        )
        self._parallel_backfill = parallel_backfill

        log_stage(
            logger,
            Stage.INITIALIZATION,
            "Tier coordinator initialized",
            tiers=list(self._names),
            policy=repr(self._policy),
            operation_timeout=self._timeout,
            parallel_backfill=self._parallel_backfill,
        )

    @property
    def tiers(self) -> tuple[CacheTier, ...]:
        return self._tiers

    @property
    def policy(self) -> ExpiryPolicy:
        return self._policy

    @property
    def observer(self) -> CacheObserverSink:
        return self._observer

    # -------------------------------------------------------------------------
    # Core Operations
    # -------------------------------------------------------------------------

    async def resolve(self, key: str, loader: Loader, base_ttl: float | None = None) -> Any:
        """
        Return the cached value for ``key``, loading and backfilling on a full miss.

        STAGE-2.1: Tier probe (sequential, first hit wins)
        STAGE-2.2: Loader (full miss only, exactly once)
        STAGE-2.3: Backfill (every tier, best-effort)

        Earlier tiers that missed are not repopulated on a later-tier hit.

        Args:
            key: Cache key
            loader: Zero-argument callable producing the value, sync or async
            base_ttl: TTL for tier 0 in seconds; later tiers follow the policy

        Returns:
            Cached or loaded value

        Raises:
            Exception: Whatever the loader raised. Tier failures never propagate.
        """
        lookup = await self._probe(key)
        if lookup.found:
            return lookup.value

        ttl = self._default_ttl if base_ttl is None else base_ttl

        self._emit(TierEvent(kind=TierEventKind.LOADER_INVOKED, key=key))
        start = time.perf_counter()
        try:
            value = loader()
            if inspect.isawaitable(value):
                value = await value
        except Exception as e:
            self._emit(
                TierEvent(
                    kind=TierEventKind.LOADER_FAILED,
                    key=key,
                    error=e,
                    duration_ms=_elapsed_ms(start),
                )
            )
            raise

        await self._backfill(key, value, ttl)
        return value

    async def invalidate(self, key: str) -> None:
        """
        Delete ``key`` from every tier in order.

        STAGE-2.4: Cache invalidation

        A failing tier does not stop deletes on later tiers and nothing is
        raised; per-tier results reach the observer as tier_delete /
        tier_delete_failed events.
        """
        for index, tier in enumerate(self._tiers):
            start = time.perf_counter()
            try:
                await self._run(index, TierOperation.DELETE, lambda t=tier: t.delete(key))
            except TierOperationError as e:
                self._emit(self._tier_event(TierEventKind.TIER_DELETE_FAILED, key, index, start, error=e))
            else:
                self._emit(self._tier_event(TierEventKind.TIER_DELETE, key, index, start))

    async def lookup(self, key: str) -> CacheLookup[Any]:
        """
        Probe the tiers without loading or backfilling.

        Returns:
            The first hit, or CacheLookup.miss() if no tier has the key
        """
        return await self._probe(key)

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    async def _probe(self, key: str) -> CacheLookup[Any]:
        for index, tier in enumerate(self._tiers):
            start = time.perf_counter()
            try:
                result = await self._run(index, TierOperation.GET, lambda t=tier: t.get(key))
                if not isinstance(result, CacheLookup):
                    raise TierReadError(
                        f"Tier {self._names[index]} returned {type(result).__name__}, expected CacheLookup",
                        self._names[index],
                        index,
                    )
            except TierOperationError as e:
                self._emit(self._tier_event(TierEventKind.TIER_READ_FAILED, key, index, start, error=e))
                continue

            if result.found:
                self._emit(self._tier_event(TierEventKind.TIER_HIT, key, index, start))
                return result
            self._emit(self._tier_event(TierEventKind.TIER_MISS, key, index, start))

        return CacheLookup.miss()

    async def _backfill(self, key: str, value: Any, base_ttl: float) -> None:
        indexes = range(len(self._tiers))
        if self._parallel_backfill:
            # _write never raises, so gather cannot drop a sibling's outcome
            await asyncio.gather(*(self._write(index, key, value, base_ttl) for index in indexes))
        else:
            for index in indexes:
                await self._write(index, key, value, base_ttl)

    async def _write(self, index: int, key: str, value: Any, base_ttl: float) -> None:
        tier = self._tiers[index]
        start = time.perf_counter()
        try:
            ttl = self._policy.effective_ttl(index, base_ttl)
        except Exception as e:
            error = TierWriteError(
                f"Expiry policy failed for tier {self._names[index]}: {e}", self._names[index], index, cause=e
            )
            self._emit(self._tier_event(TierEventKind.TIER_WRITE_FAILED, key, index, start, error=error))
            return

        try:
            await self._run(index, TierOperation.PUT, lambda: tier.put(key, value, ttl))
        except TierOperationError as e:
            self._emit(self._tier_event(TierEventKind.TIER_WRITE_FAILED, key, index, start, ttl=ttl, error=e))
        else:
            self._emit(self._tier_event(TierEventKind.TIER_WRITE, key, index, start, ttl=ttl))

    async def _run(self, index: int, operation: TierOperation, call: Callable[[], Awaitable[Any]]) -> Any:
        """
        Run one tier operation under the bounded wait.

        Every failure comes out as a TierOperationError subclass naming the
        tier and operation; cancellation propagates untouched. Only an
        expired wait becomes TierTimeoutError; a TimeoutError raised by the
        tier itself is an ordinary operation failure.
        """
        if self._timeout is None:
            return await self._call(index, operation, call)

        try:
            return await asyncio.wait_for(self._call(index, operation, call), timeout=self._timeout)
        except asyncio.TimeoutError as e:
            name = self._names[index]
            raise TierTimeoutError(
                f"Tier {name} {operation.value} timed out after {self._timeout}s",
                name,
                index,
                operation=operation.value,
                timeout=self._timeout,
            ) from e

    async def _call(self, index: int, operation: TierOperation, call: Callable[[], Awaitable[Any]]) -> Any:
        try:
            return await call()
        except Exception as e:
            name = self._names[index]
            raise _OPERATION_ERRORS[operation](
                f"Tier {name} {operation.value} failed: {e}", name, index, cause=e
            ) from e

    def _tier_event(
        self,
        kind: TierEventKind,
        key: str,
        index: int,
        start: float,
        ttl: float | None = None,
        error: BaseException | None = None,
    ) -> TierEvent:
        return TierEvent(
            kind=kind,
            key=key,
            tier=self._names[index],
            tier_index=index,
            ttl=ttl,
            error=error,
            duration_ms=_elapsed_ms(start),
        )

    def _emit(self, event: TierEvent) -> None:
        # A broken observer must not turn a best-effort operation into a failure
        try:
            self._observer.record(event)
        except Exception as e:
            log_stage(
                logger,
                Stage.LOGGING,
                "Cache observer raised",
                level="error",
                event_kind=event.kind.value,
                cache_key=event.key,
                error=str(e),
            )

    # -------------------------------------------------------------------------
    # Monitoring
    # -------------------------------------------------------------------------

    def stats(self) -> dict[str, Any]:
        """
        Get observer statistics.

        Returns:
            The observer's get_stats() output, or {} if it has none
        """
        get_stats = getattr(self._observer, "get_stats", None)
        return get_stats() if callable(get_stats) else {}

    async def health_check(self) -> dict[str, Any]:
        """
        Perform health check on every tier.

        Tiers without a health_check() are reported as "unknown"; a failing
        check marks the tier "unhealthy". Either makes the overall status
        "degraded".

        Returns:
            Dict with overall status and per-tier results
        """
        health: dict[str, Any] = {"status": "healthy", "tiers": []}

        for index, tier in enumerate(self._tiers):
            entry: dict[str, Any] = {}
            check = getattr(tier, "health_check", None)
            if check is None:
                entry["status"] = "unknown"
            else:
                try:
                    if self._timeout is None:
                        result = await check()
                    else:
                        result = await asyncio.wait_for(check(), timeout=self._timeout)
                    entry.update(result)
                    entry.setdefault("status", "healthy")
                except Exception as e:
                    entry = {"status": "unhealthy", "error": str(e)}

            # coordinator identity wins over anything the tier reported
            entry["name"] = self._names[index]
            entry["index"] = index
            if entry["status"] != "healthy":
                health["status"] = "degraded"
            health["tiers"].append(entry)

        log_stage(logger, Stage.HEALTH, "Tier health checked", status=health["status"])
        return health

    # -------------------------------------------------------------------------
    # Utilities
    # -------------------------------------------------------------------------

    @staticmethod
    def generate_cache_key(prefix: str, *args: Any) -> str:
        """
        Generate a consistent cache key from a prefix and arguments.

        Uses MD5 for fast hashing (collision risk acceptable for cache).
        Never applied implicitly; keys passed to resolve() are used as-is.

        Returns:
            Cache key (e.g., "cache:user:abc123def...")
        """
        data = ":".join(str(arg) for arg in args)
        hash_value = hashlib.md5(data.encode()).hexdigest()
        return f"{CACHE_KEY_HASH_PREFIX}:{prefix}:{hash_value}"


def _elapsed_ms(start: float) -> float:
    return (time.perf_counter() - start) * 1000
