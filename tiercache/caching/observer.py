"""
Cache Observer

Tracks coordinator outcomes and logs them.

Responsibility: All side effects of diagnostics (logging, counters). The
coordinator only builds TierEvents; what happens to them is decided here.

Metrics Tracked (per tier name):
- hits, misses, read failures
- writes, write failures
- deletes, delete failures
plus loader invocations / failures and the overall hit rate.
"""

from collections import defaultdict
from typing import Any

import structlog

from tiercache.core.config.constants import Stage, TierEventKind
from tiercache.core.exceptions import TierCacheError
from tiercache.core.interfaces.cache import TierEvent
from tiercache.core.logging.logger import get_logger, log_stage

logger = get_logger(__name__)


_EVENT_STAGES: dict[TierEventKind, tuple[Stage, str, str]] = {
    TierEventKind.TIER_HIT: (Stage.TIER_PROBE, "Tier hit", "debug"),
    TierEventKind.TIER_MISS: (Stage.TIER_PROBE, "Tier miss", "debug"),
    TierEventKind.TIER_READ_FAILED: (Stage.TIER_PROBE, "Tier read failed", "warning"),
    TierEventKind.LOADER_INVOKED: (Stage.LOADER, "Loader invoked after full miss", "debug"),
    TierEventKind.LOADER_FAILED: (Stage.LOADER, "Loader failed", "warning"),
    TierEventKind.TIER_WRITE: (Stage.BACKFILL, "Tier backfilled", "debug"),
    TierEventKind.TIER_WRITE_FAILED: (Stage.BACKFILL, "Tier write failed", "warning"),
    TierEventKind.TIER_DELETE: (Stage.INVALIDATION, "Tier invalidated", "debug"),
    TierEventKind.TIER_DELETE_FAILED: (Stage.INVALIDATION, "Tier delete failed", "warning"),
}

_COUNTER_NAMES: dict[TierEventKind, str] = {
    TierEventKind.TIER_HIT: "hits",
    TierEventKind.TIER_MISS: "misses",
    TierEventKind.TIER_READ_FAILED: "read_failures",
    TierEventKind.TIER_WRITE: "writes",
    TierEventKind.TIER_WRITE_FAILED: "write_failures",
    TierEventKind.TIER_DELETE: "deletes",
    TierEventKind.TIER_DELETE_FAILED: "delete_failures",
}


class CacheObserver:
    """
    Default observer sink: structlog output plus in-process counters.

    Usage:
        observer = CacheObserver()
        coordinator = TierCoordinator([memory, redis], observer=observer)
        ...
        observer.get_stats()["tiers"]["memory"]["hits"]
    """

    def __init__(self, logger_instance: structlog.stdlib.BoundLogger | None = None):
        """
        Args:
            logger_instance: Logger to write events to (defaults to this module's logger)
        """
        self._logger = logger_instance or logger
        self._tiers: dict[str, dict[str, int]] = defaultdict(lambda: dict.fromkeys(_COUNTER_NAMES.values(), 0))
        self._loader_calls = 0
        self._loader_failures = 0

    def record(self, event: TierEvent) -> None:
        """
        Record one coordinator event.

        Failures are logged at warning with the error attached; everything
        else at debug.
        """
        counter = _COUNTER_NAMES.get(event.kind)
        if counter is not None and event.tier is not None:
            self._tiers[event.tier][counter] += 1
        elif event.kind is TierEventKind.LOADER_INVOKED:
            self._loader_calls += 1
        elif event.kind is TierEventKind.LOADER_FAILED:
            self._loader_failures += 1

        stage, message, level = _EVENT_STAGES[event.kind]
        fields: dict[str, Any] = {"cache_key": event.key, "event_kind": event.kind.value}
        if event.tier is not None:
            fields["tier"] = event.tier
            fields["tier_index"] = event.tier_index
        if event.ttl is not None:
            fields["ttl"] = event.ttl
        if event.duration_ms is not None:
            fields["duration_ms"] = round(event.duration_ms, 3)
        if event.error is not None:
            fields["error_type"] = event.error.__class__.__name__
            if isinstance(event.error, TierCacheError):
                fields["error"] = event.error.to_dict()
            else:
                fields["error"] = str(event.error)

        log_stage(self._logger, stage, message, level=level, **fields)

    def get_stats(self) -> dict[str, Any]:
        """
        Get cache performance statistics.

        total_lookups counts resolve() calls: each either hits one tier or
        invokes the loader once. lookup() probes that miss everywhere are not
        counted.

        Returns:
            Dict with per-tier counters, loader counters and hit rate
        """
        hits = sum(c["hits"] for c in self._tiers.values())
        total = hits + self._loader_calls
        return {
            "tiers": {name: dict(counters) for name, counters in self._tiers.items()},
            "loader_calls": self._loader_calls,
            "loader_failures": self._loader_failures,
            "total_lookups": total,
            "hit_rate": round(hits / total, 3) if total > 0 else 0.0,
        }

    def reset(self) -> None:
        """Zero all counters."""
        self._tiers.clear()
        self._loader_calls = 0
        self._loader_failures = 0
