"""
Coordinator Factory

Builds the default two-tier chain from settings:

    TierCoordinator
        ├── tier 0: MemoryTier (CACHE_L1_MAX_SIZE)
        └── tier 1: RedisTier  (CACHE_KEY_PREFIX)

plus the process-wide singleton helpers used at service startup/shutdown.
"""

from tiercache.caching.coordinator import TierCoordinator
from tiercache.caching.expiry import StaggeredExpiryPolicy
from tiercache.caching.observer import CacheObserver
from tiercache.core.config.constants import Stage
from tiercache.core.config.settings import Settings, get_settings
from tiercache.core.logging.logger import get_logger, log_stage
from tiercache.infrastructure.cache.memory_tier import MemoryTier
from tiercache.infrastructure.cache.redis_client import RedisClient, get_redis_client
from tiercache.infrastructure.cache.redis_tier import RedisTier

logger = get_logger(__name__)


def build_coordinator(
    settings: Settings | None = None,
    redis_client: RedisClient | None = None,
) -> TierCoordinator:
    """
    Build a memory + redis coordinator.

    The Redis client is not connected here; call ``connect()`` on it (or use
    ``init_coordinator``) before the first lookup, otherwise every Redis
    operation is reported as a tier failure and the memory tier carries on.

    Args:
        settings: Settings to read (default: global settings)
        redis_client: Client for the remote tier (default: global client)
    """
    settings = settings or get_settings()
    cache_settings = settings.cache

    tiers = [
        MemoryTier(max_size=cache_settings.CACHE_L1_MAX_SIZE),
        RedisTier(redis_client or get_redis_client(), key_prefix=cache_settings.CACHE_KEY_PREFIX),
    ]
    return TierCoordinator(
        tiers,
        policy=StaggeredExpiryPolicy(cache_settings.CACHE_TTL_FACTOR),
        observer=CacheObserver(),
        operation_timeout=cache_settings.TIER_OPERATION_TIMEOUT,
        default_ttl=cache_settings.CACHE_DEFAULT_TTL,
        parallel_backfill=cache_settings.CACHE_PARALLEL_BACKFILL,
    )


# =============================================================================
# GLOBAL INSTANCE (SINGLETON PATTERN)
# =============================================================================

_coordinator: TierCoordinator | None = None


def get_coordinator() -> TierCoordinator:
    """
    Get the global coordinator instance (singleton).

    Returns:
        TierCoordinator: Global coordinator
    """
    global _coordinator

    if _coordinator is None:
        _coordinator = build_coordinator()

    return _coordinator


async def init_coordinator() -> TierCoordinator:
    """
    Build the global coordinator and connect its Redis tier.

    Raises:
        CacheConnectionError: If Redis is unreachable
    """
    coordinator = get_coordinator()
    for tier in coordinator.tiers:
        if isinstance(tier, RedisTier):
            await tier.connect()

    log_stage(logger, Stage.INITIALIZATION, "Tier coordinator ready", tiers=[t.name for t in coordinator.tiers])
    return coordinator


async def close_coordinator() -> None:
    """Clear in-memory tiers, disconnect Redis and drop the global coordinator."""
    global _coordinator

    if _coordinator is None:
        return

    for tier in _coordinator.tiers:
        if isinstance(tier, MemoryTier):
            await tier.clear()
        elif isinstance(tier, RedisTier):
            await tier.disconnect()

    _coordinator = None
    log_stage(logger, Stage.SHUTDOWN, "Tier coordinator closed")
