"""
System Constants and Enumerations

This module defines constants and enumerations shared by the coordinator,
the concrete tiers and the observability layer.

Author: System Architect
Date: 2025-12-05
"""

from enum import Enum

# ============================================================================
# Stage Identifiers (for structured logging)
# ============================================================================


class Stage(str, Enum):
    """
    Coordinator stages used as the ``stage`` field of log entries.

    Format: {SEQUENCE}_{DESCRIPTIVE_NAME}

    Examples:
        stage="2.1_TIER_PROBE"
        stage="2.3_BACKFILL"
    """

    INITIALIZATION = "0.0_INITIALIZATION"
    TIER_PROBE = "2.1_TIER_PROBE"
    LOADER = "2.2_LOADER"
    BACKFILL = "2.3_BACKFILL"
    INVALIDATION = "2.4_INVALIDATION"
    HEALTH = "2.5_HEALTH_CHECK"
    SHUTDOWN = "6.0_SHUTDOWN"

    # Cross-Cutting Concerns (Alphabetic Prefixes)
    REDIS = "R_REDIS"
    LOGGING = "L_LOGGING_OPERATIONS"


# ============================================================================
# Tier Event Kinds
# ============================================================================


class TierEventKind(str, Enum):
    """
    Diagnostic events emitted by the coordinator, one per tier outcome.

    Read failures are reported separately from misses so that a backend
    outage is never indistinguishable from a cold cache.
    """

    TIER_HIT = "tier_hit"
    TIER_MISS = "tier_miss"
    TIER_READ_FAILED = "tier_read_failed"
    LOADER_INVOKED = "loader_invoked"
    LOADER_FAILED = "loader_failed"
    TIER_WRITE = "tier_write"
    TIER_WRITE_FAILED = "tier_write_failed"
    TIER_DELETE = "tier_delete"
    TIER_DELETE_FAILED = "tier_delete_failed"


class TierOperation(str, Enum):
    """Operations a tier exposes."""

    GET = "get"
    PUT = "put"
    DELETE = "delete"


# ============================================================================
# Defaults
# ============================================================================

DEFAULT_TTL_FACTOR = 2  # tier i > 0 caches for max(1, i * 2) * base TTL
DEFAULT_OPERATION_TIMEOUT = 2.0  # seconds per tier get/put/delete
L1_CACHE_MAX_SIZE = 1000  # Maximum entries in the in-memory tier
LOG_KEY_MAX_LENGTH = 64  # cache_key fields longer than this are truncated in logs

# ============================================================================
# Key Prefixes
# ============================================================================

REDIS_KEY_PREFIX = "tiercache"
CACHE_KEY_HASH_PREFIX = "cache"
