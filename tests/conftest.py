"""
Pytest Configuration and Shared Test Fixtures

This module provides pytest configuration and reusable fixtures for all tests.
All fixtures defined here are automatically available to all test files.
"""

import os
import sys

import pytest

# Add project root to sys.path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from tests.test_fixtures import CacheTestFactory, RecordingObserver  # noqa: E402
from tiercache.caching.coordinator import TierCoordinator  # noqa: E402
from tiercache.caching.expiry import StaggeredExpiryPolicy  # noqa: E402
from tiercache.core.config.settings import Settings  # noqa: E402

# pytest-asyncio runs in auto mode (see pyproject.toml)


# ============================================================================
# Configuration Fixtures
# ============================================================================


@pytest.fixture
def test_settings():
    """
    Settings with explicit values so the environment cannot leak in.
    """
    return Settings(
        REDIS_HOST="test-redis",
        REDIS_PORT=6390,
        CACHE_DEFAULT_TTL=60,
        CACHE_L1_MAX_SIZE=10,
        CACHE_TTL_FACTOR=2,
        CACHE_KEY_PREFIX="test",
        TIER_OPERATION_TIMEOUT=0.5,
        CACHE_PARALLEL_BACKFILL=False,
        LOG_LEVEL="DEBUG",
        LOG_FORMAT="console",
    )


@pytest.fixture(scope="session")
def use_real_redis():
    """Check if real Redis should be used for integration tests."""
    return os.getenv("USE_REAL_REDIS", "0").lower() in ("1", "true", "yes")


# ============================================================================
# Tier Fixtures
# ============================================================================


@pytest.fixture
def local_tier():
    """Tier 0: empty spy tier standing in for the in-process cache."""
    return CacheTestFactory.spy_tier("local")


@pytest.fixture
def remote_tier():
    """Tier 1: empty spy tier standing in for the shared remote cache."""
    return CacheTestFactory.spy_tier("remote")


@pytest.fixture
def recording_observer():
    return RecordingObserver()


@pytest.fixture
def coordinator(local_tier, remote_tier, recording_observer):
    """Two-tier coordinator over spy tiers with a short operation timeout."""
    return TierCoordinator(
        [local_tier, remote_tier],
        policy=StaggeredExpiryPolicy(),
        observer=recording_observer,
        operation_timeout=0.5,
        default_ttl=60,
    )


@pytest.fixture
def counting_loader():
    """
    Loader that returns a fixed value and counts invocations.

    Usage:
        loader = counting_loader({"name": "Ada"})
        await coordinator.resolve("u:42", loader)
        assert loader.calls == 1
    """

    def make(value):
        def loader():
            loader.calls += 1
            return value

        loader.calls = 0
        return loader

    return make
