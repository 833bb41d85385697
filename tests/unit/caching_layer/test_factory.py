"""
Unit Tests for Coordinator Factory

Tests that settings drive the default memory + redis chain and that the
singleton helpers connect and close it.
"""

from unittest.mock import patch

import pytest

from tests.test_fixtures import CacheTestFactory
from tiercache.caching import factory
from tiercache.caching.factory import build_coordinator, close_coordinator, get_coordinator, init_coordinator
from tiercache.infrastructure.cache.memory_tier import MemoryTier
from tiercache.infrastructure.cache.redis_tier import RedisTier


@pytest.fixture(autouse=True)
def reset_coordinator_singleton():
    factory._coordinator = None
    yield
    factory._coordinator = None


@pytest.mark.unit
class TestBuildCoordinator:
    """Test suite for build_coordinator."""

    def test_builds_memory_then_redis(self, test_settings):
        """Test the default chain order and tier configuration."""
        client = CacheTestFactory.redis_client_with_data()

        coordinator = build_coordinator(settings=test_settings, redis_client=client)

        memory, remote = coordinator.tiers
        assert isinstance(memory, MemoryTier)
        assert isinstance(remote, RedisTier)
        assert memory.max_size == test_settings.CACHE_L1_MAX_SIZE
        assert coordinator.policy.factor == test_settings.CACHE_TTL_FACTOR

    @pytest.mark.asyncio
    async def test_resolve_end_to_end_over_fake_redis(self, test_settings):
        """Test a full miss writes orjson text with the staggered TTL under the prefix."""
        client = CacheTestFactory.redis_client_with_data()
        coordinator = build_coordinator(settings=test_settings, redis_client=client)

        result = await coordinator.resolve("u:42", lambda: {"name": "Ada"}, base_ttl=120)

        assert result == {"name": "Ada"}
        client.set.assert_awaited_once_with("test:u:42", '{"name":"Ada"}', ttl=240)

    @pytest.mark.asyncio
    async def test_redis_outage_falls_back_to_memory(self, test_settings):
        """Test that a failing Redis tier never fails resolve."""
        client = CacheTestFactory.failing_redis_client()
        coordinator = build_coordinator(settings=test_settings, redis_client=client)

        assert await coordinator.resolve("k", lambda: "v") == "v"
        assert await coordinator.resolve("k", lambda: "other") == "v"
        assert coordinator.stats()["tiers"]["redis"]["write_failures"] == 1

    def test_uses_global_redis_client_by_default(self, test_settings):
        client = CacheTestFactory.redis_client_with_data()

        with patch.object(factory, "get_redis_client", return_value=client) as mock_get:
            build_coordinator(settings=test_settings)

        mock_get.assert_called_once()


@pytest.mark.unit
class TestCoordinatorSingleton:
    """Global lifecycle helpers."""

    @pytest.mark.asyncio
    async def test_init_connects_redis_and_close_releases(self, test_settings):
        client = CacheTestFactory.redis_client_with_data()
        client.is_connected.return_value = False

        with patch.object(factory, "get_settings", return_value=test_settings), patch.object(
            factory, "get_redis_client", return_value=client
        ):
            coordinator = await init_coordinator()
            assert get_coordinator() is coordinator

            await coordinator.resolve("k", lambda: "v")
            memory = coordinator.tiers[0]
            assert memory.size == 1

            await close_coordinator()

        client.connect.assert_awaited_once()
        client.disconnect.assert_awaited_once()
        assert memory.size == 0
        assert factory._coordinator is None

    @pytest.mark.asyncio
    async def test_close_without_init_is_noop(self):
        await close_coordinator()

        assert factory._coordinator is None
