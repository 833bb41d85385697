"""
Unit Tests for MemoryTier

Tests LRU eviction, per-entry expiry on an injected clock and the tier contract.
"""

import pytest

from tiercache.caching.coordinator import TierCoordinator
from tiercache.core.exceptions import CacheSerializationError, ConfigurationError
from tiercache.core.interfaces.cache import CacheLookup, CacheTier
from tiercache.infrastructure.cache.memory_tier import MemoryTier


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def memory_tier(clock):
    return MemoryTier(max_size=3, clock=clock)


@pytest.mark.unit
class TestMemoryTier:
    """Test suite for MemoryTier."""

    @pytest.mark.asyncio
    async def test_put_then_get_hits(self, memory_tier):
        await memory_tier.put("k", {"a": 1}, ttl=60)

        assert await memory_tier.get("k") == CacheLookup.hit({"a": 1})

    @pytest.mark.asyncio
    async def test_absent_key_misses(self, memory_tier):
        assert await memory_tier.get("missing") == CacheLookup.miss()

    @pytest.mark.asyncio
    async def test_none_value_is_a_hit(self, memory_tier):
        """Test that a stored None is distinguishable from absence."""
        await memory_tier.put("k", None, ttl=60)

        lookup = await memory_tier.get("k")

        assert lookup.found is True
        assert lookup.value is None

    @pytest.mark.asyncio
    async def test_entry_expires_after_ttl(self, memory_tier, clock):
        """Test that an entry reads as a miss once its TTL elapses and is dropped."""
        await memory_tier.put("k", "v", ttl=10)

        clock.advance(9)
        assert (await memory_tier.get("k")).found is True

        clock.advance(1)
        assert (await memory_tier.get("k")).found is False
        assert memory_tier.size == 0

    @pytest.mark.asyncio
    async def test_non_positive_ttl_removes_entry(self, memory_tier):
        """Test that ttl <= 0 expires immediately, dropping any previous value."""
        await memory_tier.put("k", "old", ttl=60)

        await memory_tier.put("k", "new", ttl=0)

        assert (await memory_tier.get("k")).found is False

    @pytest.mark.asyncio
    async def test_lru_eviction_on_capacity(self, memory_tier):
        """Test that the least recently used key is evicted first."""
        for key in ("a", "b", "c"):
            await memory_tier.put(key, key, ttl=60)

        # Touch "a" so "b" becomes the oldest
        await memory_tier.get("a")
        await memory_tier.put("d", "d", ttl=60)

        assert memory_tier.keys() == ["c", "a", "d"]
        assert (await memory_tier.get("b")).found is False

    @pytest.mark.asyncio
    async def test_overwrite_refreshes_ttl(self, memory_tier, clock):
        await memory_tier.put("k", "v1", ttl=10)
        clock.advance(8)
        await memory_tier.put("k", "v2", ttl=10)
        clock.advance(8)

        assert await memory_tier.get("k") == CacheLookup.hit("v2")

    @pytest.mark.asyncio
    async def test_delete_absent_key_succeeds(self, memory_tier):
        await memory_tier.delete("missing")

        assert memory_tier.size == 0

    @pytest.mark.asyncio
    async def test_clear_and_health(self, memory_tier):
        await memory_tier.put("a", 1, ttl=60)
        await memory_tier.put("b", 2, ttl=60)

        health = await memory_tier.health_check()
        assert health["status"] == "healthy"
        assert health["size"] == 2
        assert health["utilization_pct"] == 66.67

        await memory_tier.clear()
        assert memory_tier.size == 0

    def test_rejects_zero_capacity(self):
        with pytest.raises(ConfigurationError):
            MemoryTier(max_size=0)

    def test_satisfies_tier_protocol(self, memory_tier):
        assert isinstance(memory_tier, CacheTier)
        assert memory_tier.name == "memory"


@pytest.mark.unit
class TestMemoryTierValueIsolation:
    """Stored values are copies, never the caller's object."""

    @pytest.mark.asyncio
    async def test_mutating_put_value_does_not_change_entry(self, memory_tier):
        value = {"name": "Ada", "tags": ["a"]}
        await memory_tier.put("k", value, ttl=60)

        value["tags"].append("b")

        assert await memory_tier.get("k") == CacheLookup.hit({"name": "Ada", "tags": ["a"]})

    @pytest.mark.asyncio
    async def test_each_get_returns_fresh_copy(self, memory_tier):
        await memory_tier.put("k", {"name": "Ada"}, ttl=60)

        first = (await memory_tier.get("k")).value
        first["name"] = "changed"

        assert (await memory_tier.get("k")).value == {"name": "Ada"}

    @pytest.mark.asyncio
    async def test_mutating_resolved_value_does_not_poison_tier0(self, clock):
        """Test that a caller editing its resolve() result does not change what the next caller gets."""
        coordinator = TierCoordinator([MemoryTier(clock=clock)], default_ttl=60)

        first = await coordinator.resolve("u:42", lambda: {"name": "Ada"})
        first["name"] = "changed"
        second = await coordinator.resolve("u:42", lambda: {"name": "reloaded"})

        assert second == {"name": "Ada"}

    @pytest.mark.asyncio
    async def test_unencodable_value_raises_serialization_error(self, memory_tier):
        with pytest.raises(CacheSerializationError):
            await memory_tier.put("k", object(), ttl=60)

        assert memory_tier.size == 0
