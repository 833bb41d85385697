"""
Expiry Policies

Map (tier index, base TTL) to the TTL used when backfilling that tier.

Later tiers are typically larger and shared (Redis), earlier ones small
and local. Giving later tiers a longer TTL lets the cheap local tier churn
while the shared tier stays warm, so repopulating it is rare.

Every policy satisfies two properties:
- effective_ttl(0, t) == t
- effective_ttl(i, t) >= effective_ttl(i - 1, t) for t >= 0
"""

from typing import Protocol, runtime_checkable

from tiercache.core.config.constants import DEFAULT_TTL_FACTOR
from tiercache.core.exceptions import ConfigurationError


@runtime_checkable
class ExpiryPolicy(Protocol):
    def effective_ttl(self, tier_index: int, base_ttl: float) -> float:
        ...


def _check_index(tier_index: int) -> None:
    if tier_index < 0:
        raise ValueError(f"tier_index must be >= 0, got {tier_index}")


class StaggeredExpiryPolicy:
    """
    Multiply the base TTL for every tier after the first.

    Tier 0 gets ``base_ttl``; tier i > 0 gets ``max(1, i * factor) * base_ttl``.
    With the default factor of 2: 1x, 2x, 4x, 6x, ...

    A non-positive base TTL is returned unchanged for every tier so all tiers
    agree on "expire immediately".
    """

    def __init__(self, factor: int = DEFAULT_TTL_FACTOR):
        if factor < 1:
            raise ConfigurationError(
                "TTL factor must be >= 1", details={"factor": factor}
            )
        self._factor = factor

    @property
    def factor(self) -> int:
        return self._factor

    def effective_ttl(self, tier_index: int, base_ttl: float) -> float:
        _check_index(tier_index)
        if tier_index == 0 or base_ttl <= 0:
            return base_ttl
        return max(1, tier_index * self._factor) * base_ttl

    def __repr__(self) -> str:
        return f"StaggeredExpiryPolicy(factor={self._factor})"


class UniformExpiryPolicy:
    """Every tier uses the caller's TTL unchanged."""

    def effective_ttl(self, tier_index: int, base_ttl: float) -> float:
        _check_index(tier_index)
        return base_ttl

    def __repr__(self) -> str:
        return "UniformExpiryPolicy()"
