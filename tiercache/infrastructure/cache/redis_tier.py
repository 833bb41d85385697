"""
Redis Cache Tier

Shared remote tier backed by RedisClient.

Storage format:
- Key:   "{prefix}:{cache key}"
- Value: orjson-encoded JSON text

A Redis nil reply is a miss. A stored JSON ``null`` decodes to ``None``
and is a hit, so a legitimately empty value is not reloaded on every call.
"""

import math
from collections.abc import Callable
from typing import Any

import orjson

from tiercache.core.config.constants import REDIS_KEY_PREFIX
from tiercache.core.exceptions import CacheSerializationError
from tiercache.core.interfaces.cache import CacheLookup
from tiercache.infrastructure.cache.redis_client import RedisClient


def _encode(value: Any) -> str:
    return orjson.dumps(value).decode("utf-8")


class RedisTier:
    """
    Remote cache tier over a connected RedisClient.

    Redis errors surface as CacheKeyError / CacheConnectionError from the
    client; this class never converts them into misses.
    """

    def __init__(
        self,
        client: RedisClient,
        key_prefix: str = REDIS_KEY_PREFIX,
        name: str = "redis",
        encoder: Callable[[Any], str] = _encode,
        decoder: Callable[[str], Any] = orjson.loads,
    ):
        """
        Args:
            client: Redis client (connect() must have been awaited before use)
            key_prefix: Namespace prepended to every key
            name: Tier name reported in diagnostics
            encoder: Value → text
            decoder: Text → value
        """
        self.name = name
        self._client = client
        self._prefix = key_prefix
        self._encode = encoder
        self._decode = decoder

    async def connect(self) -> None:
        """Connect the underlying client if it is not connected yet."""
        if not self._client.is_connected():
            await self._client.connect()

    async def disconnect(self) -> None:
        await self._client.disconnect()

    def _key(self, key: str) -> str:
        return f"{self._prefix}:{key}" if self._prefix else key

    async def get(self, key: str) -> CacheLookup[Any]:
        raw = await self._client.get(self._key(key))
        if raw is None:
            return CacheLookup.miss()
        try:
            return CacheLookup.hit(self._decode(raw))
        except (orjson.JSONDecodeError, TypeError, ValueError) as e:
            raise CacheSerializationError(
                f"Cannot decode cached value: {e}", details={"key": key, "tier": self.name}
            ) from e

    async def put(self, key: str, value: Any, ttl: float) -> None:
        """
        Store ``value`` with SET EX.

        Fractional TTLs are rounded up to whole seconds; a non-positive TTL
        expires immediately by deleting the key.
        """
        redis_key = self._key(key)
        if ttl <= 0:
            await self._client.delete(redis_key)
            return

        try:
            payload = self._encode(value)
        except (orjson.JSONEncodeError, TypeError, ValueError) as e:
            raise CacheSerializationError(
                f"Cannot encode value: {e}",
                details={"key": key, "tier": self.name, "value_type": type(value).__name__},
            ) from e

        await self._client.set(redis_key, payload, ttl=max(1, math.ceil(ttl)))

    async def delete(self, key: str) -> None:
        await self._client.delete(self._key(key))

    async def health_check(self) -> dict[str, Any]:
        return await self._client.health_check()

    def __repr__(self) -> str:
        return f"RedisTier(name={self.name!r}, prefix={self._prefix!r})"
