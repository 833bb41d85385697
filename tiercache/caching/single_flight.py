"""
Single-Flight Layer

Collapses concurrent calls for the same key inside one event loop into a
single execution. TierCoordinator does not use this on its own; wrap a
resolve() call when at-most-one-loader-per-key matters:

    flight = SingleFlight()
    user = await flight.do(key, lambda: coordinator.resolve(key, loader, ttl))

Scope is a single process. Callers in other processes still race.
"""

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any

from tiercache.core.logging.logger import get_logger

logger = get_logger(__name__)


class SingleFlight:
    """Per-key in-flight de-duplication for coroutine functions."""

    def __init__(self):
        self._lock = asyncio.Lock()
        self._inflight: dict[str, asyncio.Future] = {}

    async def do(self, key: str, fn: Callable[[], Awaitable[Any]]) -> Any:
        """
        Run ``fn`` unless a call for ``key`` is already in flight.

        Waiters share the leader's result or exception. The key is released
        as soon as the leader finishes, so the next call runs ``fn`` again.
        """
        async with self._lock:
            future = self._inflight.get(key)
            leader = future is None
            if leader:
                future = asyncio.get_running_loop().create_future()
                self._inflight[key] = future

        if not leader:
            logger.debug("Joined in-flight call", cache_key=key)
            # shield so one cancelled waiter does not cancel the shared future
            return await asyncio.shield(future)

        try:
            result = await fn()
        except asyncio.CancelledError:
            future.cancel()
            raise
        except BaseException as e:
            future.set_exception(e)
            # mark retrieved so an unobserved failure does not warn at GC
            future.exception()
            raise
        else:
            future.set_result(result)
            return result
        finally:
            if not future.done():
                future.cancel()
            # our future is still registered here, so no other leader can exist for key
            self._inflight.pop(key, None)

    def inflight(self) -> int:
        """Number of keys currently executing."""
        return len(self._inflight)
