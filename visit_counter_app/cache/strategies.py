"""
Counter store strategies using Strategy Pattern.
Allows switching between different counter backends (Redis, In-Memory).
"""

from abc import ABC, abstractmethod
from typing import Callable, Dict, Tuple
import time

from redis.exceptions import RedisError

from visit_counter_app.exceptions import CounterStoreError


class CounterStore(ABC):
    """
    Abstract base class for counter stores.

    Increments must be atomic at the store. Expiry is a separate call made
    right after each increment, so a key can briefly exist without a TTL.

    All methods are async because counter operations involve I/O (network for Redis).
    """

    @abstractmethod
    async def increment(self, key: str) -> int:
        """
        Increment a counter by one.

        Args:
            key: Counter key

        Returns:
            Value after the increment (1 for a new or expired key)
        """
        pass

    @abstractmethod
    async def expire(self, key: str, ttl: int) -> None:
        """
        Set (or reset) the time to live of a counter.

        Args:
            key: Counter key
            ttl: Time to live in seconds
        """
        pass

    @abstractmethod
    async def ping(self) -> None:
        """Check that the store is reachable, raising CounterStoreError if not"""
        pass

    async def close(self) -> None:
        """Release connections held by the store"""
        return None


class RedisCounterStore(CounterStore):
    """
    Redis counter implementation (INCR + EXPIRE).

    The client is a redis.asyncio.Redis shared by every request;
    concurrent increments from the same address serialize inside Redis.
    """

    def __init__(self, redis_client):
        """
        Initialize Redis counter store.

        Args:
            redis_client: Redis client instance (redis.asyncio.Redis)
        """
        self.redis = redis_client

    async def increment(self, key: str) -> int:
        try:
            return int(await self.redis.incr(key))
        except RedisError as e:
            raise CounterStoreError(f"INCR {key}", e) from e

    async def expire(self, key: str, ttl: int) -> None:
        try:
            await self.redis.expire(key, ttl)
        except RedisError as e:
            raise CounterStoreError(f"EXPIRE {key}", e) from e

    async def ping(self) -> None:
        try:
            await self.redis.ping()
        except RedisError as e:
            raise CounterStoreError("PING", e) from e

    async def close(self) -> None:
        await self.redis.aclose()


class InMemoryCounterStore(CounterStore):
    """
    In-memory counter implementation using Python dict.

    TTLs are enforced: an entry whose deadline has passed is treated
    as missing, so the next increment starts again at 1.

    Used in development/testing environments.
    Note: Async for interface consistency, but operations are instant.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        """
        Initialize in-memory counters.

        Args:
            clock: Monotonic time source in seconds (injectable for tests)
        """
        self._clock = clock
        self._counters: Dict[str, Tuple[int, float]] = {}  # key -> (value, expires_at)

    def _live_value(self, key: str) -> int:
        value, expires_at = self._counters.get(key, (0, float("inf")))
        if expires_at <= self._clock():
            del self._counters[key]
            return 0
        return value

    async def increment(self, key: str) -> int:
        value = self._live_value(key) + 1
        _, expires_at = self._counters.get(key, (0, float("inf")))
        self._counters[key] = (value, expires_at)
        return value

    async def expire(self, key: str, ttl: int) -> None:
        if self._live_value(key) == 0:
            return
        value, _ = self._counters[key]
        self._counters[key] = (value, self._clock() + ttl)

    async def ping(self) -> None:
        return None

    async def ttl(self, key: str) -> float:
        """Seconds left before the key expires (-1 without TTL, -2 if missing)"""
        if self._live_value(key) == 0:
            return -2
        _, expires_at = self._counters[key]
        if expires_at == float("inf"):
            return -1
        return expires_at - self._clock()
