"""
Factory for creating counter store instances.
"""

from enum import Enum
from .strategies import CounterStore, RedisCounterStore, InMemoryCounterStore
from visit_counter_app.config import Settings


class CounterBackend(Enum):
    """Available counter backends"""
    REDIS = "redis"
    MEMORY = "memory"


def redis_url(address: str) -> str:
    """Accept both a bare host:port and a full redis:// URL"""
    if "://" in address:
        return address
    return f"redis://{address}/0"


class CounterStoreFactory:
    """
    Simple factory for creating counter store instances.

    The instance is owned by the AppContext, not cached here.
    """

    @classmethod
    def create(cls, backend: CounterBackend, settings: Settings) -> CounterStore:
        """
        Create a counter store.

        Args:
            backend: Type of counter backend (from enum)
            settings: Application settings

        Returns:
            CounterStore instance (not yet pinged)
        """
        if backend == CounterBackend.REDIS:
            import redis.asyncio

            client = redis.asyncio.from_url(redis_url(settings.redis_address))
            print(f"✅ Redis counter store configured ({settings.redis_address})")
            return RedisCounterStore(client)

        elif backend == CounterBackend.MEMORY:
            print("✅ In-memory counter store initialized")
            return InMemoryCounterStore()

        raise ValueError(f"Unknown counter backend: {backend}")
