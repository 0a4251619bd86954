"""
Counter store module for the visit counter.
Implements Strategy Pattern for flexible counter backends.
"""

from .strategies import CounterStore, RedisCounterStore, InMemoryCounterStore
from .factory import CounterStoreFactory, CounterBackend

__all__ = [
    "CounterStore",
    "RedisCounterStore",
    "InMemoryCounterStore",
    "CounterStoreFactory",
    "CounterBackend",
]
