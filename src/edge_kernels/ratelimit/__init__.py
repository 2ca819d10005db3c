"""
Rate Limit Module
=================

Fixed-window rate limiting against a key-value store.

Components:
    - WindowCounter: check_and_increment / peek over a KVStore
    - KVStore: Protocol for the store collaborator
    - InMemoryKVStore: Single-process store with TTL expiry
    - StoreUnavailableError: Store outage, distinct from a denial

Example:
    from edge_kernels.config import RateLimitConfig
    from edge_kernels.ratelimit import InMemoryKVStore, WindowCounter

    counter = WindowCounter(InMemoryKVStore(), RateLimitConfig(limit=10))
    decision = await counter.check_and_increment("key:demo")
"""

from edge_kernels.ratelimit.store import (
    InMemoryKVStore,
    KVStore,
    StoreUnavailableError,
)
from edge_kernels.ratelimit.counter import WindowCounter

__all__ = [
    "WindowCounter",
    "KVStore",
    "InMemoryKVStore",
    "StoreUnavailableError",
]
