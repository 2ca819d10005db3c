"""
Key-Value Store
===============

Abstract key-value collaborator used by the window counter, plus an
in-process implementation.

Contract required by the counter:
    - get(key): point read, None when absent or expired
    - put(key, value, expire_after): point write with a TTL in seconds
    - No ordering guarantee between a write from one request and a
      read from a concurrent one beyond eventual visibility

Failures of the backing service are raised as StoreUnavailableError so
callers can tell an outage apart from a rate-limit denial.
"""

import heapq
import time
from typing import Callable, Dict, List, Optional, Protocol, Tuple

from edge_kernels.errors import EdgeKernelError


class StoreUnavailableError(EdgeKernelError):
    """Raised when the key-value store cannot serve a request."""
    pass


class KVStore(Protocol):
    """
    Protocol for key-value backends.

    Values are opaque strings; the counter owns their encoding.
    """

    async def get(self, key: str) -> Optional[str]:
        """Return the value for `key`, or None if absent or expired."""
        ...

    async def put(self, key: str, value: str, expire_after: float) -> None:
        """Store `value` under `key`, expiring `expire_after` seconds from now."""
        ...


class InMemoryKVStore:
    """
    Single-process key-value store with per-key expiry.

    Expired entries are evicted on read, and every write first sweeps
    whatever has expired, so memory stays bounded by the keys written
    within one TTL. This is enough to run the service without external
    infrastructure; it is not shared between processes and does not
    survive restarts.

    Example:
        store = InMemoryKVStore()
        await store.put("ip:10.0.0.1", '{"count": 1, "window_start": 0}', 60)
        raw = await store.get("ip:10.0.0.1")
    """

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        """
        Initialize the store.

        Args:
            clock: Source of the current time in seconds
        """
        self._clock = clock
        self._entries: Dict[str, Tuple[str, float]] = {}
        self._evicted_count: int = 0
        # (expires_at, key); may hold stale pairs for keys rewritten since
        self._expiry_heap: List[Tuple[float, str]] = []

    async def get(self, key: str) -> Optional[str]:
        entry = self._entries.get(key)
        if entry is None:
            return None

        value, expires_at = entry
        if self._clock() >= expires_at:
            del self._entries[key]
            self._evicted_count += 1
            return None

        return value

    async def put(self, key: str, value: str, expire_after: float) -> None:
        if expire_after <= 0:
            raise ValueError("expire_after must be positive")

        now = self._clock()
        self._sweep(now)

        expires_at = now + expire_after
        heapq.heappush(self._expiry_heap, (expires_at, key))
        self._entries[key] = (value, expires_at)

    def _sweep(self, now: float) -> None:
        heap = self._expiry_heap
        while heap and heap[0][0] <= now:
            _, key = heapq.heappop(heap)
            entry = self._entries.get(key)
            if entry is not None and entry[1] <= now:
                del self._entries[key]
                self._evicted_count += 1

    def __len__(self) -> int:
        return len(self._entries)

    def metrics(self) -> dict:
        """
        Get store metrics for observability.

        Returns:
            Dict with size and evicted_count
        """
        return {
            "size": len(self._entries),
            "evicted_count": self._evicted_count,
        }
