"""
Window Counter
==============

Fixed-window request counter over an external key-value store.

Algorithm (per call):
    1. Read the client's record; absent -> {count: 0, window_start: now}
    2. now - window_start >= window_seconds -> reset to {0, now}
       (lazy reset on read, no background timer)
    3. count >= limit -> deny, store untouched
    4. Otherwise count += 1, write back with TTL = window_seconds, admit

Concurrency:
    The read, the arithmetic and the write are three separate store
    interactions with no compare-and-swap. Two requests from the same
    client arriving together may both see count < limit and both be
    admitted, so count can exceed the limit by the number of requests in
    flight. This is a best-effort limiter, not an admission-control
    guarantee; exact enforcement needs an atomic increment from the store.

Errors:
    StoreUnavailableError from the store propagates unchanged. It is never
    turned into an admit or a deny here.
"""

import time
from typing import Callable, Optional

from edge_kernels.config import RateLimitConfig
from edge_kernels.models.rate import RateCounter, RateDecision
from edge_kernels.ratelimit.store import KVStore


class WindowCounter:
    """
    Fixed-window rate counter.

    Limit and window defaults come from RateLimitConfig at construction;
    individual calls may override them.

    Attributes:
        store: Key-value collaborator holding one record per client
        config: Default limit and window

    Example:
        counter = WindowCounter(InMemoryKVStore(), RateLimitConfig())

        decision = await counter.check_and_increment("ip:10.0.0.1")
        if not decision.admitted:
            retry_after = decision.reset_in_seconds
    """

    def __init__(
        self,
        store: KVStore,
        config: Optional[RateLimitConfig] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """
        Initialize window counter.

        Args:
            store: Key-value store
            config: Default limit and window. None uses RateLimitConfig().
            clock: Source of the current time in seconds
        """
        self.store = store
        self.config = config or RateLimitConfig()
        self._clock = clock

    def _now(self, now: Optional[int]) -> int:
        return int(self._clock()) if now is None else now

    async def _load(self, client_key: str, window_seconds: int, now: int) -> RateCounter:
        """Read the current record, applying the lazy window reset."""
        raw = await self.store.get(client_key)

        # Unparseable records are treated like absent ones
        record = RateCounter.from_json(raw) if raw is not None else None

        if record is None or record.is_expired(now, window_seconds):
            return RateCounter(count=0, window_start=now)
        return record

    async def check_and_increment(
        self,
        client_key: str,
        limit: Optional[int] = None,
        window_seconds: Optional[int] = None,
        now: Optional[int] = None,
    ) -> RateDecision:
        """
        Admit or deny one request and count it if admitted.

        Args:
            client_key: Opaque client identifier (store key)
            limit: Requests per window (default from config)
            window_seconds: Window length (default from config)
            now: Current UNIX seconds (default from clock)

        Returns:
            RateDecision for this request

        Raises:
            StoreUnavailableError: If the store cannot be read or written
        """
        limit = self.config.limit if limit is None else limit
        window_seconds = (
            self.config.window_seconds if window_seconds is None else window_seconds
        )
        now = self._now(now)

        record = await self._load(client_key, window_seconds, now)

        if record.count >= limit:
            return RateDecision(
                admitted=False,
                count=record.count,
                window_start=record.window_start,
                limit=limit,
                window_seconds=window_seconds,
                now=now,
            )

        record = RateCounter(count=record.count + 1, window_start=record.window_start)
        await self.store.put(client_key, record.to_json(), expire_after=window_seconds)

        return RateDecision(
            admitted=True,
            count=record.count,
            window_start=record.window_start,
            limit=limit,
            window_seconds=window_seconds,
            now=now,
        )

    async def peek(
        self,
        client_key: str,
        window_seconds: Optional[int] = None,
        now: Optional[int] = None,
    ) -> RateCounter:
        """
        Read a client's counter without consuming quota.

        Applies the same window expiry as check_and_increment but never
        writes to the store.

        Args:
            client_key: Opaque client identifier
            window_seconds: Window length (default from config)
            now: Current UNIX seconds (default from clock)

        Returns:
            Current (possibly reset) counter
        """
        window_seconds = (
            self.config.window_seconds if window_seconds is None else window_seconds
        )
        return await self._load(client_key, window_seconds, self._now(now))
