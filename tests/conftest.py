"""
Test Configuration
==================

Pytest fixtures and test configuration for the edge kernels.
"""

import pytest


class FakeClock:
    """Manually advanced clock for TTL and window tests."""

    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class UnavailableStore:
    """Store whose every operation fails, simulating an outage."""

    async def get(self, key):
        from edge_kernels.ratelimit import StoreUnavailableError

        raise StoreUnavailableError("connection refused")

    async def put(self, key, value, expire_after):
        from edge_kernels.ratelimit import StoreUnavailableError

        raise StoreUnavailableError("connection refused")


@pytest.fixture
def clock():
    """Provide a controllable clock."""
    return FakeClock()


@pytest.fixture
def store(clock):
    """Provide an empty in-memory store driven by the fake clock."""
    from edge_kernels.ratelimit import InMemoryKVStore

    return InMemoryKVStore(clock=clock)


@pytest.fixture
def counter(store, clock):
    """Provide a WindowCounter with the default 10 requests / 60s."""
    from edge_kernels.config import RateLimitConfig
    from edge_kernels.ratelimit import WindowCounter

    return WindowCounter(store, RateLimitConfig(limit=10, window_seconds=60), clock=clock)


@pytest.fixture
def unavailable_store():
    """Provide a store that always fails."""
    return UnavailableStore()


@pytest.fixture
def sample_frame_hex():
    """Read Holding Registers request: device 1, start 0, count 10."""
    return "01030000000AC5CD"


def _make_client(monkeypatch, store):
    from fastapi.testclient import TestClient

    from edge_kernels import main

    monkeypatch.setattr(main, "_store", store)
    monkeypatch.setattr(main, "_counter", None)
    return TestClient(main.app)


@pytest.fixture
def client(monkeypatch):
    """Provide a TestClient backed by a fresh in-memory store."""
    from edge_kernels.ratelimit import InMemoryKVStore

    with _make_client(monkeypatch, InMemoryKVStore()) as test_client:
        yield test_client


@pytest.fixture
def broken_client(monkeypatch, unavailable_store):
    """Provide a TestClient whose rate limit store is down."""
    with _make_client(monkeypatch, unavailable_store) as test_client:
        yield test_client
