"""
rcache — Test Configuration and Shared Fixtures

Provides pytest configuration and shared fixtures for unit and integration tests.
"""

import os
import socket
from collections.abc import AsyncGenerator, Generator
from pathlib import Path

import pytest
import pytest_asyncio
from redis.asyncio import Redis

from rcache.cache.backends.memory import MemoryStore
from rcache.cache.client import Cache

# Set test environment
os.environ["LOG_LEVEL"] = "DEBUG"

CACHE_ENV_VARS = (
    "REDISHOST",
    "REDISPORT",
    "REDIS_DB",
    "REDIS_MAX_CONNECTIONS",
    "REDIS_SOCKET_TIMEOUT",
    "CACHE_BACKEND",
    "CACHE_DEFAULT_TTL",
    "CACHE_DELETE_EXPIRY",
)


# Redis availability checker
def is_redis_available() -> bool:
    """Check if a Redis server answers on localhost:6379."""
    try:
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        sock.settimeout(1)
        result = sock.connect_ex(("localhost", 6379))
        sock.close()
        return result == 0
    except OSError:
        return False


# Skip marker for Redis tests
redis_available = pytest.mark.skipif(not is_redis_available(), reason="Redis server not available")


class FakeClock:
    """Stand-in for time.monotonic() in the memory store."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Clear cache environment variables and keep stray .env files out of reach."""
    for var in CACHE_ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture(autouse=True)
def reset_global_state() -> Generator[None, None, None]:
    """Reset config and cache registry after each test to prevent state leakage."""
    yield
    from rcache.cache.factory import reset_cache_factory
    from rcache.config.loader import reset_config

    reset_cache_factory()
    reset_config()


@pytest.fixture
def clock(monkeypatch: pytest.MonkeyPatch) -> FakeClock:
    """Controllable clock for memory store expirations."""
    fake = FakeClock()
    monkeypatch.setattr("rcache.cache.backends.memory.monotonic", fake)
    return fake


@pytest.fixture
def memory_store() -> MemoryStore:
    """Fresh in-process store."""
    return MemoryStore()


@pytest.fixture
def cache(memory_store: MemoryStore) -> Cache:
    """Cache handle over a fresh memory store."""
    return Cache(memory_store, name="test")


@pytest.fixture
def test_redis_url() -> str:
    """Get Redis URL for testing (database 15 for isolation)."""
    return os.environ.get("TEST_REDIS_URL", "redis://localhost:6379/15")


@pytest_asyncio.fixture
async def redis_client(test_redis_url: str) -> AsyncGenerator[Redis, None]:
    """
    Create a raw Redis client for testing.

    Automatically skips tests if Redis is not available.
    Clears the test database before and after each test.
    """
    client: Redis = Redis.from_url(test_redis_url, decode_responses=False)

    try:
        await client.ping()
    except Exception as e:
        await client.aclose()
        pytest.skip(f"Redis not available for testing: {e}")

    await client.flushdb()

    yield client

    try:
        await client.flushdb()
    finally:
        await client.aclose()
