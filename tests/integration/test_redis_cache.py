"""
rcache — Redis Cache Integration Tests

Runs the cache handle against a live Redis server.
Requires Redis server running on localhost:6379 (or TEST_REDIS_URL env var).
"""

import asyncio
from collections.abc import AsyncGenerator

import pytest

from rcache.cache.backends.redis import create_redis_client
from rcache.cache.client import Cache
from rcache.config import parse_redis_url
from rcache.errors import InvalidExpireTimeoutError, KeyNotFoundError

# Check if Redis is available
try:
    import socket

    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.settimeout(1)
    redis_available = sock.connect_ex(("localhost", 6379)) == 0
    sock.close()
except OSError:
    redis_available = False

pytestmark = pytest.mark.skipif(not redis_available, reason="Redis server not available")


class TestRedisCache:
    """Test suite for Cache over redis.asyncio."""

    @pytest.fixture
    async def cache(self, test_redis_url: str) -> AsyncGenerator[Cache, None]:
        """Create a handle on the isolated test database."""
        cache = Cache(create_redis_client(parse_redis_url(test_redis_url)), name="redis-it")
        await cache.flush_db()
        yield cache
        await cache.flush_db()
        await cache.close()

    async def test_ping(self, cache: Cache) -> None:
        """Test the liveness probe against the server."""
        assert await cache.ping() is True

    async def test_set_and_get(self, cache: Cache) -> None:
        """Test a string round trip."""
        await cache.set("key1", "value1", ttl=60)

        assert await cache.get("key1") == "value1"

    async def test_bytes_round_trip(self, cache: Cache) -> None:
        """Test that non-UTF-8 bytes survive the server unchanged."""
        payload = b"\x00\xff\xfe binary \x80"

        await cache.set_bytes("blob", payload, ttl=60)

        assert await cache.get_bytes("blob") == payload

    async def test_get_missing_key(self, cache: Cache) -> None:
        """Test that a key never set is not found."""
        with pytest.raises(KeyNotFoundError):
            await cache.get("nonexistent")

    @pytest.mark.parametrize("ttl", [0, -1])
    async def test_server_rejects_ttl(self, cache: Cache, ttl: int) -> None:
        """Test that the server's invalid-expire reply is mapped."""
        with pytest.raises(InvalidExpireTimeoutError) as exc_info:
            await cache.set("k", "v", ttl=ttl)

        assert exc_info.value.seconds == ttl

    async def test_delete_expires_key(self, cache: Cache, redis_client) -> None:
        """Test that delete leaves a short TTL and the key disappears."""
        await cache.set("k", "v", ttl=60)

        assert await cache.delete("k") is True
        assert 0 < await redis_client.ttl("k") <= cache.delete_expiry

        await asyncio.sleep(cache.delete_expiry + 0.2)
        with pytest.raises(KeyNotFoundError):
            await cache.get("k")

    async def test_ttl_expiration(self, cache: Cache) -> None:
        """Test that entries expire after TTL."""
        await cache.set("k", "v", ttl=1)
        assert await cache.get("k") == "v"

        await asyncio.sleep(1.2)

        with pytest.raises(KeyNotFoundError):
            await cache.get("k")

    async def test_flush_db(self, cache: Cache) -> None:
        """Test that flush removes previously set keys."""
        for i in range(5):
            await cache.set(f"key{i}", f"value{i}", ttl=60)

        await cache.flush_db()

        for i in range(5):
            with pytest.raises(KeyNotFoundError):
                await cache.get(f"key{i}")
