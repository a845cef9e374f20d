"""
rcache - Memory Store Backend

In-process store speaking the same commands the cache handle sends to Redis
(PING, GET, SET with EX, EXPIRE, FLUSHDB). Suitable for development and tests.

Behaviour follows the Redis server where the cache relies on it:
- values are kept as bytes (str is encoded as UTF-8)
- SET with a non-positive EX fails with "invalid expire time"
- EXPIRE with a non-positive time removes the key at once
- expired keys are dropped lazily, on access
"""

import asyncio
import logging
from datetime import timedelta
from time import monotonic
from typing import Any

from redis.exceptions import ConnectionError as StoreConnectionError
from redis.exceptions import ResponseError

logger = logging.getLogger(__name__)


def _seconds(value: int | timedelta) -> int:
    if isinstance(value, timedelta):
        return int(value.total_seconds())
    return int(value)


class MemoryStore:
    """
    In-memory store with per-key expiration.

    Features:
    - Per-key TTL support
    - Safe for concurrent coroutines (asyncio lock)
    - No eviction; entries live until they expire or the database is flushed
    """

    def __init__(self) -> None:
        # Storage: key -> (value, expiry_time)
        self._data: dict[str, tuple[bytes, float | None]] = {}
        self._lock = asyncio.Lock()
        self._closed = False

    @staticmethod
    def _is_expired(expiry: float | None) -> bool:
        """Check if entry is expired."""
        if expiry is None:
            return False
        return monotonic() >= expiry

    def _live_entry(self, key: str) -> tuple[bytes, float | None] | None:
        """Return the entry for key, dropping it first if it has expired. Caller holds the lock."""
        entry = self._data.get(key)
        if entry is None:
            return None
        if self._is_expired(entry[1]):
            del self._data[key]
            return None
        return entry

    async def ping(self, **kwargs: Any) -> bool:
        """Always answers while the store is open."""
        if self._closed:
            raise StoreConnectionError("Memory store is closed")
        return True

    async def get(self, name: str) -> bytes | None:
        """Retrieve the raw value of a key."""
        async with self._lock:
            entry = self._live_entry(name)
            return None if entry is None else entry[0]

    async def set(self, name: str, value: bytes | str, ex: int | timedelta | None = None, **kwargs: Any) -> bool:
        """Store a value, optionally expiring after ex seconds."""
        expiry = None
        if ex is not None:
            seconds = _seconds(ex)
            if seconds <= 0:
                raise ResponseError("invalid expire time in 'set' command")
            expiry = monotonic() + seconds

        payload = value.encode("utf-8") if isinstance(value, str) else bytes(value)
        async with self._lock:
            self._data[name] = (payload, expiry)
        return True

    async def expire(self, name: str, time: int | timedelta, **kwargs: Any) -> bool:
        """Set a key's expiration; True if the key existed."""
        seconds = _seconds(time)
        async with self._lock:
            entry = self._live_entry(name)
            if entry is None:
                return False
            if seconds <= 0:
                del self._data[name]
            else:
                self._data[name] = (entry[0], monotonic() + seconds)
            return True

    async def flushdb(self, asynchronous: bool = False, **kwargs: Any) -> bool:
        """Remove every key."""
        async with self._lock:
            count = len(self._data)
            self._data.clear()
        logger.debug("Flushed %d key(s) from memory store", count)
        return True

    async def aclose(self) -> None:
        """Drop all data and refuse further pings."""
        async with self._lock:
            self._data.clear()
        self._closed = True

    def __len__(self) -> int:
        return sum(1 for _, expiry in self._data.values() if not self._is_expired(expiry))
