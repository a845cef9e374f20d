"""
rcache - Cache Client

The cache handle. Wraps one store client and exposes string and byte
get/set with per-key expiration, delete-by-expiry and database flush.

Known store conditions are mapped to rcache errors:
- missing or empty value      -> KeyNotFoundError
- rejected expiration on set  -> InvalidExpireTimeoutError
- write returned unconfirmed  -> UnconfirmedWriteError
Anything else raised by the store client propagates unchanged. Nothing is
retried.

Example:
    cache = Cache(Redis(host="localhost", port=6379))
    await cache.set("greeting", "hello", ttl=60)
    value = await cache.get("greeting")
"""

from __future__ import annotations

import logging
from datetime import timedelta
from types import TracebackType

from redis.exceptions import RedisError

from ..errors import InvalidExpireTimeoutError, KeyNotFoundError, UnconfirmedWriteError
from .interface import TTL, CacheInterface, StoreClient

logger = logging.getLogger(__name__)

# Fragment of the store's reply to a SET with a non-positive expiration
INVALID_EXPIRE_MARKER = "invalid expire time"


def ttl_seconds(ttl: TTL) -> int:
    """Whole seconds in a TTL, truncated toward zero."""
    if isinstance(ttl, timedelta):
        return int(ttl.total_seconds())
    return int(ttl)


class Cache(CacheInterface):
    """
    Cache handle over a store client.

    Notes:
    - Concurrent callers may share one handle; no locking is added here.
    - Values are written as given: str is encoded by the store client, bytes
      are stored untouched.
    - delete()/expire() set a short expiration rather than issuing DEL.
    """

    def __init__(
        self,
        store: StoreClient,
        log: logging.Logger | logging.LoggerAdapter | None = None,
        default_ttl: int = 0,
        delete_expiry: int = 1,
        name: str = "default",
    ) -> None:
        """
        Initialize the cache handle.

        Args:
            store: Store client (redis.asyncio.Redis or compatible)
            log: Logger for diagnostic records (defaults to module logger)
            default_ttl: TTL used when set() receives none (0 = no expiry)
            delete_expiry: Expiration in seconds applied by delete()
            name: Handle name, included in log records
        """
        if delete_expiry < 1:
            raise ValueError("delete_expiry must be at least 1 second")

        self.store = store
        self.name = name
        self.default_ttl = max(0, int(default_ttl))
        self.delete_expiry = int(delete_expiry)
        self._log = log or logger

    # ------------ Helpers ------------

    def _resolve_ttl(self, ttl: TTL | None) -> TTL | None:
        """None -> default_ttl (0 => no expiry); explicit values pass through to the store."""
        if ttl is None:
            return self.default_ttl or None
        return ttl

    async def _read(self, key: str) -> bytes | str:
        raw = await self.store.get(key)
        if raw is None or len(raw) == 0:
            raise KeyNotFoundError(key)
        return raw

    async def _write(self, key: str, value: bytes | str, ttl: TTL | None) -> None:
        ex = self._resolve_ttl(ttl)
        try:
            reply = await self.store.set(key, value, ex=ex)
        except RedisError as e:
            if ex is not None and INVALID_EXPIRE_MARKER in str(e).lower():
                seconds = ttl_seconds(ex)
                self._log.debug(
                    "Store rejected expiration for key '%s': %s",
                    key,
                    e,
                    extra={"cache_name": self.name, "key": key, "ttl": seconds},
                )
                raise InvalidExpireTimeoutError(seconds, details={"key": key, "error": str(e)}) from e
            raise

        if not reply:
            raise UnconfirmedWriteError(key, reply)

    # ------------ Core Interface ------------

    async def get(self, key: str) -> str:
        """
        Retrieve a string value; raises KeyNotFoundError when absent or empty.

        Bytes that are not valid UTF-8 decode with surrogateescape, so
        value.encode("utf-8", "surrogateescape") restores them exactly.
        """
        raw = await self._read(key)
        if isinstance(raw, bytes):
            return raw.decode("utf-8", errors="surrogateescape")
        return raw

    async def get_bytes(self, key: str) -> bytes:
        """Retrieve the stored bytes without decoding."""
        raw = await self._read(key)
        if isinstance(raw, str):
            return raw.encode("utf-8")
        return raw

    async def set(self, key: str, value: str, ttl: TTL | None = None) -> None:
        """Store a string value with expiration."""
        await self._write(key, value, ttl)

    async def set_bytes(self, key: str, value: bytes, ttl: TTL | None = None) -> None:
        """Store bytes with expiration; the payload is not transcoded."""
        await self._write(key, bytes(value), ttl)

    async def delete(self, key: str) -> bool:
        """Expire the key after delete_expiry seconds."""
        return bool(await self.store.expire(key, self.delete_expiry))

    async def expire(self, key: str) -> bool:
        """Alias for delete()."""
        return await self.delete(key)

    async def flush_db(self) -> None:
        """Remove all keys in the selected logical database."""
        await self.store.flushdb()
        self._log.info("Flushed cache database", extra={"cache_name": self.name})

    async def ping(self) -> bool:
        """Liveness probe; store errors propagate."""
        return bool(await self.store.ping())

    async def close(self) -> None:
        """Close the store client."""
        await self.store.aclose()
        self._log.info("Closed cache '%s'", self.name, extra={"cache_name": self.name})

    async def __aenter__(self) -> Cache:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, store={type(self.store).__name__})"

