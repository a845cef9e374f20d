"""
rcache - Cache Interface

Defines the store capability the cache client is built on, and the abstract
interface the cache client exposes to callers.
"""

from abc import ABC, abstractmethod
from datetime import timedelta
from typing import Any, Protocol, runtime_checkable

TTL = int | timedelta


@runtime_checkable
class StoreClient(Protocol):
    """
    Minimal asynchronous store client.

    redis.asyncio.Redis satisfies this protocol as-is; MemoryStore implements
    it in-process.
    """

    async def ping(self, **kwargs: Any) -> Any: ...

    async def get(self, name: str) -> bytes | str | None: ...

    async def set(self, name: str, value: bytes | str, ex: TTL | None = None, **kwargs: Any) -> Any: ...

    async def expire(self, name: str, time: TTL, **kwargs: Any) -> Any: ...

    async def flushdb(self, asynchronous: bool = False, **kwargs: Any) -> Any: ...

    async def aclose(self) -> None: ...


class CacheInterface(ABC):
    """
    Abstract base class for cache handles.

    A handle owns one store client and translates cache operations into
    store commands, mapping a small set of store conditions to rcache errors.
    """

    @abstractmethod
    async def get(self, key: str) -> str:
        """
        Retrieve a string value.

        Args:
            key: Cache key

        Returns:
            Stored value decoded as UTF-8

        Raises:
            KeyNotFoundError: If the key has no value
        """
        pass

    @abstractmethod
    async def get_bytes(self, key: str) -> bytes:
        """
        Retrieve a value as the raw bytes held by the store.

        Raises:
            KeyNotFoundError: If the key has no value
        """
        pass

    @abstractmethod
    async def set(self, key: str, value: str, ttl: TTL | None = None) -> None:
        """
        Store a string value.

        Args:
            key: Cache key
            value: Value to store
            ttl: Time-to-live in seconds or as timedelta (None = handle default)

        Raises:
            InvalidExpireTimeoutError: If the store rejects the expiration
            UnconfirmedWriteError: If the store did not confirm the write
        """
        pass

    @abstractmethod
    async def set_bytes(self, key: str, value: bytes, ttl: TTL | None = None) -> None:
        """Store raw bytes without any transcoding. Same errors as set()."""
        pass

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """
        Remove a key by giving it a very short expiration.

        Returns:
            True if the key existed, False otherwise
        """
        pass

    @abstractmethod
    async def expire(self, key: str) -> bool:
        """Alias for delete()."""
        pass

    @abstractmethod
    async def flush_db(self) -> None:
        """Remove every key in the selected logical database."""
        pass

    @abstractmethod
    async def ping(self) -> bool:
        """Round-trip to the store; True when it answered."""
        pass

    @abstractmethod
    async def close(self) -> None:
        """
        Close the store client and release its connections.

        Should be called during graceful shutdown.
        """
        pass
