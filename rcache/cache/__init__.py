"""
rcache - Cache Module

Provides the cache handle and the factory that builds verified handles.

Layout:
- factory.py: Single source of truth for handle creation
- client.py: The cache handle (get/set/delete/expire/flush)
- interface.py: Store capability and abstract cache interface
- backends/: Store backends (Redis client builder, in-process memory store)

Usage:
    from rcache.cache import create_cache

    cache = await create_cache("redis://localhost:6379")
    await cache.set("key", "value", ttl=3600)
    value = await cache.get("key")
"""

from .client import Cache
from .factory import (
    close_all_caches,
    create_cache,
    get_cache,
    list_cache_instances,
    reset_cache_factory,
)
from .interface import CacheInterface, StoreClient

__all__ = [
    # Factory functions
    "create_cache",
    "get_cache",
    "close_all_caches",
    "list_cache_instances",
    "reset_cache_factory",
    # Handle
    "Cache",
    # Interfaces
    "CacheInterface",
    "StoreClient",
]
