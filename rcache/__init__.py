"""
rcache — Redis-backed key-value cache

Minimal cache client with string and byte payloads, per-key expiration,
delete-by-expiry and database flush, over an asyncio Redis client.
"""

__version__ = "1.0.0"

from .cache import Cache, CacheInterface, StoreClient, close_all_caches, create_cache, get_cache
from .config import CacheBackend, CacheConfig, ConnectionSettings, resolve_connection
from .errors import (
    CacheConnectionError,
    CacheError,
    ConfigurationError,
    InvalidExpireTimeoutError,
    KeyNotFoundError,
    RCacheError,
    UnconfirmedWriteError,
)

__all__ = [
    "__version__",
    # Handle and factory
    "Cache",
    "CacheInterface",
    "StoreClient",
    "create_cache",
    "get_cache",
    "close_all_caches",
    # Configuration
    "CacheBackend",
    "CacheConfig",
    "ConnectionSettings",
    "resolve_connection",
    # Errors
    "RCacheError",
    "ConfigurationError",
    "CacheError",
    "CacheConnectionError",
    "KeyNotFoundError",
    "UnconfirmedWriteError",
    "InvalidExpireTimeoutError",
]
