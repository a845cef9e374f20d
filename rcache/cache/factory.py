"""
rcache - Cache Factory

Canonical factory for creating verified cache handles.

Key points:
- A connection source is a URL, explicit ConnectionSettings, a full
  CacheConfig, or nothing (REDISHOST / REDISPORT from the environment)
- Every handle is probed with PING before it is returned; a handle that
  fails the probe is never registered
- Handles are kept in a named registry so the process shares one per name

Examples:
    from rcache.cache.factory import create_cache

    # Environment-configured (REDISHOST / REDISPORT, default localhost:6379)
    cache = await create_cache()

    # Explicit URL
    cache = await create_cache("redis://:secret@cache.local:6380", name="sessions")

    # In-process store (e.g., for tests)
    from rcache.config import CacheBackend, CacheConfig
    cache = await create_cache(CacheConfig(backend=CacheBackend.MEMORY), name="test")
"""

from __future__ import annotations

import logging

from ..config import CacheBackend, CacheConfig, ConnectionSettings, get_config, resolve_connection
from ..errors import CacheConnectionError, ConfigurationError
from .backends.memory import MemoryStore  # Import memory eagerly (always available)
from .client import Cache
from .interface import StoreClient

logger = logging.getLogger(__name__)

# Global cache handle registry
_cache_instances: dict[str, Cache] = {}
# Connection settings each registered handle was created with
_cache_connections: dict[str, ConnectionSettings] = {}

CacheSource = str | ConnectionSettings | CacheConfig | None


def _environment_tuning(log: logging.Logger | logging.LoggerAdapter) -> CacheConfig:
    """Backend and tuning settings to pair with an explicit connection source."""
    try:
        return get_config().cache
    except ConfigurationError as e:
        log.warning(
            "Ignoring invalid cache environment for explicit source: %s",
            e.message,
            extra={"error": e.message},
        )
        return CacheConfig()


def _resolve_config(
    source: CacheSource,
    log: logging.Logger | logging.LoggerAdapter,
) -> CacheConfig:
    """Turn a connection source into a full CacheConfig."""
    if isinstance(source, CacheConfig):
        return source

    if isinstance(source, ConnectionSettings):
        return _environment_tuning(log).model_copy(update={"connection": source})

    if source:
        settings = resolve_connection(source, log=log)
        return _environment_tuning(log).model_copy(update={"connection": settings})

    # REDISHOST / REDISPORT are re-read on every call; REDIS_DB comes from the loaded config
    config = get_config().cache
    settings = resolve_connection(None, log=log).model_copy(update={"db": config.connection.db})
    return config.model_copy(update={"connection": settings})


def _create_store(config: CacheConfig) -> StoreClient:
    """Internal helper to construct the store client for a backend."""
    if config.backend == CacheBackend.MEMORY:
        return MemoryStore()

    if config.backend == CacheBackend.REDIS:
        # Lazy import to keep the redis connection machinery out of memory-only use
        from .backends.redis import create_redis_client

        return create_redis_client(
            config.connection,
            max_connections=config.max_connections,
            socket_timeout=config.socket_timeout,
        )

    raise ConfigurationError(
        f"Unknown cache backend: {config.backend}",
        details={"backend": str(config.backend), "supported": ["redis", "memory"]},
    )


async def _probe(store: StoreClient, address: str, log: logging.Logger | logging.LoggerAdapter) -> None:
    """Issue the liveness probe; close the store and raise if it fails."""
    try:
        pong = await store.ping()
    except Exception as e:
        log.error("Cache ping failed for %s: %s", address, e, extra={"address": address, "error": str(e)})
        await _close_quietly(store, log)
        raise CacheConnectionError(address, details={"error": str(e)}) from e

    if not pong:
        log.error("Cache ping unanswered for %s", address, extra={"address": address})
        await _close_quietly(store, log)
        raise CacheConnectionError(address, details={"reply": pong})


async def _close_quietly(store: StoreClient, log: logging.Logger | logging.LoggerAdapter) -> None:
    try:
        await store.aclose()
    except Exception as e:
        log.warning("Error closing store after failed probe: %s", e, extra={"error": str(e)})


async def create_cache(
    source: CacheSource = None,
    *,
    name: str = "default",
    store: StoreClient | None = None,
    log: logging.Logger | logging.LoggerAdapter | None = None,
) -> Cache:
    """
    Create a verified cache handle.

    Args:
        source: Connection URL, ConnectionSettings, CacheConfig, or None
            to read REDISHOST / REDISPORT
        name: Registry name. A handle already registered under this name is
            returned when the source resolves to the same connection settings
        store: Store client to use instead of building one from the config
        log: Logger for diagnostic records (defaults to module logger)

    Returns:
        Cache handle that answered PING

    Raises:
        ConfigurationError: If the source cannot be resolved, or the name is
            already registered with different connection settings
        CacheConnectionError: If the store does not answer the liveness probe
    """
    log = log or logger

    config = _resolve_config(source, log)
    address = config.connection.address

    if name in _cache_instances:
        registered = _cache_connections[name]
        if registered != config.connection:
            log.error(
                "Cache '%s' is already registered for %s, refusing %s",
                name,
                registered.address,
                address,
                extra={"cache_name": name, "registered": registered.address, "address": address},
            )
            raise ConfigurationError(
                f"Cache '{name}' is already registered with different connection settings",
                details={"cache_name": name, "registered": registered.address, "requested": address},
            )
        log.debug("Returning existing cache instance: %s", name)
        return _cache_instances[name]

    if store is None:
        store = _create_store(config)

    await _probe(store, address, log)

    cache = Cache(
        store,
        log=log,
        default_ttl=config.default_ttl,
        delete_expiry=config.delete_expiry,
        name=name,
    )
    _cache_instances[name] = cache
    _cache_connections[name] = config.connection

    log.info(
        "Cache '%s' running at %s",
        name,
        address,
        extra={"cache_name": name, "address": address, "backend": config.backend.value},
    )
    return cache


async def get_cache(name: str = "default") -> Cache:
    """
    Get an existing cache handle by name.

    If the handle doesn't exist, it is created from the environment.

    Args:
        name: Cache instance name

    Returns:
        Cache handle
    """
    if name not in _cache_instances:
        logger.debug("Cache instance '%s' not found, creating new instance", name)
        return await create_cache(name=name)

    return _cache_instances[name]


async def close_all_caches() -> None:
    """
    Close all cache handles and release their connections.

    Should be called during graceful shutdown.
    """
    if not _cache_instances:
        logger.debug("No cache instances to close")
        return

    logger.info("Closing %d cache instance(s)...", len(_cache_instances))

    for name, cache in list(_cache_instances.items()):
        try:
            await cache.close()
        except Exception as e:
            logger.error(
                "Error closing cache instance '%s': %s",
                name,
                e,
                extra={"cache_name": name, "error": str(e)},
                exc_info=True,
            )

    _cache_instances.clear()
    _cache_connections.clear()
    logger.info("All cache instances closed")


def reset_cache_factory() -> None:
    """
    Reset the cache factory by clearing all handle references.

    Does NOT close the handles - use close_all_caches() for proper cleanup.

    Warning: Only use this in testing contexts.
    """
    count = len(_cache_instances)
    _cache_instances.clear()
    _cache_connections.clear()
    logger.debug("Reset cache factory, cleared %d instance reference(s)", count)


def list_cache_instances() -> list[str]:
    """
    List all registered cache instance names.

    Returns:
        List of cache instance names
    """
    return list(_cache_instances.keys())
