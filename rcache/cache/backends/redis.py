"""
rcache - Redis Store Backend

Builds the asyncio Redis client a cache handle runs on.

The client is created with decode_responses=False so reads return the exact
bytes held by the server; Cache.get() decodes, Cache.get_bytes() does not.

Requires: redis>=5.0 with asyncio support

Example:
    settings = parse_redis_url("redis://:secret@cache.local:6380/0")
    client = create_redis_client(settings)
    await client.ping()
"""

from __future__ import annotations

import logging

from ...config.schemas import ConnectionSettings

logger = logging.getLogger(__name__)

try:
    # redis-py asyncio client (v4.2+)
    from redis.asyncio import Redis
except ImportError as e:  # pragma: no cover
    raise ImportError(
        "Redis async client is required but not installed. "
        "Install with: pip install 'redis>=5.0.0' or add 'redis' to your dependencies."
    ) from e


def create_redis_client(
    settings: ConnectionSettings,
    max_connections: int = 10,
    socket_timeout: float = 5.0,
) -> Redis:
    """
    Create a Redis client for the given connection settings.

    The client connects lazily, on its first command.

    Args:
        settings: Resolved host, port, password, db and TLS flag
        max_connections: Connection pool size
        socket_timeout: Socket timeout in seconds

    Returns:
        redis.asyncio.Redis instance
    """
    logger.debug(
        "Creating Redis client for %s (db=%d, ssl=%s)",
        settings.address,
        settings.db,
        settings.ssl,
        extra={"address": settings.address, "db": settings.db, "ssl": settings.ssl},
    )
    return Redis(
        host=settings.host,
        port=settings.port,
        password=settings.password,
        db=settings.db,
        ssl=settings.ssl,
        decode_responses=False,
        max_connections=max_connections,
        socket_timeout=socket_timeout,
    )
