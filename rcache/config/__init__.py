"""
rcache - Configuration Module

Provides typed configuration loading, validation and connection resolution.
"""

from .connection import connection_from_env, parse_redis_url, resolve_connection
from .loader import get_config, load_config, reload_config, reset_config
from .schemas import (
    DEFAULT_HOST,
    DEFAULT_PORT,
    CacheBackend,
    CacheConfig,
    ConnectionSettings,
    LogLevel,
    RCacheConfig,
)

__all__ = [
    # Loader functions
    "load_config",
    "get_config",
    "reload_config",
    "reset_config",
    # Connection resolution
    "resolve_connection",
    "parse_redis_url",
    "connection_from_env",
    # Main config
    "RCacheConfig",
    # Enums
    "CacheBackend",
    "LogLevel",
    # Config sections
    "CacheConfig",
    "ConnectionSettings",
    # Defaults
    "DEFAULT_HOST",
    "DEFAULT_PORT",
]
