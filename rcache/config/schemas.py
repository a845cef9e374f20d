"""
rcache - Configuration Schemas

Defines typed configuration models using Pydantic for validation and type safety.
All configuration is validated before a cache handle is constructed.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_HOST = "localhost"
DEFAULT_PORT = 6379


class CacheBackend(str, Enum):
    """Supported store backends."""

    REDIS = "redis"
    MEMORY = "memory"  # In-process, for development and tests


class LogLevel(str, Enum):
    """Log levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class ConnectionSettings(BaseModel):
    """Parameters used to open a connection to the store."""

    host: str = Field(default=DEFAULT_HOST, description="Store host name")
    port: int = Field(default=DEFAULT_PORT, ge=1, le=65535, description="Store TCP port")
    password: str | None = Field(default=None, description="Password sent with AUTH (optional)")
    db: int = Field(default=0, ge=0, description="Logical database index")
    ssl: bool = Field(default=False, description="Connect over TLS (rediss://)")

    model_config = ConfigDict(frozen=True)

    @property
    def address(self) -> str:
        """host:port pair, as used in log records and errors."""
        return f"{self.host}:{self.port}"


class CacheConfig(BaseModel):
    """Cache configuration."""

    backend: CacheBackend = Field(default=CacheBackend.REDIS, description="Store backend to use")
    connection: ConnectionSettings = Field(default_factory=ConnectionSettings)
    default_ttl: int = Field(default=0, ge=0, description="TTL applied when set() gets none (0 = no expiry)")
    delete_expiry: int = Field(
        default=1,
        ge=1,
        description="Expiration in seconds applied by delete()/expire()",
    )

    # Redis client settings
    max_connections: int = Field(default=10, ge=1, description="Redis connection pool size")
    socket_timeout: float = Field(default=5.0, gt=0, description="Redis socket timeout in seconds")


class RCacheConfig(BaseModel):
    """Root configuration for rcache."""

    log_level: LogLevel = Field(default=LogLevel.INFO, description="Logging level")
    cache: CacheConfig = Field(default_factory=CacheConfig)

    model_config = ConfigDict(use_enum_values=True, validate_assignment=True)
