"""
rcache - Configuration Loader

Loads and validates configuration from environment variables and .env files.
Provides a singleton configuration instance for the process.
"""

import logging
import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import ValidationError

from ..errors import ConfigurationError
from .connection import connection_from_env
from .schemas import RCacheConfig

logger = logging.getLogger(__name__)

_config_instance: RCacheConfig | None = None


def load_config(
    env_file: str | None = None,
    reload: bool = False,
) -> RCacheConfig:
    """
    Load configuration from environment variables and .env file.

    Args:
        env_file: Path to .env file (default: .env in the working directory)
        reload: Force reload even if config already loaded

    Returns:
        Validated RCacheConfig instance

    Raises:
        ConfigurationError: If configuration is invalid
    """
    global _config_instance

    if _config_instance is not None and not reload:
        return _config_instance

    if env_file:
        env_path = Path(env_file)
    else:
        env_path = Path.cwd() / ".env"

    if env_path.exists():
        logger.info(f"Loading environment from {env_path}")
        try:
            load_dotenv(env_path, override=True)
        except Exception as e:
            logger.error(
                f"Failed to load .env file from {env_path}: {e}",
                extra={"path": str(env_path), "error": str(e)},
                exc_info=True,
            )
            raise ConfigurationError(
                f"Failed to load environment file: {e}",
                details={"path": str(env_path), "error": str(e)},
            ) from e
    else:
        logger.debug("No .env file found, using environment variables only")

    try:
        connection = connection_from_env().model_dump()
        connection["db"] = int(os.getenv("REDIS_DB", "0"))
        config_dict = {
            "log_level": os.getenv("LOG_LEVEL", "INFO").upper(),
            "cache": {
                "backend": os.getenv("CACHE_BACKEND", "redis").lower(),
                "connection": connection,
                "default_ttl": int(os.getenv("CACHE_DEFAULT_TTL", "0")),
                "delete_expiry": int(os.getenv("CACHE_DELETE_EXPIRY", "1")),
                "max_connections": int(os.getenv("REDIS_MAX_CONNECTIONS", "10")),
                "socket_timeout": float(os.getenv("REDIS_SOCKET_TIMEOUT", "5")),
            },
        }
    except ValueError as e:
        logger.error(f"Non-numeric value in cache environment: {e}", extra={"error": str(e)})
        raise ConfigurationError(
            f"Non-numeric value in cache environment: {e}",
            details={"error": str(e)},
        ) from e

    try:
        _config_instance = RCacheConfig(**config_dict)  # type: ignore[arg-type]
        logger.info(
            "Configuration loaded successfully (backend: %s)",
            _config_instance.cache.backend.value,
            extra={"cache_backend": _config_instance.cache.backend.value},
        )
        return _config_instance
    except ValidationError as e:
        logger.error(
            f"Configuration validation failed: {e}",
            extra={"validation_errors": e.errors(), "config_dict_keys": list(config_dict.keys())},
            exc_info=True,
        )
        raise ConfigurationError(
            "Configuration validation failed. Check your environment variables and configuration.",
            details={"validation_errors": e.errors()},
        ) from e


def get_config() -> RCacheConfig:
    """
    Get the current configuration instance, loading it on first access.

    Returns:
        Current RCacheConfig instance
    """
    if _config_instance is None:
        return load_config()

    return _config_instance


def reload_config(env_file: str | None = None) -> RCacheConfig:
    """
    Force reload configuration.

    Args:
        env_file: Optional path to .env file

    Returns:
        Reloaded RCacheConfig instance
    """
    return load_config(env_file=env_file, reload=True)


def reset_config() -> None:
    """
    Drop the loaded configuration so the next access reads the environment again.

    Warning: Only use this in testing contexts.
    """
    global _config_instance
    _config_instance = None
