"""
rcache - Connection Resolution

Turns a connection source into ConnectionSettings.

A source is either empty (host and port come from the REDISHOST and REDISPORT
environment variables) or a URL of the form:

    redis://[user][:password@]host:port[/db]

Host and port are mandatory in a URL. The username is ignored; only the
password is used for AUTH. ``rediss://`` enables TLS.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from urllib.parse import unquote, urlsplit

from pydantic import ValidationError

from ..errors import ConfigurationError
from .schemas import DEFAULT_HOST, DEFAULT_PORT, ConnectionSettings

logger = logging.getLogger(__name__)

HOST_ENV = "REDISHOST"
PORT_ENV = "REDISPORT"

TLS_SCHEMES = frozenset({"rediss"})


def connection_from_env(
    environ: Mapping[str, str] | None = None,
    log: logging.Logger | logging.LoggerAdapter | None = None,
) -> ConnectionSettings:
    """
    Build connection settings from REDISHOST / REDISPORT.

    A missing host falls back to localhost; a missing or non-numeric port
    falls back to 6379.
    """
    log = log or logger
    env = os.environ if environ is None else environ

    host = env.get(HOST_ENV) or DEFAULT_HOST
    port = DEFAULT_PORT
    raw_port = env.get(PORT_ENV, "")
    try:
        port = int(raw_port)
    except ValueError:
        if raw_port:
            log.debug("Ignoring non-numeric %s=%r, using %d", PORT_ENV, raw_port, DEFAULT_PORT)

    try:
        return ConnectionSettings(host=host, port=port)
    except ValidationError as e:
        log.error("Invalid cache settings from environment: %s", e, extra={"host": host, "port": port})
        raise ConfigurationError(
            "Invalid cache settings in environment",
            details={"host": host, "port": port, "validation_errors": e.errors()},
        ) from e


def parse_redis_url(url: str) -> ConnectionSettings:
    """
    Parse a connection URL into ConnectionSettings.

    Raises:
        ConfigurationError: If the URL is malformed, has no host, or its
            port (or db path) is missing or non-numeric
    """
    try:
        parts = urlsplit(url)
    except ValueError as e:
        raise ConfigurationError(f"Malformed cache URL: {e}", details={"error": str(e)}) from e

    if not parts.scheme or not parts.netloc:
        raise ConfigurationError(
            "Cache URL must look like scheme://[:password@]host:port",
            details={"scheme": parts.scheme},
        )

    host = parts.hostname
    if not host:
        raise ConfigurationError("Cache URL has no host", details={"scheme": parts.scheme})

    try:
        port = parts.port
    except ValueError as e:
        raise ConfigurationError("Cache couldn't parse port", details={"host": host, "error": str(e)}) from e
    if port is None:
        raise ConfigurationError("Cache URL has no port", details={"host": host})

    password = unquote(parts.password) if parts.password else None

    db = 0
    path = parts.path.strip("/")
    if path:
        if not path.isdigit():
            raise ConfigurationError("Cache URL database must be numeric", details={"host": host, "db": path})
        db = int(path)

    try:
        return ConnectionSettings(
            host=host,
            port=port,
            password=password,
            db=db,
            ssl=parts.scheme.lower() in TLS_SCHEMES,
        )
    except ValidationError as e:
        raise ConfigurationError(
            "Invalid cache URL",
            details={"host": host, "port": port, "validation_errors": e.errors()},
        ) from e


def resolve_connection(
    source: str | None = None,
    environ: Mapping[str, str] | None = None,
    log: logging.Logger | logging.LoggerAdapter | None = None,
) -> ConnectionSettings:
    """
    Resolve a connection source into ConnectionSettings.

    Args:
        source: Connection URL, or None/"" to read REDISHOST and REDISPORT
        environ: Environment mapping (defaults to os.environ)
        log: Logger receiving resolution records (defaults to module logger)

    Returns:
        Validated ConnectionSettings

    Raises:
        ConfigurationError: If the URL cannot be parsed
    """
    log = log or logger

    if not source:
        settings = connection_from_env(environ, log)
        log.info(
            "Trying cache with defaults host=%s port=%d",
            settings.host,
            settings.port,
            extra={"host": settings.host, "port": settings.port, "source": "environment"},
        )
        return settings

    try:
        settings = parse_redis_url(source)
    except ConfigurationError as e:
        log.error("Cache configuration error: %s", e.message, extra={"error": e.message})
        raise

    log.info(
        "Trying cache with redis url host=%s port=%d",
        settings.host,
        settings.port,
        extra={"host": settings.host, "port": settings.port, "db": settings.db, "source": "url"},
    )
    return settings
