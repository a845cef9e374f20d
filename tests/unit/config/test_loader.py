"""
rcache — Configuration Loader Tests

Tests environment loading, .env support, singleton behavior and validation.
"""

from pathlib import Path

import pytest

from rcache.config import CacheBackend, get_config, load_config, reload_config
from rcache.errors import ConfigurationError


def test_defaults_without_environment() -> None:
    """Test that an empty environment yields the documented defaults."""
    config = load_config(reload=True)

    assert config.cache.backend == CacheBackend.REDIS
    assert config.cache.connection.host == "localhost"
    assert config.cache.connection.port == 6379
    assert config.cache.connection.password is None
    assert config.cache.default_ttl == 0
    assert config.cache.delete_expiry == 1


def test_reads_cache_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Test that every supported variable is applied."""
    monkeypatch.setenv("REDISHOST", "cache.internal")
    monkeypatch.setenv("REDISPORT", "6385")
    monkeypatch.setenv("REDIS_DB", "3")
    monkeypatch.setenv("CACHE_BACKEND", "MEMORY")
    monkeypatch.setenv("CACHE_DEFAULT_TTL", "120")
    monkeypatch.setenv("CACHE_DELETE_EXPIRY", "2")
    monkeypatch.setenv("REDIS_MAX_CONNECTIONS", "4")
    monkeypatch.setenv("REDIS_SOCKET_TIMEOUT", "0.5")
    monkeypatch.setenv("LOG_LEVEL", "warning")

    config = load_config(reload=True)

    assert config.log_level == "WARNING"
    assert config.cache.backend == CacheBackend.MEMORY
    assert config.cache.connection.host == "cache.internal"
    assert config.cache.connection.port == 6385
    assert config.cache.connection.db == 3
    assert config.cache.default_ttl == 120
    assert config.cache.delete_expiry == 2
    assert config.cache.max_connections == 4
    assert config.cache.socket_timeout == 0.5


def test_get_config_is_cached(monkeypatch: pytest.MonkeyPatch) -> None:
    """Test that get_config returns the loaded singleton until reload."""
    first = get_config()
    monkeypatch.setenv("REDISHOST", "changed")

    assert get_config() is first
    assert reload_config().cache.connection.host == "changed"


def test_env_file_is_loaded(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Test that variables from a .env file are honoured."""
    env_file = tmp_path / "cache.env"
    env_file.write_text("REDISHOST=dotenv-host\nREDISPORT=6399\n")
    # load_dotenv writes into os.environ; registering the variables first
    # makes monkeypatch remove them again on teardown
    monkeypatch.setenv("REDISHOST", "overridden")
    monkeypatch.setenv("REDISPORT", "1")

    config = load_config(env_file=str(env_file), reload=True)

    assert config.cache.connection.host == "dotenv-host"
    assert config.cache.connection.port == 6399


def test_non_numeric_ttl_fails(monkeypatch: pytest.MonkeyPatch) -> None:
    """Test that numeric settings reject garbage."""
    monkeypatch.setenv("CACHE_DEFAULT_TTL", "soon")

    with pytest.raises(ConfigurationError, match="Non-numeric"):
        load_config(reload=True)


def test_unknown_backend_fails(monkeypatch: pytest.MonkeyPatch) -> None:
    """Test that validation errors surface as ConfigurationError."""
    monkeypatch.setenv("CACHE_BACKEND", "memcached")

    with pytest.raises(ConfigurationError, match="validation failed") as exc_info:
        load_config(reload=True)

    assert exc_info.value.details["validation_errors"]


def test_negative_default_ttl_fails(monkeypatch: pytest.MonkeyPatch) -> None:
    """Test that the TTL bound is enforced."""
    monkeypatch.setenv("CACHE_DEFAULT_TTL", "-5")

    with pytest.raises(ConfigurationError):
        load_config(reload=True)
