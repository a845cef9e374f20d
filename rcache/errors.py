"""
rcache - Core Error Types

Defines the exception hierarchy for the cache client.
All exceptions raised by rcache itself inherit from RCacheError.

Errors reported by the store client (redis.exceptions.RedisError and
subclasses) are not wrapped; they reach the caller unchanged.
"""

from enum import Enum
from typing import Any

from redis.exceptions import RedisError


class ErrorCode(str, Enum):
    """
    Standard error codes for cache errors.

    Used when errors are serialized for callers that prefer codes over types.
    """

    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    CONNECTION_FAILED = "CONNECTION_FAILED"
    CACHE_MISS = "CACHE_MISS"
    INVALID_EXPIRE_TIMEOUT = "INVALID_EXPIRE_TIMEOUT"
    CACHE_FAILURE = "CACHE_FAILURE"
    STORE_ERROR = "STORE_ERROR"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


class RCacheError(Exception):
    """Base exception for all rcache errors."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for structured responses."""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }


class ConfigurationError(RCacheError):
    """Raised when connection configuration cannot be resolved or is invalid."""


class CacheError(RCacheError):
    """Base exception for cache operation errors."""


class CacheConnectionError(CacheError):
    """Raised when the store fails the liveness probe."""

    def __init__(self, address: str, details: dict[str, Any] | None = None):
        message = f"Failed to connect to cache store at {address}"
        super().__init__(message, details)
        self.address = address


class KeyNotFoundError(CacheError):
    """Raised when a key has no value in the store."""

    def __init__(self, key: str, details: dict[str, Any] | None = None):
        message = f"no value for [{key}]"
        error_details = {"key": key}
        error_details.update(details or {})
        super().__init__(message, error_details)
        self.key = key


class UnconfirmedWriteError(KeyNotFoundError):
    """Raised when the store returns from a write without confirming it."""

    def __init__(self, key: str, reply: Any = None):
        super().__init__(key, {"reply": reply})
        self.message = "Not found"
        self.args = (self.message,)


class InvalidExpireTimeoutError(CacheError):
    """Raised when the store rejects the expiration given to a write."""

    def __init__(self, seconds: int, details: dict[str, Any] | None = None):
        message = f"Invalid expire timeout in seconds [{seconds}]"
        error_details: dict[str, Any] = {"seconds": seconds}
        error_details.update(details or {})
        super().__init__(message, error_details)
        self.seconds = seconds


def extract_error_code(error: Exception) -> ErrorCode:
    """
    Extract the appropriate ErrorCode from an exception.

    Args:
        error: Exception to categorize

    Returns:
        ErrorCode for the exception
    """
    if isinstance(error, ConfigurationError):
        return ErrorCode.CONFIGURATION_ERROR

    if isinstance(error, CacheConnectionError):
        return ErrorCode.CONNECTION_FAILED

    if isinstance(error, KeyNotFoundError):
        return ErrorCode.CACHE_MISS

    if isinstance(error, InvalidExpireTimeoutError):
        return ErrorCode.INVALID_EXPIRE_TIMEOUT

    if isinstance(error, CacheError):
        return ErrorCode.CACHE_FAILURE

    if isinstance(error, RedisError):
        return ErrorCode.STORE_ERROR

    return ErrorCode.UNKNOWN_ERROR


def make_error_response(error: Exception) -> dict[str, Any]:
    """
    Create a standardized error payload from an exception.

    Example:
        >>> make_error_response(KeyNotFoundError("user:1"))
        {
            "success": False,
            "error_code": "CACHE_MISS",
            "message": "no value for [user:1]",
            "details": {"key": "user:1"}
        }
    """
    details = error.details if isinstance(error, RCacheError) else {}
    return {
        "success": False,
        "error_code": extract_error_code(error).value,
        "message": str(error),
        "details": details,
    }
