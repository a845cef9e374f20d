"""
rcache - Observability Module

Structured logging setup for applications embedding rcache.
"""

from .logging_setup import JSONFormatter, configure_logging

__all__ = [
    "JSONFormatter",
    "configure_logging",
]
