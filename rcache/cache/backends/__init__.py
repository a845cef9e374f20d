"""
rcache - Store Backends

Exports available store backends.

The Redis client builder is lazy-loaded via factory.py to avoid import overhead.
"""

from .memory import MemoryStore

__all__ = [
    "MemoryStore",
]
