"""Cache backends the session store can sit on."""

from .base import CacheBackend
from .memory_backend import MemoryBackend
from .redis_backend import RedisBackend

__all__ = [
    "CacheBackend",
    "MemoryBackend",
    "RedisBackend",
]
