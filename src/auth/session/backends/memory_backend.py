import copy
import logging
import time
from typing import Any, Callable, Dict, Optional, Tuple

from ..errors import BackendUnavailable
from ..models import CachedItem
from .base import CacheBackend

logger = logging.getLogger('sessions.backends.memory')


def _now_ms() -> int:
    return int(time.time() * 1000)


class MemoryBackend(CacheBackend):
    """
    Process-local cache backend.

    Sessions are lost on restart and are not shared between workers, so this is only
    meant for development and tests. `clock` returns the current time in milliseconds.
    """

    def __init__(self, clock: Callable[[], int] = _now_ms):
        self._clock = clock
        self._entries: Dict[str, Dict[str, Tuple[Any, int, int]]] = {}
        self._ready = False

    async def start(self) -> None:
        self._ready = True

    async def stop(self) -> None:
        self._ready = False
        self._entries.clear()

    def is_ready(self) -> bool:
        return self._ready

    def _ensure_ready(self, operation: str) -> None:
        if not self._ready:
            raise BackendUnavailable(f"Memory backend not started during {operation}", operation)

    async def get(self, segment: str, key: str) -> Optional[CachedItem]:
        self._ensure_ready("get")
        self.validate_key(segment, key)

        entry = self._entries.get(segment, {}).get(key)
        if entry is None:
            return None

        value, stored, ttl = entry
        remaining = stored + ttl - self._clock()
        if remaining <= 0:
            # expired
            self._entries[segment].pop(key, None)
            return None

        return CachedItem(item=copy.deepcopy(value), stored=stored, ttl=remaining)

    async def set(self, segment: str, key: str, value: Any, ttl_ms: int) -> None:
        self._ensure_ready("set")
        self.validate_key(segment, key)
        if ttl_ms <= 0:
            raise ValueError("ttl_ms must be a positive number of milliseconds")

        self._entries.setdefault(segment, {})[key] = (copy.deepcopy(value), self._clock(), ttl_ms)

    async def drop(self, segment: str, key: str) -> None:
        self._ensure_ready("drop")
        self.validate_key(segment, key)
        self._entries.get(segment, {}).pop(key, None)
