from abc import ABC, abstractmethod
from typing import Any, Optional

from ..models import CachedItem


class CacheBackend(ABC):
    """
    Key-value store with per-key expiry, partitioned into named segments.

    Implementations raise `BackendUnavailable` for any failure to talk to the
    underlying store. A missing or expired key is reported as `None`, never as an error.
    """

    @abstractmethod
    async def start(self) -> None:
        ...

    @abstractmethod
    async def stop(self) -> None:
        ...

    @abstractmethod
    def is_ready(self) -> bool:
        ...

    @abstractmethod
    async def get(self, segment: str, key: str) -> Optional[CachedItem]:
        ...

    @abstractmethod
    async def set(self, segment: str, key: str, value: Any, ttl_ms: int) -> None:
        ...

    @abstractmethod
    async def drop(self, segment: str, key: str) -> None:
        ...

    @staticmethod
    def validate_key(segment: str, key: str) -> None:
        if not isinstance(segment, str) or not segment:
            raise ValueError("Invalid segment name")
        if not isinstance(key, str) or not key:
            raise ValueError("Invalid key")
