import logging
from datetime import timedelta
from typing import Optional, Tuple, Union

from pydantic import ValidationError

from .backends.base import CacheBackend
from .models import CachedItem, SessionData

logger = logging.getLogger('sessions.store')

DEFAULT_EXPIRES_IN = timedelta(days=3)

TTL = Union[int, float, timedelta]


def _to_ms(ttl: TTL) -> int:
    if isinstance(ttl, timedelta):
        return int(ttl.total_seconds() * 1000)
    return int(ttl * 1000)


class SessionStore:
    """
    Session records kept in one segment of a cache backend.

    The backend's own expiry is authoritative: the store never second-guesses the age of
    a record it gets back. Holds no state of its own besides the backend handle, so one
    instance can serve any number of concurrent requests.
    """

    def __init__(
        self,
        backend: CacheBackend,
        segment: str = "sessions",
        expires_in: TTL = DEFAULT_EXPIRES_IN,
    ):
        if not segment:
            raise ValueError("Session segment name must not be empty")
        self.backend = backend
        self.segment = segment
        self.expires_in_ms = _to_ms(expires_in)
        if self.expires_in_ms <= 0:
            raise ValueError("Default session TTL must be positive")

    async def get_cached(self, session_id: str) -> Optional[CachedItem]:
        return await self.backend.get(self.segment, session_id)

    async def get(self, session_id: str) -> Tuple[Optional[SessionData], bool]:
        """
        Look up a session record.

        Returns:
            `(record, True)` for a live session, `(None, False)` when the key is absent
            or has expired.
        Raises:
            BackendUnavailable: the cache could not be queried.
        """
        cached = await self.get_cached(session_id)
        if cached is None:
            logger.debug(f"Session {session_id} not found in segment '{self.segment}'")
            return None, False

        try:
            record = SessionData.model_validate(cached.item)
        except ValidationError as e:
            logger.error(f"Invalid session data format for session {session_id}: {e}")
            return None, False

        return record, True

    async def set(self, session_id: str, record: Union[SessionData, dict], ttl: TTL = 0) -> None:
        """Write `record` under `session_id`. A ttl of 0 means the store's default."""
        ttl_ms = _to_ms(ttl)
        if ttl_ms < 0:
            raise ValueError("Session TTL must not be negative")
        if ttl_ms == 0:
            ttl_ms = self.expires_in_ms

        if not isinstance(record, SessionData):
            record = SessionData.model_validate(record)
        # fields the caller never set are not written back as nulls
        payload = record.model_dump(exclude_unset=True)

        await self.backend.set(self.segment, session_id, payload, ttl_ms)
        logger.debug(f"Session {session_id} stored for {ttl_ms}ms")

    async def drop(self, session_id: str) -> None:
        await self.backend.drop(self.segment, session_id)
        logger.debug(f"Session {session_id} dropped")
