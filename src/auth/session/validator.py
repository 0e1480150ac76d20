import logging
from typing import Callable, Optional

from .codec import CookieCodec
from .models import Anonymous, AuthOutcome, Authenticated, Invalid, SessionData
from .store import SessionStore

logger = logging.getLogger('sessions.validator')


class SessionValidator:
    """
    Decides what an incoming session cookie is worth.

    A valid signature is necessary but not sufficient: the session must also still be
    present in the store, which is what lets the server revoke sessions.
    """

    def __init__(
        self,
        store: SessionStore,
        codec: CookieCodec,
        verify_session: Optional[Callable[[SessionData], bool]] = None,
    ):
        self.store = store
        self.codec = codec
        self._verify_session = verify_session

    def verify_session(self, record: SessionData) -> bool:
        """If the session exists, it is valid unless a custom check says otherwise"""
        if self._verify_session is None:
            return True
        return self._verify_session(record)

    async def validate(self, cookie_value: Optional[str]) -> AuthOutcome:
        """
        Resolve a raw cookie value to an outcome.

        Raises:
            BackendUnavailable: the store could not be queried. Whether that means
                "deny" or "let through as anonymous" is up to the caller.
        """
        if not cookie_value:
            return Anonymous()

        session_id = self.codec.decode(cookie_value)
        if session_id is None:
            logger.debug("Session cookie failed verification")
            return Invalid(reason="cookie_invalid")

        record, found = await self.store.get(session_id)
        if not found:
            logger.debug(f"Session {session_id} is not live")
            return Invalid(reason="session_not_found")

        if not self.verify_session(record):
            logger.info(f"Session {session_id} rejected by custom verification")
            return Invalid(reason="session_rejected")

        return Authenticated(session_id=session_id, record=record)
