import logging
import secrets
from typing import Optional, Union

from .codec import CookieCodec
from .errors import BackendError, CreationFailed, DestructionFailed
from .models import ClearCookieDirective, CookieParameters, SessionData, SetCookieDirective
from .store import SessionStore, TTL

logger = logging.getLogger('sessions.manager')

SESSION_ID_BYTES = 16


def generate_session_id() -> str:
    # Not checked against existing keys; 128 random bits make a clash negligible.
    return secrets.token_hex(SESSION_ID_BYTES)


class SessionManager:
    """Creates and destroys sessions and tells the caller what to do with the cookie."""

    def __init__(
        self,
        store: SessionStore,
        codec: CookieCodec,
        cookie_name: str = "session",
        cookie_params: Optional[CookieParameters] = None,
        ttl: TTL = 0,
    ):
        self.store = store
        self.codec = codec
        self.cookie_name = cookie_name
        self.cookie_params = cookie_params or CookieParameters()
        self.ttl = ttl

    async def create_session(self, payload: Union[SessionData, dict]) -> SetCookieDirective:
        """
        Store `payload` under a brand new session id and return the cookie to set.

        A new id is minted on every call, even for an identity that already has a
        session, so a re-authenticated client never keeps a pre-login id.

        Raises:
            CreationFailed: the record could not be stored. No cookie must be issued.
        """
        session_id = generate_session_id()
        try:
            await self.store.set(session_id, payload, self.ttl)
        except (BackendError, ValueError) as e:
            logger.error(f"Failed to create session: {e}")
            raise CreationFailed("Session could not be stored") from e

        logger.info("Session created")
        return SetCookieDirective(
            name=self.cookie_name,
            value=self.codec.encode(session_id),
            params=self.cookie_params,
        )

    async def destroy_session(self, session_id: str) -> ClearCookieDirective:
        """
        Remove the session from the store and return the cookie-clearing directive.

        Raises:
            DestructionFailed: the record could not be removed. The exception still carries
                the clearing directive.
        """
        try:
            await self.store.drop(session_id)
        except (BackendError, ValueError) as e:
            logger.error(f"Failed to destroy session {session_id}: {e}")
            raise DestructionFailed("Session could not be removed", clear_cookie=self.clear_cookie()) from e

        logger.info(f"Session {session_id} destroyed")
        return self.clear_cookie()

    def clear_cookie(self) -> ClearCookieDirective:
        return ClearCookieDirective(name=self.cookie_name, params=self.cookie_params)
