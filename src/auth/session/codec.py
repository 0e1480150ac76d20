import logging
from typing import Optional

from itsdangerous import BadData, URLSafeTimedSerializer
from itsdangerous.encoding import base64_decode, base64_encode

from .errors import ConfigurationError

logger = logging.getLogger('sessions.codec')

MIN_SECRET_LENGTH = 32


class CookieCodec:
    """
    Turns a session id into a signed cookie value and back.

    The value is an itsdangerous token over `{"sid": <id>}`, so any change to it breaks
    the signature. Decoding only checks the token itself and never looks at the store.
    """

    def __init__(self, secret_key: str, salt: str = "session-cookie", max_age: Optional[int] = None):
        if not secret_key:
            raise ConfigurationError("A non-empty secret key is required to sign session cookies")
        if len(secret_key) < MIN_SECRET_LENGTH:
            logger.warning(
                f"Session secret is shorter than {MIN_SECRET_LENGTH} characters, consider a longer one"
            )
        self.max_age = max_age
        self.signer = URLSafeTimedSerializer(secret_key, salt=salt)

    def encode(self, session_id: str) -> str:
        return self.signer.dumps({"sid": session_id})

    def decode(self, cookie_value: Optional[str]) -> Optional[str]:
        """Return the session id carried by `cookie_value`, or None if it cannot be trusted."""
        if not cookie_value:
            return None

        try:
            envelope = self.signer.loads(cookie_value, max_age=self.max_age)
        except BadData as e:
            logger.debug(f"Rejected session cookie: {type(e).__name__}")
            return None

        # the last base64 character of the signature has spare bits that decoding ignores
        signature = cookie_value.rsplit(".", 1)[-1]
        if base64_encode(base64_decode(signature)).decode("ascii") != signature:
            logger.debug("Rejected session cookie: non-canonical signature encoding")
            return None

        if not isinstance(envelope, dict):
            return None
        session_id = envelope.get("sid")
        if not isinstance(session_id, str) or not session_id:
            return None

        return session_id
