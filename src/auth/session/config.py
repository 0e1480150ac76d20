import os
import logging
from typing import Callable, Literal, Optional, Union

from dotenv import load_dotenv
from pydantic import BaseModel, ValidationError
import redis.asyncio as aioredis
from starlette.requests import cookie_parser

from .backends import CacheBackend, MemoryBackend, RedisBackend
from .codec import CookieCodec
from .errors import ConfigurationError
from .manager import SessionManager
from .models import AuthOutcome, ClearCookieDirective, CookieParameters, SameSiteEnum, SessionData, SetCookieDirective
from .store import SessionStore
from .validator import SessionValidator

load_dotenv()

logger = logging.getLogger('sessions.config')

DEFAULT_TTL_SECONDS = 3 * 24 * 60 * 60


class SessionSettings(BaseModel):
    """Everything the session layer can be configured with."""

    backend: Literal["redis", "memory"] = "redis"
    redis_url: Optional[str] = None
    redis_host: str = "127.0.0.1"
    redis_port: int = 6379
    redis_password: Optional[str] = None
    partition: str = "sessions-app"
    segment: str = "sessions"
    ttl_seconds: int = DEFAULT_TTL_SECONDS
    cookie_name: str = "session"
    secret_key: str
    secure_cookies: bool = True
    samesite: SameSiteEnum = SameSiteEnum.strict
    cookie_domain: Optional[str] = None
    cookie_ttl_seconds: Optional[int] = None
    redirect_to: str = "/login"
    append_next: Optional[str] = "redirect"
    clear_invalid: bool = True

    @classmethod
    def from_env(cls) -> "SessionSettings":
        """
        Build settings from environment variables (a .env file is honoured).

        Raises:
            ConfigurationError: the secret is missing or a value cannot be parsed.
        """
        # Get secret key from environment variable
        if not (secret_key := os.getenv("SESSION_SECRET_KEY")):
            raise ConfigurationError("SESSION_SECRET_KEY environment variable must be set")

        append_next = os.getenv("SESSION_APPEND_NEXT", "redirect").strip()
        if append_next.lower() in ("", "false", "0", "no"):
            append_next = None

        raw = {
            "backend": os.getenv("SESSION_BACKEND", "redis").lower(),
            "redis_url": os.getenv("REDIS_URL") or None,
            "redis_host": os.getenv("REDIS_HOST", "127.0.0.1"),
            "redis_port": os.getenv("REDIS_PORT", "6379"),
            "redis_password": os.getenv("REDIS_PASSWORD") or None,
            "partition": os.getenv("SESSION_PARTITION", "sessions-app"),
            "segment": os.getenv("SESSION_SEGMENT", "sessions"),
            "ttl_seconds": os.getenv("SESSION_TTL_SECONDS", str(DEFAULT_TTL_SECONDS)),
            "cookie_name": os.getenv("SESSION_COOKIE_NAME", "session"),
            "secret_key": secret_key,
            # For development, allow insecure cookies over HTTP
            "secure_cookies": os.getenv("SECURE_COOKIES", "true").lower() == "true",
            "samesite": os.getenv("COOKIE_SAMESITE", "strict").lower(),
            "cookie_domain": os.getenv("COOKIE_DOMAIN") or None,
            "cookie_ttl_seconds": os.getenv("SESSION_COOKIE_TTL_SECONDS") or None,
            "redirect_to": os.getenv("SESSION_REDIRECT_TO", "/login"),
            "append_next": append_next,
            "clear_invalid": os.getenv("SESSION_CLEAR_INVALID", "true").lower() == "true",
        }

        try:
            settings = cls.model_validate(raw)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid session configuration: {e}") from e

        if settings.ttl_seconds <= 0:
            raise ConfigurationError("SESSION_TTL_SECONDS must be positive")

        if not settings.secure_cookies:
            logger.warning("SECURE_COOKIES is disabled, session cookies will be sent over plain HTTP")

        return settings

    def get_redis_url(self) -> str:
        if self.redis_url:
            return self.redis_url
        auth = f":{self.redis_password}@" if self.redis_password else ""
        return f"redis://{auth}{self.redis_host}:{self.redis_port}"

    def cookie_params(self) -> CookieParameters:
        return CookieParameters(
            max_age=self.cookie_ttl_seconds,
            path="/",
            domain=self.cookie_domain,
            secure=self.secure_cookies,
            httponly=True,
            samesite=self.samesite,
        )


class SessionAuth:
    """
    The session layer as handed to the HTTP host.

    Wires one backend, store, codec, validator and manager together. Nothing in here is
    global; build one per application and pass it in.
    """

    def __init__(
        self,
        settings: SessionSettings,
        backend: CacheBackend,
        verify_session: Optional[Callable[[SessionData], bool]] = None,
    ):
        self.settings = settings
        self.backend = backend
        self.store = SessionStore(backend, segment=settings.segment, expires_in=settings.ttl_seconds)
        self.codec = CookieCodec(settings.secret_key, max_age=settings.ttl_seconds)
        self.validator = SessionValidator(self.store, self.codec, verify_session=verify_session)
        self.manager = SessionManager(
            self.store,
            self.codec,
            cookie_name=settings.cookie_name,
            cookie_params=settings.cookie_params(),
        )

    @property
    def cookie_name(self) -> str:
        return self.settings.cookie_name

    async def start(self) -> None:
        await self.backend.start()

    async def stop(self) -> None:
        await self.backend.stop()

    async def validate(self, cookie_value: Optional[str]) -> AuthOutcome:
        return await self.validator.validate(cookie_value)

    async def validate_header(self, cookie_header: Optional[str]) -> AuthOutcome:
        """Validate a raw Cookie request header."""
        cookies = cookie_parser(cookie_header) if cookie_header else {}
        return await self.validate(cookies.get(self.cookie_name))

    async def create_session(self, payload: Union[SessionData, dict]) -> SetCookieDirective:
        return await self.manager.create_session(payload)

    async def destroy_session(self, session_id: str) -> ClearCookieDirective:
        return await self.manager.destroy_session(session_id)

    def clear_cookie(self) -> ClearCookieDirective:
        return self.manager.clear_cookie()


def build_session_auth(
    settings: Optional[SessionSettings] = None,
    redis_client: Optional[aioredis.Redis] = None,
    verify_session: Optional[Callable[[SessionData], bool]] = None,
) -> SessionAuth:
    """Assemble a `SessionAuth` from settings, creating the Redis client when none is given."""
    if settings is None:
        settings = SessionSettings.from_env()

    if settings.backend == "memory":
        logger.warning("Using in-memory session backend, sessions will not survive a restart")
        backend: CacheBackend = MemoryBackend()
    else:
        if redis_client is None:
            from service.redis_client import get_redis_client
            redis_client = get_redis_client(settings.get_redis_url())
        backend = RedisBackend(redis_client, partition=settings.partition)

    return SessionAuth(settings, backend, verify_session=verify_session)
