"""HTTP session management for authentication and user state."""

from .codec import CookieCodec
from .config import SessionAuth, SessionSettings, build_session_auth
from .errors import (
    BackendError,
    BackendUnavailable,
    ConfigurationError,
    CreationFailed,
    DestructionFailed,
    SessionError,
)
from .manager import SessionManager
from .models import (
    Anonymous,
    AuthOutcome,
    Authenticated,
    ClearCookieDirective,
    CookieParameters,
    Invalid,
    SessionData,
    SetCookieDirective,
)
from .store import SessionStore
from .validator import SessionValidator

__all__ = [
    "CookieCodec",
    "SessionAuth",
    "SessionSettings",
    "build_session_auth",
    "BackendError",
    "BackendUnavailable",
    "ConfigurationError",
    "CreationFailed",
    "DestructionFailed",
    "SessionError",
    "SessionManager",
    "Anonymous",
    "AuthOutcome",
    "Authenticated",
    "ClearCookieDirective",
    "CookieParameters",
    "Invalid",
    "SessionData",
    "SetCookieDirective",
    "SessionStore",
    "SessionValidator",
]
