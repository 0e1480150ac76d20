from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .models import ClearCookieDirective


class SessionError(Exception):
    """Base class for everything the session layer raises."""


class ConfigurationError(SessionError, ValueError):
    """Raised at startup when the session settings cannot be used."""


class BackendError(SessionError):
    pass


class BackendUnavailable(BackendError):
    """
    The cache backend could not be reached or returned an error.

    This is never a synonym for "session not found". Callers decide whether to
    fail open or closed.
    """

    def __init__(self, message: str, operation: Optional[str] = None):
        super().__init__(message)
        self.operation = operation


class CreationFailed(SessionError):
    """The session record could not be written, so no cookie was issued."""


class DestructionFailed(SessionError):
    """
    The session record could not be removed from the cache.

    Carries the directive needed to clear the cookie anyway, so the client does not
    keep presenting a reference it can never get rid of.
    """

    def __init__(self, message: str, clear_cookie: "ClearCookieDirective"):
        super().__init__(message)
        self.clear_cookie = clear_cookie
