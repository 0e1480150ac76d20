import logging as log
from fastapi import FastAPI

from auth.session import BackendUnavailable, CreationFailed
from ..dependencies import LoginRequired
from .logging import RequestResponseLoggingMiddleware
from .error_handling import ErrorHandlingMiddleware
from .session import SessionCookieMiddleware
from .exception_handlers import (
    login_required_handler,
    backend_unavailable_handler,
    creation_failed_handler,
)

logger = log.getLogger('sessions.service.middleware')


def setup_middleware(app: FastAPI):
    """
    Setup all middleware and exception handlers for the FastAPI application.

    Middleware are added in reverse order (last added = first executed).
    Current order of execution:
    1. ErrorHandlingMiddleware (catches unhandled errors)
    2. RequestResponseLoggingMiddleware (logs requests/responses)
    3. SessionCookieMiddleware (clears invalid session cookies after response)

    Args:
        app: FastAPI application instance
    """
    app.add_exception_handler(LoginRequired, login_required_handler)
    app.add_exception_handler(BackendUnavailable, backend_unavailable_handler)
    app.add_exception_handler(CreationFailed, creation_failed_handler)

    # Clears stale cookies, executed last so it sees the final response
    app.add_middleware(SessionCookieMiddleware)

    # Add comprehensive request/response logging for debugging
    app.add_middleware(RequestResponseLoggingMiddleware)

    # Add error handling middleware so unexpected errors never leak a raw error page
    app.add_middleware(ErrorHandlingMiddleware)

    logger.info("Session middleware configured")


__all__ = [
    'setup_middleware',
    'RequestResponseLoggingMiddleware',
    'ErrorHandlingMiddleware',
    'SessionCookieMiddleware',
    'login_required_handler',
    'backend_unavailable_handler',
    'creation_failed_handler',
]
