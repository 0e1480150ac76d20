import logging
from starlette.middleware.base import BaseHTTPMiddleware
from fastapi import Request
from fastapi.responses import JSONResponse

from auth.session import BackendError, ConfigurationError, DestructionFailed, SessionError
from schema import ErrorResponse

logger = logging.getLogger('sessions.service.middleware')

# Checked in order, most specific first
SESSION_ERROR_RESPONSES = [
    (DestructionFailed, 503, "session_destruction_failed", "Your session could not be ended on the server."),
    (BackendError, 503, "session_backend_unavailable", "Session storage is unavailable right now."),
    (ConfigurationError, 500, "session_misconfigured", "The session layer is not configured correctly."),
    (SessionError, 500, "session_error", "Your session could not be handled."),
]


def session_error_response(exc: SessionError) -> JSONResponse:
    """JSON response for a session failure that no route or handler dealt with."""
    for error_type, status_code, error_code, message in SESSION_ERROR_RESPONSES:
        if isinstance(exc, error_type):
            break

    retryable = status_code == 503
    response = JSONResponse(
        status_code=status_code,
        content=ErrorResponse(
            error="Session error",
            error_code=error_code,
            message=message,
            action_required="Retry the request" if retryable else None,
        ).model_dump(),
        headers={"Retry-After": "5"} if retryable else None,
    )
    if isinstance(exc, DestructionFailed):
        exc.clear_cookie.apply(response)
    return response


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """
    Catches whatever escaped the exception handlers.

    Session failures keep their error code, anything else becomes a generic JSON 500.
    """

    async def dispatch(self, request: Request, call_next):
        try:
            return await call_next(request)
        except SessionError as exc:
            logger.error(f"UNHANDLED_SESSION_ERROR: {type(exc).__name__} for {request.url.path}: {exc}")
            return session_error_response(exc)
        except Exception as exc:
            logger.error(f"Unexpected error for {request.url.path}: {str(exc)}", exc_info=True)
            return JSONResponse(
                status_code=500,
                content=ErrorResponse(
                    error="Internal server error occurred",
                    error_code="internal_error",
                    message="An unexpected error occurred. Please try again later.",
                ).model_dump(),
            )
