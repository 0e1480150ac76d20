import logging
import time
from starlette.middleware.base import BaseHTTPMiddleware
from fastapi import Request

logger = logging.getLogger('sessions.service.middleware')


class RequestResponseLoggingMiddleware(BaseHTTPMiddleware):
    """
    One log line per request: method, path, status, timing and what happened to the
    session. Cookie values are never logged, only whether one came in or went out.
    """

    async def dispatch(self, request: Request, call_next):
        started = time.perf_counter()
        cookie_name = request.app.state.session_auth.cookie_name
        cookie_sent = cookie_name in request.cookies

        try:
            response = await call_next(request)
        except Exception as exc:
            logger.error(f"REQUEST_FAILED: {request.method} {request.url.path}: {type(exc).__name__}")
            raise

        elapsed_ms = (time.perf_counter() - started) * 1000
        outcome = getattr(request.state, "auth_outcome", None)
        session_status = outcome.status if outcome is not None else "unchecked"
        cookie_written = any(
            header.startswith(f"{cookie_name}=") for header in response.headers.getlist("set-cookie")
        )

        if response.status_code >= 500:
            level = logging.ERROR
        elif response.status_code >= 400:
            level = logging.INFO
        else:
            level = logging.DEBUG
        logger.log(
            level,
            f"{request.method} {request.url.path} -> {response.status_code} "
            f"session={session_status} cookie_sent={cookie_sent} cookie_written={cookie_written} "
            f"({elapsed_ms:.1f}ms)"
        )
        return response
