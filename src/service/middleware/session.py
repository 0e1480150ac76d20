import logging
from starlette.middleware.base import BaseHTTPMiddleware
from fastapi import Request

logger = logging.getLogger('sessions.service.middleware')


class SessionCookieMiddleware(BaseHTTPMiddleware):
    """Middleware to clear stale session cookies after request processing"""

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)

        # Set by the session dependency when the cookie did not resolve to a live session
        if getattr(request.state, 'clear_session_cookie', False):
            session_auth = request.app.state.session_auth
            session_auth.clear_cookie().apply(response)
            logger.debug(f"Cleared invalid session cookie for {request.url.path}")

        return response
