import logging
from fastapi import Request
from fastapi.responses import JSONResponse, RedirectResponse

from auth.session import BackendUnavailable, CreationFailed
from schema import ErrorResponse
from ..dependencies import LoginRequired

logger = logging.getLogger('sessions.service.middleware')


async def login_required_handler(request: Request, exc: LoginRequired):
    """Send clients without a live session to the login entry point"""
    logger.debug(f"LOGIN_REQUIRED: {request.url.path} -> {exc.location}")
    return RedirectResponse(url=exc.location, status_code=302)


async def backend_unavailable_handler(request: Request, exc: BackendUnavailable):
    """A cache outage is a retryable failure, never an authentication bypass"""
    logger.error(f"SESSION_BACKEND_ERROR: {exc.operation or 'unknown operation'} failed for {request.url.path}: {exc}")
    return JSONResponse(
        status_code=503,
        content=ErrorResponse(
            error="Session storage unavailable",
            error_code="session_backend_unavailable",
            message="Your session could not be checked right now. Please try again shortly.",
            action_required="Retry the request",
        ).model_dump(),
        headers={"Retry-After": "5"}
    )


async def creation_failed_handler(request: Request, exc: CreationFailed):
    logger.error(f"SESSION_CREATION_FAILED: {exc}")
    return JSONResponse(
        status_code=503,
        content=ErrorResponse(
            error="Could not log you in",
            error_code="session_creation_failed",
            message="Your session could not be created. Please try again shortly.",
            action_required="Retry the login",
        ).model_dump(),
        headers={"Retry-After": "5"}
    )
