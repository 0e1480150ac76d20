from fastapi import APIRouter, Request, Depends
from fastapi.responses import JSONResponse, RedirectResponse
import logging

from auth.auth import AuthConfig
from auth.schema import Credentials
from auth.session import AuthOutcome, Authenticated, DestructionFailed, SessionAuth, SessionData
from schema import ErrorResponse, LoginErrorResponse, PageResponse
from service.dependencies import get_auth_config, get_next_path, get_session_auth, try_session

logger = logging.getLogger('sessions.service.routers.session')

router = APIRouter(
    tags=["session"],
)


@router.get("/login", response_model=PageResponse)
async def login_page(
    request: Request,
    outcome: AuthOutcome = Depends(try_session),
    session_auth: SessionAuth = Depends(get_session_auth),
):
    """
    Login entry point. Clients that already have a live session are sent on to where
    they were going.
    """
    if outcome.is_authenticated:
        return RedirectResponse(get_next_path(request, session_auth), status_code=302)

    return PageResponse(page="login")


@router.post(
    "/login",
    responses={401: {"model": LoginErrorResponse}, 503: {"model": ErrorResponse}},
)
async def login(
    request: Request,
    credentials: Credentials,
    outcome: AuthOutcome = Depends(try_session),
    session_auth: SessionAuth = Depends(get_session_auth),
    auth_config: AuthConfig = Depends(get_auth_config),
):
    """
    Check the submitted credentials and, when they are accepted, create a session and
    redirect the client.
    """
    redirect_path = get_next_path(request, session_auth)

    if outcome.is_authenticated:
        return RedirectResponse(redirect_path, status_code=302)

    verifier = auth_config.get_default_strategy()
    if verifier is None:
        logger.error("Login attempted but no credential verification strategy is registered")
        return JSONResponse(
            status_code=503,
            content={"error": "Login is not available"},
        )

    identity = await verifier.averify(credentials)
    if identity is None:
        logger.info(f"Invalid credentials for user '{credentials.username}'")
        return JSONResponse(
            status_code=401,
            content=LoginErrorResponse(error="Invalid Credentials").model_dump(),
        )

    payload = SessionData.model_validate({"username": credentials.username, **identity})

    # CreationFailed propagates to its handler; no cookie is issued in that case
    set_cookie = await session_auth.create_session(payload)

    response = RedirectResponse(redirect_path, status_code=302)
    set_cookie.apply(response)
    # the stale cookie this request may have carried is replaced, not cleared
    request.state.clear_session_cookie = False

    logger.info(f"User '{payload.username}' logged in")
    return response


@router.get("/logout", responses={503: {"model": ErrorResponse}})
async def logout(
    request: Request,
    outcome: AuthOutcome = Depends(try_session),
    session_auth: SessionAuth = Depends(get_session_auth),
):
    """
    Destroy the current session, if any, and clear the cookie.

    The cookie is cleared even when the cache cannot be reached, so the client is logged
    out from its own point of view whatever the backend's health.
    """
    request.state.clear_session_cookie = False

    if not isinstance(outcome, Authenticated):
        response = RedirectResponse("/", status_code=302)
        session_auth.clear_cookie().apply(response)
        return response

    try:
        clear_cookie = await session_auth.destroy_session(outcome.session_id)
    except DestructionFailed as e:
        logger.error(f"Logout could not remove session {outcome.session_id}: {e}")
        response = JSONResponse(
            status_code=503,
            content=ErrorResponse(
                error="Session could not be removed",
                error_code="session_destruction_failed",
                message="You have been logged out on this device, but the server could not confirm it.",
                action_required="Retry the logout",
            ).model_dump(),
        )
        e.clear_cookie.apply(response)
        return response

    response = RedirectResponse("/", status_code=302)
    clear_cookie.apply(response)
    return response
