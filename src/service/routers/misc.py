from fastapi import APIRouter, Depends
from typing import Any

from auth.session import AuthOutcome, Authenticated, SessionAuth
from schema import ErrorResponse, PageResponse, StatusResponse
from ..dependencies import get_session_auth, require_session, try_session
import logging

logger = logging.getLogger('sessions.service.routers.misc')

router = APIRouter()


def _session_context(outcome: AuthOutcome) -> dict[str, Any]:
    if isinstance(outcome, Authenticated):
        return outcome.record.model_dump(exclude_unset=True)
    return {}


@router.get("/status")
async def get_status(session_auth: SessionAuth = Depends(get_session_auth)) -> StatusResponse:
    """Health check endpoint."""
    return StatusResponse(session_backend_ready=session_auth.backend.is_ready())


@router.get("/")
async def home(outcome: AuthOutcome = Depends(try_session)) -> PageResponse:
    """Home page, open to everyone."""
    return PageResponse(page="home", session=_session_context(outcome))


@router.get("/public")
async def public(outcome: AuthOutcome = Depends(try_session)) -> PageResponse:
    return PageResponse(page="public", session=_session_context(outcome))


@router.get("/private", responses={503: {"model": ErrorResponse}})
async def private(outcome: Authenticated = Depends(require_session)) -> PageResponse:
    """Only reachable with a live session, everyone else is redirected to the login page."""
    return PageResponse(page="private", session=_session_context(outcome))
