"""
FastAPI dependencies for the session service.

This module provides reusable dependency functions that can be injected
into route handlers throughout the application.
"""
import logging
from typing import Callable, Literal, Optional
from urllib.parse import urlencode

from fastapi import Depends, Request

from auth.auth import AuthConfig
from auth.session import AuthOutcome, Invalid, SessionAuth

logger = logging.getLogger('sessions.service.dependencies')


class LoginRequired(Exception):
    """Raised when a protected route is hit without a live session."""

    def __init__(self, location: str):
        super().__init__(f"Login required, redirecting to {location}")
        self.location = location


def get_session_auth(request: Request) -> SessionAuth:
    """Returns the SessionAuth the application was created with."""
    return request.app.state.session_auth


def get_auth_config(request: Request) -> AuthConfig:
    """Returns the credential verification strategies registered on the application."""
    return request.app.state.auth_config


def build_login_redirect(session_auth: SessionAuth, request: Request) -> str:
    """
    Location to send an unauthenticated client to.

    When `append_next` is configured, the path the client asked for is passed along as a
    query parameter so the login route can send them back afterwards.
    """
    settings = session_auth.settings
    location = settings.redirect_to
    if not settings.append_next:
        return location

    next_path = request.url.path
    if request.url.query:
        next_path = f"{next_path}?{request.url.query}"
    separator = "&" if "?" in location else "?"
    return f"{location}{separator}{urlencode({settings.append_next: next_path})}"


def get_next_path(request: Request, session_auth: SessionAuth) -> str:
    """Post-login redirect target from the query string. Only local paths are honoured."""
    param = session_auth.settings.append_next or "redirect"
    next_path: Optional[str] = request.query_params.get(param)
    if not next_path or not next_path.startswith("/") or next_path.startswith("//"):
        return "/"
    return next_path


def session_outcome(mode: Literal["try", "required"] = "try") -> Callable:
    """
    Build a dependency resolving the request's session cookie.

    In "try" mode the outcome is simply returned, whatever it is. In "required" mode any
    outcome other than Authenticated raises LoginRequired. A cache outage is never turned
    into an anonymous request: BackendUnavailable propagates to its exception handler.
    """
    if mode not in ("try", "required"):
        raise ValueError(f"Unknown session auth mode '{mode}'")

    async def dependency(
        request: Request,
        session_auth: SessionAuth = Depends(get_session_auth),
    ) -> AuthOutcome:
        cookie_value = request.cookies.get(session_auth.cookie_name)
        outcome = await session_auth.validate(cookie_value)
        request.state.auth_outcome = outcome

        if isinstance(outcome, Invalid) and outcome.clear_cookie and session_auth.settings.clear_invalid:
            logger.debug(f"Marking invalid session cookie for clearing ({outcome.reason})")
            request.state.clear_session_cookie = True

        if mode == "required" and not outcome.is_authenticated:
            raise LoginRequired(build_login_redirect(session_auth, request))

        return outcome

    return dependency


try_session = session_outcome("try")
require_session = session_outcome("required")
