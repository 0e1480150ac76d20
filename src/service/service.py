import logging
from typing import Optional

from fastapi import FastAPI

from auth.auth import AuthConfig
from auth.session import SessionAuth, build_session_auth

from .config import setup_auth
from .lifecycle import lifespan
from .middleware import setup_middleware
from .routers import misc_router, session_router

logger = logging.getLogger('sessions.service')


def create_app(
    session_auth: Optional[SessionAuth] = None,
    auth_config: Optional[AuthConfig] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        session_auth: The session layer to use. Built from environment variables when
            omitted, which raises ConfigurationError if the secret is missing.
        auth_config: Credential verification strategies for the login route.
    """
    if session_auth is None:
        session_auth = build_session_auth()
    if auth_config is None:
        auth_config = setup_auth()

    app = FastAPI(lifespan=lifespan)
    app.state.session_auth = session_auth
    app.state.auth_config = auth_config

    setup_middleware(app)

    app.include_router(misc_router)
    app.include_router(session_router)

    logger.info(f"Session service created (cookie '{session_auth.cookie_name}')")
    return app
