import logging
from typing import AsyncGenerator
from fastapi import FastAPI
from contextlib import asynccontextmanager

from auth.session import SessionAuth

logger = logging.getLogger("sessions.service.lifecycle")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    session_auth: SessionAuth = app.state.session_auth

    # An unreachable cache at startup is fatal: BackendUnavailable aborts the boot
    await session_auth.start()
    logger.info(f"Session backend started ({session_auth.settings.backend})")

    try:
        yield
    finally:
        # Cleanup during shutdown
        await session_auth.stop()
        logger.info("Session backend stopped")
