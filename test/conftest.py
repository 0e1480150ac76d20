import sys
import os
from pathlib import Path
import pytest
import pytest_asyncio
import logging

# Add src to the Python path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

# Set environment variables before importing modules
os.environ.setdefault('SESSION_SECRET_KEY', 'test-secret-key-that-is-long-enough-for-signing')

from httpx import AsyncClient, ASGITransport

from auth.auth import CallableAuth
from auth.session import SessionAuth, SessionSettings
from auth.session.backends import MemoryBackend
from service.config import setup_auth
from service.service import create_app


@pytest.fixture(scope="session", autouse=True)
def configure_logging():
    """Configure logging for tests."""
    logging.basicConfig(level=logging.INFO)


class FakeClock:
    """Millisecond clock that only moves when told to."""

    def __init__(self, start: int = 1_700_000_000_000):
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def session_settings():
    return SessionSettings(
        backend="memory",
        secret_key="test-secret-key-that-is-long-enough-for-signing",
        secure_cookies=False,
        cookie_name="session",
    )


@pytest_asyncio.fixture
async def memory_backend(clock):
    backend = MemoryBackend(clock=clock)
    await backend.start()
    yield backend
    await backend.stop()


@pytest_asyncio.fixture
async def session_auth(session_settings, memory_backend):
    return SessionAuth(session_settings, memory_backend)


def check_credentials(credentials):
    """Accepts exactly one made-up user, enough to drive the login route."""
    if credentials.username == "alice" and credentials.password == "wonderland":
        return {"username": "alice", "role": "reader"}
    return None


@pytest.fixture
def app(session_auth):
    return create_app(session_auth=session_auth, auth_config=setup_auth(CallableAuth(check_credentials)))


@pytest_asyncio.fixture
async def client(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://localhost:3000") as client:
        yield client
