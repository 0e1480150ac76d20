import pytest
from unittest.mock import AsyncMock

from auth.session import BackendUnavailable, SessionAuth
from auth.session.backends import RedisBackend
from service.lifecycle import lifespan
from service.redis_client import _mask_url, get_redis_client
from service.service import create_app


@pytest.mark.asyncio
async def test_lifespan_starts_and_stops_backend(session_settings):
    redis_client = AsyncMock()
    session_auth = SessionAuth(session_settings, RedisBackend(redis_client))
    app = create_app(session_auth=session_auth)

    async with lifespan(app):
        assert session_auth.backend.is_ready()
        redis_client.ping.assert_awaited_once()

    assert not session_auth.backend.is_ready()
    redis_client.aclose.assert_awaited_once()


@pytest.mark.asyncio
async def test_lifespan_fails_when_backend_unreachable(session_settings):
    redis_client = AsyncMock()
    redis_client.ping.side_effect = ConnectionRefusedError("no redis here")
    app = create_app(session_auth=SessionAuth(session_settings, RedisBackend(redis_client)))

    with pytest.raises(BackendUnavailable):
        async with lifespan(app):
            pass


def test_redis_clients_are_shared():
    first = get_redis_client("redis://localhost:6398/1")
    assert get_redis_client("redis://localhost:6398/1") is first
    assert get_redis_client("redis://localhost:6398/2") is not first


def test_mask_url():
    assert _mask_url("redis://:hunter2@cache:6379") == "redis://***@cache:6379"
    assert _mask_url("redis://cache:6379") == "redis://cache:6379"
