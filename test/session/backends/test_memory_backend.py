import pytest

from auth.session.backends.memory_backend import MemoryBackend
from auth.session.errors import BackendUnavailable


@pytest.mark.asyncio
async def test_memory_backend_set_and_get(memory_backend, clock):
    await memory_backend.set("sessions", "abc", {"username": "alice"}, 1000)
    clock.advance(400)

    cached = await memory_backend.get("sessions", "abc")

    assert cached.item == {"username": "alice"}
    assert cached.stored == clock.now - 400
    assert cached.ttl == 600


@pytest.mark.asyncio
async def test_memory_backend_expiry(memory_backend, clock):
    await memory_backend.set("sessions", "abc", {"username": "alice"}, 1000)
    clock.advance(1000)

    assert await memory_backend.get("sessions", "abc") is None


@pytest.mark.asyncio
async def test_memory_backend_returns_copies(memory_backend):
    value = {"username": "alice", "roles": ["reader"]}
    await memory_backend.set("sessions", "abc", value, 1000)
    value["roles"].append("admin")

    cached = await memory_backend.get("sessions", "abc")
    cached.item["username"] = "mallory"

    assert (await memory_backend.get("sessions", "abc")).item == {"username": "alice", "roles": ["reader"]}


@pytest.mark.asyncio
async def test_memory_backend_drop_is_idempotent(memory_backend):
    await memory_backend.set("sessions", "abc", {"username": "alice"}, 1000)

    await memory_backend.drop("sessions", "abc")
    await memory_backend.drop("sessions", "abc")

    assert await memory_backend.get("sessions", "abc") is None


@pytest.mark.asyncio
async def test_memory_backend_not_started():
    backend = MemoryBackend()

    assert not backend.is_ready()
    with pytest.raises(BackendUnavailable):
        await backend.get("sessions", "abc")
