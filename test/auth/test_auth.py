import pytest
import os
from unittest.mock import patch

from auth.auth import AuthConfig, BaseAuth, CallableAuth
from auth.schema import Credentials
from auth.session import ConfigurationError
from service.config import load_verifier, setup_auth


def accept_alice(credentials):
    if credentials.username == "alice":
        return {"username": "alice"}
    return None


class TestBaseAuth:
    @pytest.mark.asyncio
    async def test_averify_raises_not_implemented(self):
        auth = BaseAuth()
        with pytest.raises(NotImplementedError):
            await auth.averify(Credentials(username="alice", password="x"))


class TestCallableAuth:
    @pytest.mark.asyncio
    async def test_sync_verifier(self):
        auth = CallableAuth(accept_alice)

        assert await auth.averify(Credentials(username="alice", password="x")) == {"username": "alice"}
        assert await auth.averify(Credentials(username="bob", password="x")) is None

    @pytest.mark.asyncio
    async def test_async_verifier(self):
        async def verifier(credentials):
            return {"username": credentials.username}

        auth = CallableAuth(verifier)

        assert await auth.averify(Credentials(username="carol", password="x")) == {"username": "carol"}

    @pytest.mark.asyncio
    async def test_verifier_must_return_dict(self):
        auth = CallableAuth(lambda credentials: True)

        with pytest.raises(TypeError):
            await auth.averify(Credentials(username="alice", password="x"))


class TestAuthConfig:
    def test_register_auth_strategy(self):
        config = AuthConfig()
        auth = CallableAuth(accept_alice)

        config.register_auth_strategy("default", auth)

        assert config.auth_strategies == {"default": auth}
        assert config.get_default_strategy() is auth

    def test_register_rejects_non_auth(self):
        config = AuthConfig()
        with pytest.raises(TypeError):
            config.register_auth_strategy("bad", accept_alice)

    def test_no_default_strategy(self):
        assert AuthConfig().get_default_strategy() is None


class TestSetupAuth:
    @patch.dict(os.environ, {}, clear=True)
    def test_without_verifier(self):
        assert setup_auth().auth_strategies == {}

    @patch.dict(os.environ, {"AUTH_VERIFIER": "test_auth:accept_alice"}, clear=True)
    def test_verifier_from_environment(self):
        config = setup_auth()

        strategy = config.get_default_strategy()
        assert isinstance(strategy, CallableAuth)
        assert strategy.verifier.__name__ == "accept_alice"

    def test_load_verifier_bad_path(self):
        with pytest.raises(ConfigurationError):
            load_verifier("no-colon-here")
        with pytest.raises(ConfigurationError):
            load_verifier("does_not_exist_module:thing")
