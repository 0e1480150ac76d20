import inspect
import logging
from typing import Any, Awaitable, Callable, Dict, Optional, Union

from .schema import Credentials

logger = logging.getLogger('sessions.auth')

IdentityPayload = Dict[str, Any]
Verifier = Callable[[Credentials], Union[Optional[IdentityPayload], Awaitable[Optional[IdentityPayload]]]]


class BaseAuth():
    """
    Checks credentials on behalf of the login route.

    Subclasses decide how a username/password pair is verified. The session layer only
    ever sees the identity payload they return.
    """

    async def averify(self, credentials: Credentials) -> Optional[IdentityPayload]:
        """
        Verify `credentials`.

        Returns:
            The identity payload to store in the new session, or None when the
            credentials are rejected.
        """
        raise NotImplementedError


class CallableAuth(BaseAuth):
    """Wraps a plain function (sync or async) as a verification strategy."""

    def __init__(self, verifier: Verifier):
        self.verifier = verifier

    async def averify(self, credentials: Credentials) -> Optional[IdentityPayload]:
        result = self.verifier(credentials)
        if inspect.isawaitable(result):
            result = await result

        if result is None:
            logger.debug(f"Credentials rejected for user '{credentials.username}'")
            return None
        if not isinstance(result, dict):
            raise TypeError("Verifier must return a dict identity payload or None")
        return result


class AuthConfig:
    # This class is used to store different types of authentication methods

    def __init__(self):
        self.auth_strategies: Dict[str, BaseAuth] = {}

    def register_auth_strategy(self, name: str, auth_strategy: BaseAuth):
        """
        Register a new authentication strategy.

        Args:
            name (str): The name of the authentication strategy.
            auth_strategy (BaseAuth): An instance of a class that inherits from BaseAuth.
        """
        if not isinstance(auth_strategy, BaseAuth):
            raise TypeError(f"{name} must be an instance of BaseAuth")
        self.auth_strategies[name] = auth_strategy

    def get_default_strategy(self) -> Optional[BaseAuth]:
        """The first registered strategy, used by the login route."""
        if not self.auth_strategies:
            return None
        return next(iter(self.auth_strategies.values()))
