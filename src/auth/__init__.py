from .auth import AuthConfig, BaseAuth, CallableAuth
from .schema import Credentials

__all__ = [
    "AuthConfig",
    "BaseAuth",
    "CallableAuth",
    "Credentials",
]
