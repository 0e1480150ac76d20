"""
Configuration setup for the session service.

This module handles the pieces of configuration that sit outside the session layer
itself, currently the registry of credential verification strategies.
"""
import importlib
import os
import logging
from typing import Optional

from auth.auth import AuthConfig, BaseAuth, CallableAuth
from auth.session import ConfigurationError

logger = logging.getLogger('sessions.service.config')


def load_verifier(path: str) -> BaseAuth:
    """
    Import a verifier given as "package.module:attribute".

    The attribute may be a BaseAuth instance or a plain function taking Credentials.
    """
    module_name, _, attribute = path.partition(":")
    if not module_name or not attribute:
        raise ConfigurationError(f"AUTH_VERIFIER must look like 'module:attribute', got '{path}'")

    try:
        target = getattr(importlib.import_module(module_name), attribute)
    except (ImportError, AttributeError) as e:
        raise ConfigurationError(f"Could not load credential verifier '{path}': {e}") from e

    if isinstance(target, BaseAuth):
        return target
    if callable(target):
        return CallableAuth(target)
    raise ConfigurationError(f"Credential verifier '{path}' is neither a BaseAuth nor callable")


def setup_auth(verifier: Optional[BaseAuth] = None) -> AuthConfig:
    """
    Configure and return authentication strategies.

    The login route uses the first registered strategy. When no verifier is passed, the
    AUTH_VERIFIER environment variable is consulted. Without either, logins are refused.

    Returns:
        Configured AuthConfig instance
    """
    auth_config = AuthConfig()

    if verifier is None and (verifier_path := os.getenv("AUTH_VERIFIER")):
        verifier = load_verifier(verifier_path)

    if verifier is None:
        logger.warning("No credential verifier configured, logins will be refused")
        return auth_config

    auth_config.register_auth_strategy("default", verifier)
    logger.info(f"Authentication configured with {type(verifier).__name__}")
    return auth_config


__all__ = [
    'load_verifier',
    'setup_auth',
]
