"""
Access control for LightShuttle.

This module provides the namespace key store and the authentication strategies.
"""

from __future__ import annotations

from lightshuttle.auth.authenticator import (
    AllowAllAuthenticator,
    Authenticator,
    BearerTokenAuthenticator,
    StaticKeyAuthenticator,
    build_authenticator,
)
from lightshuttle.auth.namespace import KeyStore, Namespace, load_key_store

__all__ = [
    "AllowAllAuthenticator",
    "Authenticator",
    "BearerTokenAuthenticator",
    "KeyStore",
    "Namespace",
    "StaticKeyAuthenticator",
    "build_authenticator",
    "load_key_store",
]
