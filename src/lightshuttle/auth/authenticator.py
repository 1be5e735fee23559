"""
Authentication strategies.

Exactly one strategy guards the API. Both real strategies are off by default;
with neither configured every request passes unauthenticated (local/dev use).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Mapping, Optional

import jwt

from lightshuttle.auth.namespace import KeyStore, Namespace
from lightshuttle.core.errors import Misconfigured, Unauthorized
from lightshuttle.utils.logger import get_logger

logger = get_logger("lightshuttle.auth")

MIN_SECRET_BYTES = 32
JWT_ALGORITHM = "HS256"
API_KEY_HEADER = "x-api-key"


class Authenticator(ABC):
    """Checks request headers and returns the resolved namespace, if any."""

    name = "none"

    def check_configured(self) -> None:
        """Raise Misconfigured if no request can ever pass."""

    @abstractmethod
    def authenticate(self, headers: Mapping[str, str]) -> Optional[Namespace]:
        """Raise Unauthorized/Misconfigured, or return the caller's namespace."""


class AllowAllAuthenticator(Authenticator):
    name = "none"

    def authenticate(self, headers: Mapping[str, str]) -> Optional[Namespace]:
        return None


class BearerTokenAuthenticator(Authenticator):
    """HS256 JWT in ``Authorization: Bearer <token>``; ``exp`` is mandatory."""

    name = "bearer"

    def __init__(self, secret: str) -> None:
        self._secret = secret

    @property
    def misconfigured(self) -> bool:
        return len(self._secret.encode("utf-8")) < MIN_SECRET_BYTES

    def check_configured(self) -> None:
        if self.misconfigured:
            raise Misconfigured(f"JWT_SECRET must be at least {MIN_SECRET_BYTES} bytes")

    def authenticate(self, headers: Mapping[str, str]) -> Optional[Namespace]:
        self.check_configured()

        # the scheme name is case-insensitive
        scheme, _, token = (headers.get("authorization") or "").strip().partition(" ")
        token = token.strip()
        if scheme.lower() != "bearer" or not token:
            logger.warning("Missing bearer token")
            raise Unauthorized("Missing bearer token")

        try:
            jwt.decode(
                token,
                self._secret,
                algorithms=[JWT_ALGORITHM],
                options={"require": ["exp"]},
            )
        except jwt.ExpiredSignatureError:
            logger.warning("Expired bearer token")
            raise Unauthorized("Token has expired")
        except jwt.InvalidTokenError:
            logger.warning("Invalid bearer token")
            raise Unauthorized("Invalid token")
        return None


class StaticKeyAuthenticator(Authenticator):
    """``X-API-Key`` looked up in the key store loaded at startup."""

    name = "api-key"

    def __init__(self, key_store: KeyStore) -> None:
        self._keys = key_store

    def authenticate(self, headers: Mapping[str, str]) -> Optional[Namespace]:
        key = headers.get(API_KEY_HEADER)
        if not key:
            logger.warning("Missing API key")
            raise Unauthorized("Missing API key")
        namespace = self._keys.get(key)
        if namespace is None:
            logger.warning("Invalid API key")
            raise Unauthorized("Invalid API key")
        logger.info(f"API key authenticated for namespace {namespace.name}")
        return namespace


def build_authenticator(jwt_secret: Optional[str], key_store: KeyStore) -> Authenticator:
    """Pick the active strategy: bearer secret first, then static keys, else none."""
    if jwt_secret is not None:
        if key_store:
            logger.warning("Both JWT_SECRET and API_KEYS_FILE are set; using bearer tokens only")
        authenticator: Authenticator = BearerTokenAuthenticator(jwt_secret)
        if authenticator.misconfigured:
            logger.error(f"JWT_SECRET is shorter than {MIN_SECRET_BYTES} bytes; every request will fail")
    elif key_store:
        authenticator = StaticKeyAuthenticator(key_store)
    else:
        authenticator = AllowAllAuthenticator()
    logger.info(f"Authentication strategy: {authenticator.name}")
    return authenticator


__all__ = [
    "Authenticator",
    "AllowAllAuthenticator",
    "BearerTokenAuthenticator",
    "StaticKeyAuthenticator",
    "build_authenticator",
    "MIN_SECRET_BYTES",
]
