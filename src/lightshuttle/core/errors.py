"""
Failure kinds raised by the core.

Every error carries an optional ``detail`` string, usually the raw diagnostic
text reported by the container runtime. HTTP status codes and user-facing
messages are assigned by :mod:`lightshuttle.api.errors`, not here.
"""

from __future__ import annotations

from typing import Optional


class LightShuttleError(Exception):
    """Base class for every failure the core can surface."""

    kind = "Unexpected"

    def __init__(self, detail: Optional[str] = None) -> None:
        super().__init__(detail or self.kind)
        self.detail = detail

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.detail!r})"


class ContainerNotFound(LightShuttleError):
    kind = "ContainerNotFound"


class RuntimeCommandFailed(LightShuttleError):
    """The runtime could not be reached at all (binary missing, daemon down)."""

    kind = "RuntimeCommandFailed"


class OutputParseError(LightShuttleError):
    kind = "OutputParseError"


class Unexpected(LightShuttleError):
    kind = "Unexpected"


class InvalidRequest(LightShuttleError):
    kind = "InvalidRequest"


class BadRequest(LightShuttleError):
    kind = "BadRequest"


class Unauthorized(LightShuttleError):
    kind = "Unauthorized"


class Misconfigured(LightShuttleError):
    """Server-side configuration mistake, reported as a server error."""

    kind = "Misconfigured"


class Forbidden(LightShuttleError):
    kind = "Forbidden"


__all__ = [
    "LightShuttleError",
    "ContainerNotFound",
    "RuntimeCommandFailed",
    "OutputParseError",
    "Unexpected",
    "InvalidRequest",
    "BadRequest",
    "Unauthorized",
    "Misconfigured",
    "Forbidden",
]
