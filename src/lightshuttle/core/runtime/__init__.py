"""
Container runtime backends.

Everything above this package depends on :class:`RuntimeClient` only.
"""

from __future__ import annotations

from lightshuttle.core.runtime.base import RuntimeClient
from lightshuttle.core.runtime.shell import ShellRuntimeClient

RUNTIME_BACKENDS = ("cli", "docker")


def create_runtime_client(backend: str = "cli", *, docker_bin: str = "docker") -> RuntimeClient:
    """Build the runtime backend named by ``backend``."""
    if backend == "cli":
        return ShellRuntimeClient(binary=docker_bin)
    if backend == "docker":
        from lightshuttle.core.runtime.docker_api import DockerApiRuntimeClient

        return DockerApiRuntimeClient()
    raise ValueError(f"Unknown runtime backend: {backend!r} (expected one of {RUNTIME_BACKENDS})")


__all__ = ["RuntimeClient", "ShellRuntimeClient", "create_runtime_client", "RUNTIME_BACKENDS"]
