"""
Runtime settings for LightShuttle, read from environment variables.

Every optional feature (bearer tokens, static keys, origin checking) is
disabled while its variable is unset.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Mapping, Optional, Tuple

from lightshuttle.core.runtime import RUNTIME_BACKENDS

DEFAULT_BIND_ADDRESS = "127.0.0.1:7878"
API_PREFIX = "/api/v1"


def _split_origins(raw: Optional[str]) -> Tuple[str, ...]:
    if not raw:
        return ()
    return tuple(o.strip() for o in raw.split(",") if o.strip())


def parse_bind_address(value: str) -> Tuple[str, int]:
    """``"127.0.0.1:7878"`` -> ``("127.0.0.1", 7878)``."""
    host, sep, port = value.rpartition(":")
    if not sep or not host:
        raise ValueError(f"Invalid bind address: {value!r}")
    try:
        port_num = int(port)
    except ValueError:
        raise ValueError(f"Invalid bind address: {value!r}") from None
    if not 0 < port_num <= 65535:
        raise ValueError(f"Invalid bind address: {value!r}")
    return host.strip("[]"), port_num


@dataclass(frozen=True)
class Settings:
    bind_address: str = DEFAULT_BIND_ADDRESS
    jwt_secret: Optional[str] = None
    api_keys_file: Optional[str] = None
    allowed_origins: Tuple[str, ...] = field(default_factory=tuple)
    runtime_backend: str = "cli"
    docker_bin: str = "docker"

    def __post_init__(self) -> None:
        if self.runtime_backend not in RUNTIME_BACKENDS:
            raise ValueError(
                f"Unknown runtime backend: {self.runtime_backend!r} (expected one of {RUNTIME_BACKENDS})"
            )
        parse_bind_address(self.bind_address)

    @property
    def host(self) -> str:
        return parse_bind_address(self.bind_address)[0]

    @property
    def port(self) -> int:
        return parse_bind_address(self.bind_address)[1]

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ
        return cls(
            bind_address=env.get("BIND_ADDRESS") or DEFAULT_BIND_ADDRESS,
            # an empty JWT_SECRET still counts as configured (and too short)
            jwt_secret=env.get("JWT_SECRET"),
            api_keys_file=env.get("API_KEYS_FILE") or None,
            allowed_origins=_split_origins(env.get("ALLOWED_ORIGINS")),
            runtime_backend=env.get("LIGHTSHUTTLE_RUNTIME") or "cli",
            docker_bin=env.get("DOCKER_BIN") or "docker",
        )


__all__ = ["Settings", "API_PREFIX", "DEFAULT_BIND_ADDRESS", "parse_bind_address"]
