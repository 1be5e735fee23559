from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from lightshuttle.core.errors import BadRequest, OutputParseError

RESTART_POLICIES = ("no", "always", "on-failure", "unless-stopped")


def _valid_port(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and 0 < value <= 65535


def validate_volume(volume: str) -> None:
    """Reject anything that is not exactly ``host:container``."""
    parts = volume.split(":")
    if len(parts) != 2 or not parts[0] or not parts[1]:
        raise BadRequest(f"Invalid volume format: '{volume}'")


@dataclass
class ContainerConfig:
    """Desired state of a container, built per request and handed to ``run``."""

    name: str
    image: str
    host_ports: List[int] = field(default_factory=list)
    container_port: Optional[int] = None
    labels: Dict[str, str] = field(default_factory=dict)
    env: Dict[str, str] = field(default_factory=dict)
    volumes: List[str] = field(default_factory=list)
    restart_policy: Optional[str] = None

    def __post_init__(self) -> None:
        # host_ports is an ordered set
        self.host_ports = list(dict.fromkeys(self.host_ports))

    def validate(self) -> None:
        """Raise :class:`BadRequest` if the config must not reach the runtime."""
        if not self.name or not self.name.strip():
            raise BadRequest("Container name must not be empty")
        if not self.image or not self.image.strip():
            raise BadRequest("Image must not be empty")

        for port in self.host_ports:
            if not _valid_port(port):
                raise BadRequest(f"Invalid host port: {port!r}")
        if self.container_port is not None and not _valid_port(self.container_port):
            raise BadRequest(f"Invalid container port: {self.container_port!r}")
        if self.host_ports and self.container_port is None:
            raise BadRequest("container_port is required when host ports are given")

        for volume in self.volumes:
            validate_volume(volume)

        if self.restart_policy is not None and self.restart_policy not in RESTART_POLICIES:
            raise BadRequest(f"Invalid restart policy: '{self.restart_policy}'")


class AppStatus(str, Enum):
    RUNNING = "running"
    STOPPED = "stopped"
    ERROR = "error"

    @classmethod
    def from_state(cls, state: Optional[str]) -> "AppStatus":
        """Map a runtime state name (``running``, ``exited``...) to a status."""
        state = (state or "").lower()
        if state == "running":
            return cls.RUNNING
        if state in ("exited", "created", "paused"):
            return cls.STOPPED
        return cls.ERROR


class AppInstance(BaseModel):
    """Projection of one container at read time. Never stored."""

    id: int = Field(..., description="Position within the response, not a runtime id")
    name: str
    image: str
    status: AppStatus
    ports: List[int] = Field(default_factory=list, description="Observed host ports")
    created_at: str = ""


# -------- typed view over `docker inspect` --------

class _InspectModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class PortBinding(_InspectModel):
    host_ip: Optional[str] = Field(default=None, alias="HostIp")
    host_port: Optional[str] = Field(default=None, alias="HostPort")


class InspectConfig(_InspectModel):
    image: Optional[str] = Field(default=None, alias="Image")
    labels: Optional[Dict[str, Optional[str]]] = Field(default=None, alias="Labels")
    env: Optional[List[str]] = Field(default=None, alias="Env")


class RestartPolicy(_InspectModel):
    name: Optional[str] = Field(default=None, alias="Name")


class HostConfig(_InspectModel):
    binds: Optional[List[str]] = Field(default=None, alias="Binds")
    port_bindings: Optional[Dict[str, Optional[List[PortBinding]]]] = Field(
        default=None, alias="PortBindings"
    )
    restart_policy: Optional[RestartPolicy] = Field(default=None, alias="RestartPolicy")


class NetworkSettings(_InspectModel):
    ports: Optional[Dict[str, Optional[List[PortBinding]]]] = Field(default=None, alias="Ports")


class ContainerState(_InspectModel):
    status: Optional[str] = Field(default=None, alias="Status")
    running: Optional[bool] = Field(default=None, alias="Running")


class InspectRecord(_InspectModel):
    """The subset of an inspection record the orchestrator relies on."""

    id: Optional[str] = Field(default=None, alias="Id")
    name: Optional[str] = Field(default=None, alias="Name")
    created: Optional[str] = Field(default=None, alias="Created")
    config: Optional[InspectConfig] = Field(default=None, alias="Config")
    host_config: Optional[HostConfig] = Field(default=None, alias="HostConfig")
    network_settings: Optional[NetworkSettings] = Field(default=None, alias="NetworkSettings")
    state: Optional[ContainerState] = Field(default=None, alias="State")

    @classmethod
    def from_attrs(cls, attrs: Any) -> "InspectRecord":
        if not isinstance(attrs, dict) or not attrs:
            raise OutputParseError("Empty inspection record")
        try:
            return cls.model_validate(attrs)
        except ValidationError as e:
            raise OutputParseError(f"Malformed inspection record: {e}") from e

    @classmethod
    def from_json(cls, raw: str) -> "InspectRecord":
        """Parse the JSON array printed by ``docker inspect``."""
        try:
            data = json.loads(raw)
        except ValueError as e:
            raise OutputParseError(f"Invalid inspect output: {e}") from e
        if isinstance(data, list):
            if not data:
                raise OutputParseError("Inspect output is an empty list")
            data = data[0]
        return cls.from_attrs(data)

    @property
    def container_name(self) -> str:
        return (self.name or "").lstrip("/")

    @property
    def port_map(self) -> Dict[str, List[PortBinding]]:
        """Port bindings keyed by ``"80/tcp"``.

        ``HostConfig.PortBindings`` survives a stop, ``NetworkSettings.Ports``
        is only populated while the container runs.
        """
        sources = []
        if self.host_config is not None:
            sources.append(self.host_config.port_bindings)
        if self.network_settings is not None:
            sources.append(self.network_settings.ports)
        for ports in sources:
            if ports:
                return {k: list(v or []) for k, v in ports.items()}
        return {}

    def host_ports(self) -> List[int]:
        out: List[int] = []
        for bindings in self.port_map.values():
            for binding in bindings:
                port = parse_port(binding.host_port)
                if port is not None and port not in out:
                    out.append(port)
        return out

    def to_instance(self, instance_id: int = 0) -> AppInstance:
        return AppInstance(
            id=instance_id,
            name=self.container_name,
            image=(self.config.image if self.config else None) or "",
            status=AppStatus.from_state(self.state.status if self.state else None),
            ports=self.host_ports(),
            created_at=self.created or "",
        )


def parse_port(value: Optional[str]) -> Optional[int]:
    """``"8080"`` or ``"80/tcp"`` -> int, anything else -> None."""
    if not value:
        return None
    head = str(value).split("/", 1)[0].strip()
    try:
        port = int(head)
    except ValueError:
        return None
    return port if _valid_port(port) else None


__all__ = [
    "RESTART_POLICIES",
    "ContainerConfig",
    "AppStatus",
    "AppInstance",
    "InspectRecord",
    "PortBinding",
    "parse_port",
    "validate_volume",
]
