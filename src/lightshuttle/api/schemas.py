from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from lightshuttle.core.models import AppInstance, ContainerConfig
from lightshuttle.core.recreate import RecreateOverrides

# -------- request bodies --------

class CreateAppRequest(BaseModel):
    name: str = Field(..., description="Unique container name")
    image: str = Field(..., description="Image to run, e.g. nginx:latest")
    ports: List[int] = Field(default_factory=list, description="Host ports bound to container_port")
    container_port: Optional[int] = Field(default=None, description="Port exposed inside the container")
    labels: Optional[Dict[str, str]] = None
    env: Optional[Dict[str, str]] = None
    volumes: Optional[List[str]] = Field(default=None, description="host:container bind mounts")
    restart_policy: Optional[str] = Field(default=None, description="no | always | on-failure | unless-stopped")

    def to_config(self) -> ContainerConfig:
        return ContainerConfig(
            name=self.name,
            image=self.image,
            host_ports=list(self.ports),
            container_port=self.container_port,
            labels=dict(self.labels or {}),
            env=dict(self.env or {}),
            volumes=list(self.volumes or []),
            restart_policy=self.restart_policy,
        )


class RecreateRequest(BaseModel):
    """Optional overrides for a recreate; omitted fields keep the observed value."""

    image: Optional[str] = None
    ports: Optional[List[int]] = None
    container_port: Optional[int] = None
    labels: Optional[Dict[str, str]] = None
    env: Optional[Dict[str, str]] = None
    volumes: Optional[List[str]] = None
    restart_policy: Optional[str] = None

    def to_overrides(self) -> RecreateOverrides:
        return RecreateOverrides(
            image=self.image,
            host_ports=self.ports,
            container_port=self.container_port,
            labels=self.labels,
            env=self.env,
            volumes=self.volumes,
            restart_policy=self.restart_policy,
        )


# -------- responses --------

class CreateAppResponse(BaseModel):
    status: str = "success"
    container_id: str


class ContainerIdResponse(BaseModel):
    container_id: str


class StatusResponse(BaseModel):
    status: str


class AppListResponse(BaseModel):
    total: int
    page: int
    limit: int
    items: List[AppInstance]


class HealthResponse(BaseModel):
    status: str = "ok"


class VersionResponse(BaseModel):
    version: str


class ErrorResponse(BaseModel):
    trace_id: str
    code: int
    message: str
    details: Optional[str] = None
