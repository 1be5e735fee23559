from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Body, Depends, Query, Request, Response
from fastapi.responses import PlainTextResponse

from lightshuttle import __version__
from lightshuttle.api.schemas import (
    AppListResponse,
    ContainerIdResponse,
    CreateAppRequest,
    CreateAppResponse,
    ErrorResponse,
    HealthResponse,
    RecreateRequest,
    StatusResponse,
    VersionResponse,
)
from lightshuttle.core.errors import Forbidden
from lightshuttle.core.listing import DEFAULT_LIMIT, DEFAULT_PAGE, list_apps
from lightshuttle.core.models import AppInstance
from lightshuttle.core.recreate import Recreator
from lightshuttle.core.runtime.base import RuntimeClient
from lightshuttle.utils.logger import get_logger

logger = get_logger("lightshuttle.api")

ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Invalid input"},
    404: {"model": ErrorResponse, "description": "App not found"},
    500: {"model": ErrorResponse, "description": "Internal server error"},
}


# -------- dependencies --------

def get_runtime(request: Request) -> RuntimeClient:
    return request.app.state.runtime


def require_read(request: Request) -> None:
    namespace = getattr(request.state, "namespace", None)
    if namespace is not None and not namespace.can_read():
        raise Forbidden(f"Namespace '{namespace.name}' has no read permission")


def require_write(request: Request) -> None:
    namespace = getattr(request.state, "namespace", None)
    if namespace is not None and not namespace.can_write():
        raise Forbidden(f"Namespace '{namespace.name}' has no write permission")


apps_router = APIRouter(prefix="/apps", tags=["Apps"], responses=ERROR_RESPONSES)
system_router = APIRouter(tags=["System"])


# -------- apps --------

@apps_router.post(
    "",
    status_code=201,
    response_model=CreateAppResponse,
    dependencies=[Depends(require_write)],
)
def create_app_container(body: CreateAppRequest, runtime: RuntimeClient = Depends(get_runtime)):
    """Launch a new container from the given configuration."""
    container_id = runtime.run(body.to_config())
    return CreateAppResponse(status="success", container_id=container_id)


@apps_router.get("", response_model=AppListResponse, dependencies=[Depends(require_read)])
def list_app_containers(
    page: int = Query(DEFAULT_PAGE, ge=1, description="1-indexed page number"),
    limit: int = Query(DEFAULT_LIMIT, ge=1, description="Items per page"),
    search: Optional[str] = Query(None, description="Case-insensitive substring of the name"),
    runtime: RuntimeClient = Depends(get_runtime),
):
    """List containers, filtered by name and paginated."""
    result = list_apps(runtime, page=page, limit=limit, search=search)
    return AppListResponse(total=result.total, page=result.page, limit=result.limit, items=result.items)


@apps_router.get("/{name}", response_model=AppInstance, dependencies=[Depends(require_read)])
def get_app_container(name: str, runtime: RuntimeClient = Depends(get_runtime)):
    return runtime.get(name)


@apps_router.get(
    "/{name}/logs",
    response_class=PlainTextResponse,
    dependencies=[Depends(require_read)],
)
def get_app_logs(name: str, runtime: RuntimeClient = Depends(get_runtime)):
    """Raw combined output of the container."""
    return PlainTextResponse(runtime.logs(name))


@apps_router.get("/{name}/status", response_model=StatusResponse, dependencies=[Depends(require_read)])
def get_app_status(name: str, runtime: RuntimeClient = Depends(get_runtime)):
    """Runtime state string, e.g. ``running`` or ``exited``."""
    return StatusResponse(status=runtime.status(name))


@apps_router.post("/{name}/start", response_model=StatusResponse, dependencies=[Depends(require_write)])
def start_app_container(name: str, runtime: RuntimeClient = Depends(get_runtime)):
    runtime.start(name)
    return StatusResponse(status="started")


@apps_router.post("/{name}/stop", response_model=StatusResponse, dependencies=[Depends(require_write)])
def stop_app_container(name: str, runtime: RuntimeClient = Depends(get_runtime)):
    runtime.stop(name)
    return StatusResponse(status="stopped")


@apps_router.post(
    "/{name}/recreate",
    response_model=ContainerIdResponse,
    dependencies=[Depends(require_write)],
)
def recreate_app_container(
    name: str,
    body: Optional[RecreateRequest] = Body(default=None),
    runtime: RuntimeClient = Depends(get_runtime),
):
    """Remove the container and relaunch it with its observed configuration.

    Not atomic: if the relaunch fails the container stays removed.
    """
    overrides = body.to_overrides() if body is not None else None
    container_id = Recreator(runtime).recreate(name, overrides)
    return ContainerIdResponse(container_id=container_id)


@apps_router.delete("/{name}", status_code=204, dependencies=[Depends(require_write)])
def delete_app_container(name: str, runtime: RuntimeClient = Depends(get_runtime)):
    runtime.remove(name)
    return Response(status_code=204)


# -------- system --------

@system_router.get("/health", response_model=HealthResponse)
def health():
    """Basic health check - just returns OK if the service is running"""
    return HealthResponse(status="ok")


@system_router.get("/version", response_model=VersionResponse)
def version():
    return VersionResponse(version=__version__)


@system_router.get("/metrics", response_class=Response)
def metrics(request: Request):
    """Prometheus exposition of the request metrics."""
    request_metrics = request.app.state.metrics
    return Response(content=request_metrics.render(), media_type=request_metrics.content_type)


__all__ = ["apps_router", "system_router", "get_runtime"]
