"""
Request pipeline.

Order, outermost first: authentication, trace context, request metrics,
origin check, CORS, then route dispatch. Starlette runs the most recently
added middleware first, so :func:`install_pipeline` adds them innermost
first.
"""

from __future__ import annotations

import time
from typing import Sequence

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from lightshuttle.api.errors import TRACE_HEADER, error_response, trace_id_for
from lightshuttle.auth.authenticator import Authenticator
from lightshuttle.core.errors import Forbidden, LightShuttleError
from lightshuttle.monitoring.metrics import RequestMetrics
from lightshuttle.utils.logger import get_logger

logger = get_logger("lightshuttle.api")

UNMATCHED_ROUTE = "unmatched"


def _is_preflight(request: Request) -> bool:
    return request.method == "OPTIONS" and "access-control-request-method" in request.headers


def _route_label(request: Request) -> str:
    """Matched route template, so path parameters never become label values."""
    route = request.scope.get("route")
    return getattr(route, "path", None) or UNMATCHED_ROUTE


def install_pipeline(
    app: FastAPI,
    *,
    authenticator: Authenticator,
    metrics: RequestMetrics,
    allowed_origins: Sequence[str] = (),
) -> None:
    allowed = tuple(allowed_origins)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(allowed) or ["*"],
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[TRACE_HEADER],
    )

    if allowed:
        @app.middleware("http")
        async def check_origin(request: Request, call_next):
            origin = request.headers.get("origin")
            if origin is not None and origin not in allowed:
                logger.warning(f"Rejected request from origin {origin}")
                return error_response(request, Forbidden(f"Origin '{origin}' is not allowed"))
            return await call_next(request)

    @app.middleware("http")
    async def record_metrics(request: Request, call_next):
        start_time = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            metrics.observe(request.method, _route_label(request), 500, time.perf_counter() - start_time)
            raise
        metrics.observe(request.method, _route_label(request), response.status_code, time.perf_counter() - start_time)
        return response

    @app.middleware("http")
    async def assign_trace_id(request: Request, call_next):
        trace_id = trace_id_for(request)
        response = await call_next(request)
        response.headers[TRACE_HEADER] = trace_id
        return response

    @app.middleware("http")
    async def authenticate(request: Request, call_next):
        try:
            # a broken configuration fails preflights too
            authenticator.check_configured()
            namespace = None if _is_preflight(request) else authenticator.authenticate(request.headers)
        except LightShuttleError as e:
            return error_response(request, e)
        request.state.namespace = namespace
        return await call_next(request)


__all__ = ["install_pipeline"]
