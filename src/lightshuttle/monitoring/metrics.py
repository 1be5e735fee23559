"""
Prometheus request metrics.

Each application gets its own :class:`RequestMetrics` with a private
registry, created once in ``create_app`` and never swapped afterwards.
"""

from __future__ import annotations

import time
from typing import Optional

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    generate_latest,
)


class RequestMetrics:
    def __init__(self, registry: Optional[CollectorRegistry] = None) -> None:
        self.registry = registry or CollectorRegistry()
        self.request_count = Counter(
            "lightshuttle_http_requests_total",
            "Total HTTP requests",
            ["method", "path", "status"],
            registry=self.registry,
        )
        self.request_latency = Histogram(
            "lightshuttle_http_request_duration_seconds",
            "HTTP request latency",
            ["method", "path"],
            registry=self.registry,
        )
        self.start_time = Gauge(
            "lightshuttle_start_time_seconds",
            "Unix time the API process started",
            registry=self.registry,
        )
        self.start_time.set(time.time())

    def observe(self, method: str, path: str, status: int, latency: float) -> None:
        self.request_count.labels(method=method, path=path, status=str(status)).inc()
        self.request_latency.labels(method=method, path=path).observe(latency)

    def render(self) -> bytes:
        return generate_latest(self.registry)

    content_type = CONTENT_TYPE_LATEST


__all__ = ["RequestMetrics", "CONTENT_TYPE_LATEST"]
