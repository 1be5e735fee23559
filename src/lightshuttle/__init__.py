"""
LightShuttle - container lifecycle management over a local container runtime.

This package provides:
- A runtime client abstraction (docker CLI or Docker Engine API backends)
- Recreation of containers from their observed configuration
- Paginated, filtered container listings
- A FastAPI HTTP API with pluggable authentication, tracing and metrics
"""

from __future__ import annotations

__version__ = "0.1.0"

# Core exports
from lightshuttle.core.models import AppInstance, AppStatus, ContainerConfig
from lightshuttle.core.runtime import RuntimeClient, create_runtime_client
from lightshuttle.utils.logger import get_logger

__all__ = [
    "AppInstance",
    "AppStatus",
    "ContainerConfig",
    "RuntimeClient",
    "create_runtime_client",
    "get_logger",
    "__version__",
]
