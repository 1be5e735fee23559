"""
Core container lifecycle logic for LightShuttle.

This module contains the runtime abstraction, the recreate orchestrator and
the listing logic.
"""

from __future__ import annotations

from lightshuttle.core.listing import Page, list_apps, paginate
from lightshuttle.core.models import AppInstance, AppStatus, ContainerConfig, InspectRecord
from lightshuttle.core.recreate import RecreateOverrides, Recreator
from lightshuttle.core.runtime import RuntimeClient, ShellRuntimeClient, create_runtime_client

__all__ = [
    "AppInstance",
    "AppStatus",
    "ContainerConfig",
    "InspectRecord",
    "Page",
    "RecreateOverrides",
    "Recreator",
    "RuntimeClient",
    "ShellRuntimeClient",
    "create_runtime_client",
    "list_apps",
    "paginate",
]
