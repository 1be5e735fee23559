"""
API module for LightShuttle.

This module provides the FastAPI-based REST API for container lifecycle management.
"""

from __future__ import annotations

from typing import Optional

__all__ = ["run_server"]


def run_server(host: Optional[str] = None, port: Optional[int] = None) -> None:
    """Run the API server."""
    import uvicorn

    from lightshuttle.config import Settings

    settings = Settings.from_env()
    uvicorn.run(
        "lightshuttle.api.app:create_app",
        factory=True,
        host=host or settings.host,
        port=port or settings.port,
        log_level="info",
        access_log=True,
    )
