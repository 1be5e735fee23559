"""
Main entry point for the LightShuttle server.
"""

from __future__ import annotations

from typing import Optional


def run(host: Optional[str] = None, port: Optional[int] = None) -> None:
    """Start the API server, falling back to BIND_ADDRESS for host and port."""
    from lightshuttle.api import run_server
    from lightshuttle.config import Settings
    from lightshuttle.utils.logger import logger

    settings = Settings.from_env()
    host = host or settings.host
    port = port or settings.port

    logger.info(f"LightShuttle API starting on http://{host}:{port}")
    run_server(host=host, port=port)


if __name__ == "__main__":
    run()
