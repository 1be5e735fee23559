from __future__ import annotations

from typing import Optional

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError

from lightshuttle import __version__
from lightshuttle.api.errors import (
    lightshuttle_error_handler,
    unhandled_error_handler,
    validation_error_handler,
)
from lightshuttle.api.middleware import install_pipeline
from lightshuttle.api.routes import apps_router, system_router
from lightshuttle.auth.authenticator import build_authenticator
from lightshuttle.auth.namespace import KeyStore, load_key_store
from lightshuttle.config import API_PREFIX, Settings
from lightshuttle.core.errors import LightShuttleError
from lightshuttle.core.runtime import RuntimeClient, create_runtime_client
from lightshuttle.monitoring.metrics import RequestMetrics
from lightshuttle.utils.logger import get_logger

logger = get_logger("lightshuttle.api")


def create_app(
    settings: Optional[Settings] = None,
    *,
    runtime: Optional[RuntimeClient] = None,
    key_store: Optional[KeyStore] = None,
) -> FastAPI:
    """Build the API with its pipeline.

    Settings, the key store, the authenticator and the metrics registry are
    resolved here once and never change for the life of the app.
    """
    settings = settings or Settings.from_env()
    if runtime is None:
        runtime = create_runtime_client(settings.runtime_backend, docker_bin=settings.docker_bin)
    if key_store is None:
        key_store = load_key_store(settings.api_keys_file)

    authenticator = build_authenticator(settings.jwt_secret, key_store)
    metrics = RequestMetrics()

    app = FastAPI(title="LightShuttle API", version=__version__)
    app.state.settings = settings
    app.state.runtime = runtime
    app.state.authenticator = authenticator
    app.state.metrics = metrics

    app.add_exception_handler(LightShuttleError, lightshuttle_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    install_pipeline(
        app,
        authenticator=authenticator,
        metrics=metrics,
        allowed_origins=settings.allowed_origins,
    )

    app.include_router(apps_router, prefix=API_PREFIX)
    app.include_router(system_router, prefix=API_PREFIX)

    logger.info(
        f"LightShuttle API ready (runtime={runtime.name}, auth={authenticator.name}, "
        f"origin check={'on' if settings.allowed_origins else 'off'})"
    )
    return app


__all__ = ["create_app"]
