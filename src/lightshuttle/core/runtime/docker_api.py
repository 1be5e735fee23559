from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional

import docker
import requests
from docker.errors import APIError, DockerException, NotFound
from docker.models.containers import Container

from lightshuttle.core.errors import (
    ContainerNotFound,
    OutputParseError,
    RuntimeCommandFailed,
    Unexpected,
)
from lightshuttle.core.models import AppInstance, ContainerConfig, InspectRecord
from lightshuttle.core.runtime.base import RuntimeClient
from lightshuttle.utils.logger import get_logger

logger = get_logger("lightshuttle.runtime.docker")


@contextmanager
def _translate_errors() -> Iterator[None]:
    """Map docker SDK exceptions onto the core failure kinds."""
    try:
        yield
    except NotFound as e:
        raise ContainerNotFound(str(e.explanation or e)) from e
    except APIError as e:
        raise Unexpected(str(e.explanation or e)) from e
    except requests.exceptions.ConnectionError as e:
        logger.error(f"Docker daemon unreachable: {e}")
        raise RuntimeCommandFailed(str(e)) from e
    except DockerException as e:
        raise RuntimeCommandFailed(str(e)) from e


def _port_map(cfg: ContainerConfig) -> Optional[Dict[str, List[int]]]:
    if not cfg.host_ports:
        return None
    return {f"{cfg.container_port}/tcp": list(cfg.host_ports)}


class DockerApiRuntimeClient(RuntimeClient):
    """Runtime backend talking to the Docker Engine API through the docker SDK.

    The client is created on first use, so the API can start while the
    daemon is still down.
    """

    name = "docker"

    def __init__(self, client: Optional[docker.DockerClient] = None) -> None:
        self.client = client

    def _ensure_docker_client(self) -> docker.DockerClient:
        if self.client is None:
            with _translate_errors():
                client = docker.from_env()
                client.ping()
            logger.info("Docker client initialized successfully")
            self.client = client
        return self.client

    def _get(self, name: str) -> Container:
        client = self._ensure_docker_client()
        with _translate_errors():
            return client.containers.get(name)

    def _run(self, cfg: ContainerConfig) -> str:
        client = self._ensure_docker_client()
        logger.info(f"Running container {cfg.name} from image {cfg.image}")
        logger.debug(f"Container config - env: {cfg.env}, ports: {cfg.host_ports}, volumes: {cfg.volumes}")

        run_kwargs: Dict[str, Any] = {}
        if cfg.restart_policy:
            run_kwargs["restart_policy"] = {"Name": cfg.restart_policy}

        with _translate_errors():
            container = client.containers.run(
                image=cfg.image,
                name=cfg.name,
                detach=True,
                environment=cfg.env or None,
                ports=_port_map(cfg),
                labels=cfg.labels or None,
                volumes=list(cfg.volumes) or None,
                **run_kwargs,
            )
        logger.info(f"Container created: {container.id} ({cfg.name})")
        return container.id

    def start(self, name: str) -> None:
        container = self._get(name)
        with _translate_errors():
            container.start()
        logger.info(f"Container {name} started")

    def stop(self, name: str) -> None:
        container = self._get(name)
        with _translate_errors():
            container.stop()
        logger.info(f"Container {name} stopped")

    def inspect(self, name: str) -> InspectRecord:
        return InspectRecord.from_attrs(self._get(name).attrs)

    def remove(self, name: str) -> None:
        container = self._get(name)
        with _translate_errors():
            container.remove(force=True)
        logger.info(f"Container {name} removed")

    def logs(self, name: str) -> str:
        container = self._get(name)
        with _translate_errors():
            raw = container.logs(stdout=True, stderr=True)
        return raw.decode("utf-8", errors="replace")

    def list(self) -> List[AppInstance]:
        client = self._ensure_docker_client()
        with _translate_errors():
            containers = client.containers.list(all=True)

        instances: List[AppInstance] = []
        for c in containers:
            try:
                record = InspectRecord.from_attrs(c.attrs)
            except OutputParseError as e:
                # partial results are fine for listings
                logger.debug(f"Skipping container {getattr(c, 'id', '?')}: {e}")
                continue
            instances.append(record.to_instance(len(instances) + 1))
        return instances


__all__ = ["DockerApiRuntimeClient"]
