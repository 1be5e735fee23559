"""
Recreate: destroy a named container and relaunch it with the configuration
observed on the runtime.

Sequence: inspect, extract, (override), validate, remove, run. Nothing is
persisted between the steps. A failure after ``remove`` succeeded leaves the
container absent; the reconstructed config is logged so it can be relaunched
by hand.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Dict, List, Optional, Tuple

from lightshuttle.core.errors import LightShuttleError, OutputParseError
from lightshuttle.core.models import ContainerConfig, InspectRecord, parse_port
from lightshuttle.core.runtime.base import RuntimeClient
from lightshuttle.utils.logger import get_logger

logger = get_logger("lightshuttle.recreate")


@dataclass
class RecreateOverrides:
    """Facets to replace wholesale instead of copying them from the old container."""

    image: Optional[str] = None
    host_ports: Optional[List[int]] = None
    container_port: Optional[int] = None
    labels: Optional[Dict[str, str]] = None
    env: Optional[Dict[str, str]] = None
    volumes: Optional[List[str]] = None
    restart_policy: Optional[str] = None

    def apply(self, cfg: ContainerConfig) -> ContainerConfig:
        changes = {k: v for k, v in vars(self).items() if v is not None}
        if "host_ports" in changes:
            changes["host_ports"] = list(dict.fromkeys(changes["host_ports"]))
        return replace(cfg, **changes)


def _extract_ports(record: InspectRecord) -> Tuple[Optional[int], List[int]]:
    """First parsable container port and every host port bound to it."""
    container_port: Optional[int] = None
    host_ports: List[int] = []
    for key, bindings in record.port_map.items():
        cport = parse_port(key)
        if cport is None:
            continue
        if container_port is None:
            container_port = cport
        if cport != container_port:
            continue
        for binding in bindings:
            hport = parse_port(binding.host_port)
            if hport is not None and hport not in host_ports:
                host_ports.append(hport)
    return container_port, host_ports


def _extract_env(entries: Optional[List[str]]) -> Dict[str, str]:
    env: Dict[str, str] = {}
    for entry in entries or []:
        key, _, value = entry.partition("=")
        if key:
            env[key] = value
    return env


def extract_config(name: str, record: InspectRecord) -> ContainerConfig:
    """Rebuild the ContainerConfig a container was launched with."""
    config = record.config
    if config is None or not config.image:
        raise OutputParseError(f"Missing image in inspection record of '{name}'")

    container_port, host_ports = _extract_ports(record)

    labels = {k: v or "" for k, v in (config.labels or {}).items()}

    volumes: List[str] = []
    restart_policy: Optional[str] = None
    if record.host_config is not None:
        volumes = list(record.host_config.binds or [])
        if record.host_config.restart_policy is not None:
            # "" means no policy was set
            restart_policy = record.host_config.restart_policy.name or None

    return ContainerConfig(
        name=name,
        image=config.image,
        host_ports=host_ports,
        container_port=container_port,
        labels=labels,
        env=_extract_env(config.env),
        volumes=volumes,
        restart_policy=restart_policy,
    )


class Recreator:
    """Runs the recreate sequence against one runtime client."""

    def __init__(self, runtime: RuntimeClient) -> None:
        self.runtime = runtime

    def plan(self, name: str, overrides: Optional[RecreateOverrides] = None) -> ContainerConfig:
        """Inspect, extract, override and validate without touching the container."""
        record = self.runtime.inspect(name)
        cfg = extract_config(name, record)
        if overrides is not None:
            cfg = overrides.apply(cfg)
        cfg.validate()
        return cfg

    def recreate(self, name: str, overrides: Optional[RecreateOverrides] = None) -> str:
        cfg = self.plan(name, overrides)
        logger.info(f"Recreating container {name} from image {cfg.image}")

        self.runtime.remove(name)
        try:
            container_id = self.runtime.run(cfg)
        except LightShuttleError as e:
            logger.error(
                f"Container {name} was removed but could not be relaunched: {e!r}; "
                f"config was {cfg}"
            )
            raise

        logger.info(f"Container {name} recreated: {container_id}")
        return container_id


__all__ = ["Recreator", "RecreateOverrides", "extract_config"]
