from __future__ import annotations

import subprocess
from typing import List, Sequence, Type

from lightshuttle.core.errors import (
    ContainerNotFound,
    LightShuttleError,
    RuntimeCommandFailed,
    Unexpected,
)
from lightshuttle.core.models import (
    AppInstance,
    AppStatus,
    ContainerConfig,
    InspectRecord,
    parse_port,
)
from lightshuttle.core.runtime.base import RuntimeClient
from lightshuttle.core.runtime.classifier import (
    NOT_FOUND_PHRASES,
    PHRASE_TABLE,
    PhraseTable,
    classify_failure,
)
from lightshuttle.utils.logger import get_logger

logger = get_logger("lightshuttle.runtime.shell")

LIST_FORMAT = "{{.ID}};{{.Names}};{{.Image}};{{.Status}};{{.Ports}}"
LIST_FIELDS = 5


def parse_status(status: str) -> AppStatus:
    """``Up 3 minutes`` -> running, ``Exited (0) ...``/``Created`` -> stopped.

    ``Up 3 minutes (Paused)`` is stopped, as ``inspect`` reports it.
    """
    status = status.strip()
    if status.endswith("(Paused)"):
        return AppStatus.STOPPED
    if status.startswith("Up"):
        return AppStatus.RUNNING
    if status.startswith("Exited") or status.startswith("Created"):
        return AppStatus.STOPPED
    return AppStatus.ERROR


def parse_ports(ports_info: str) -> List[int]:
    """Host ports from ``0.0.0.0:8080->80/tcp, :::8080->80/tcp``."""
    out: List[int] = []
    for entry in ports_info.split(","):
        entry = entry.strip()
        if "->" not in entry:
            # exposed but unpublished, e.g. "80/tcp"
            continue
        host_side = entry.split("->", 1)[0]
        port = parse_port(host_side.rsplit(":", 1)[-1])
        if port is not None and port not in out:
            out.append(port)
    return out


def parse_list_output(stdout: str) -> List[AppInstance]:
    """One AppInstance per well-formed line; malformed lines are skipped."""
    instances: List[AppInstance] = []
    for line in stdout.splitlines():
        if not line.strip():
            continue
        parts = line.split(";")
        if len(parts) != LIST_FIELDS:
            logger.debug(f"Skipping unparsable list line: {line!r}")
            continue
        _, name, image, status, ports = parts
        instances.append(AppInstance(
            id=len(instances) + 1,
            name=name,
            image=image,
            status=parse_status(status),
            ports=parse_ports(ports),
            created_at="",
        ))
    return instances


def build_run_args(cfg: ContainerConfig) -> List[str]:
    args = ["run", "-d", "--name", cfg.name]
    for host_port in cfg.host_ports:
        args += ["-p", f"{host_port}:{cfg.container_port}"]
    for key, value in cfg.labels.items():
        args += ["--label", f"{key}={value}"]
    for key, value in cfg.env.items():
        args += ["-e", f"{key}={value}"]
    for volume in cfg.volumes:
        args += ["-v", volume]
    if cfg.restart_policy:
        args += ["--restart", cfg.restart_policy]
    args.append(cfg.image)
    return args


class ShellRuntimeClient(RuntimeClient):
    """Runtime backend that shells out to the docker CLI.

    Each call spawns one process and waits for it; there is no timeout and
    no retry.
    """

    name = "cli"

    def __init__(self, binary: str = "docker") -> None:
        self.binary = binary

    def _run_command(
        self,
        args: Sequence[str],
        *,
        default: Type[LightShuttleError] = Unexpected,
        merge_stderr: bool = False,
        phrases: PhraseTable = PHRASE_TABLE,
    ) -> str:
        cmd = [self.binary, *args]
        logger.debug(f"Executing: {' '.join(cmd)}")
        try:
            result = subprocess.run(
                cmd,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT if merge_stderr else subprocess.PIPE,
                text=True,
                encoding="utf-8",
                errors="replace",
            )
        except FileNotFoundError:
            logger.error(f"Runtime binary not found: {self.binary}")
            raise RuntimeCommandFailed(f"{self.binary}: command not found")
        except OSError as e:
            logger.error(f"Failed to execute {self.binary}: {e}")
            raise RuntimeCommandFailed(str(e))

        if result.returncode != 0:
            diagnostic = result.stdout if merge_stderr else result.stderr
            error = classify_failure(diagnostic or "", default=default, phrases=phrases)
            logger.warning(f"{self.binary} {args[0]} failed ({result.returncode}): {error!r}")
            raise error

        return result.stdout

    def _run(self, cfg: ContainerConfig) -> str:
        logger.info(f"Running container {cfg.name} from image {cfg.image}")
        output = self._run_command(build_run_args(cfg), phrases=())
        container_id = output.strip()
        logger.info(f"Container {cfg.name} started: {container_id}")
        return container_id

    def start(self, name: str) -> None:
        self._run_command(["start", name], phrases=NOT_FOUND_PHRASES)
        logger.info(f"Container {name} started")

    def stop(self, name: str) -> None:
        self._run_command(["stop", name], phrases=NOT_FOUND_PHRASES)
        logger.info(f"Container {name} stopped")

    def inspect(self, name: str) -> InspectRecord:
        # any failed lookup means the name is unknown unless the text says otherwise
        output = self._run_command(["inspect", "--type", "container", name], default=ContainerNotFound)
        return InspectRecord.from_json(output)

    def remove(self, name: str) -> None:
        # recent CLIs exit 0 for `rm -f` on an unknown name
        self._run_command(
            ["inspect", "--type", "container", "--format", "{{.Id}}", name],
            default=ContainerNotFound,
        )
        self._run_command(["rm", "-f", name])
        logger.info(f"Container {name} removed")

    def logs(self, name: str) -> str:
        return self._run_command(["logs", name], merge_stderr=True)

    def list(self) -> List[AppInstance]:
        output = self._run_command(["ps", "-a", "--format", LIST_FORMAT])
        return parse_list_output(output)


__all__ = [
    "ShellRuntimeClient",
    "build_run_args",
    "parse_list_output",
    "parse_ports",
    "parse_status",
]
