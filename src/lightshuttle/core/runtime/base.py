from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List

from lightshuttle.core.errors import OutputParseError
from lightshuttle.core.models import AppInstance, ContainerConfig, InspectRecord


class RuntimeClient(ABC):
    """Capability set every container runtime backend provides.

    Route handlers and the recreate orchestrator only ever talk to this
    interface. Backends raise the kinds in :mod:`lightshuttle.core.errors`.
    """

    name = "runtime"

    def run(self, cfg: ContainerConfig) -> str:
        """Validate ``cfg`` and launch a new container, returning its id.

        Validation happens before any runtime call, so a rejected config
        never leaves partial state behind.
        """
        cfg.validate()
        return self._run(cfg)

    @abstractmethod
    def _run(self, cfg: ContainerConfig) -> str:
        """Launch an already validated config."""

    @abstractmethod
    def start(self, name: str) -> None:
        """Start an existing container."""

    @abstractmethod
    def stop(self, name: str) -> None:
        """Stop a running container."""

    @abstractmethod
    def inspect(self, name: str) -> InspectRecord:
        """Return the inspection record of one container."""

    @abstractmethod
    def remove(self, name: str) -> None:
        """Remove a container whether it is running or not."""

    @abstractmethod
    def logs(self, name: str) -> str:
        """Return the combined stdout/stderr of a container as raw text."""

    @abstractmethod
    def list(self) -> List[AppInstance]:
        """List every container the runtime knows about."""

    # -------- derived helpers --------

    def get(self, name: str) -> AppInstance:
        return self.inspect(name).to_instance()

    def status(self, name: str) -> str:
        record = self.inspect(name)
        if record.state is None or not record.state.status:
            raise OutputParseError(f"No state reported for '{name}'")
        return record.state.status
