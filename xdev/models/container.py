"""Container lifecycle data models."""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class ContainerState(str, Enum):
    """Lifecycle state of a container owned by an executor."""

    CREATED = "created"
    STARTED = "started"
    EXITED = "exited"
    REMOVED = "removed"
    ABANDONED = "abandoned"


@dataclass(frozen=True)
class BindMount:
    """A host directory mounted into a container.

    The target defaults to the source path so that relative paths used by
    the command stay valid inside the container.
    """

    source: Path
    target: Path | None = None
    read_only: bool = False

    @property
    def container_path(self) -> Path:
        return self.target or self.source


@dataclass
class ContainerHandle:
    """A container created for one invocation."""

    id: str
    name: str
    image: str
    state: ContainerState = ContainerState.CREATED

    def mark_started(self) -> None:
        self.state = ContainerState.STARTED

    def mark_exited(self) -> None:
        self.state = ContainerState.EXITED

    def mark_removed(self) -> None:
        self.state = ContainerState.REMOVED

    def mark_abandoned(self) -> None:
        self.state = ContainerState.ABANDONED

    @property
    def short_id(self) -> str:
        return self.id[:12]
