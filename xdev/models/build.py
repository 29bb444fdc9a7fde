"""Build-related data models."""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from xdev.core.exceptions.errors import ConfigurationError, NonZeroExitError


class BuildMode(str, Enum):
    """Toolchain build mode."""

    DEBUG = "debug"
    RELEASE = "release"

    @classmethod
    def parse(cls, value: "str | BuildMode") -> "BuildMode":
        """Parse a build mode, rejecting unknown values."""
        try:
            return cls(value)
        except ValueError as e:
            raise ConfigurationError(
                f"Unknown build mode: {value!r}. Must be one of "
                f"{[m.value for m in cls]}",
                config_key="build_mode",
            ) from e


class ExecutionMode(str, Enum):
    """Where the build plan is executed."""

    DOCKER = "docker"
    HOST = "host"

    @classmethod
    def parse(cls, value: "str | ExecutionMode") -> "ExecutionMode":
        """Parse an execution mode, rejecting unknown values."""
        try:
            return cls(value)
        except ValueError as e:
            raise ConfigurationError(
                f"Unknown compiler environment: {value!r}. Must be one of "
                f"{[m.value for m in cls]}",
                config_key="compiler",
            ) from e


class BuildConfig(BaseModel):
    """Fully resolved build configuration.

    Flag order is significant: library flags must follow object flags, so
    the tuples are kept exactly in resolution order.
    """

    model_config = ConfigDict(frozen=True)

    cxx_flags: tuple[str, ...] = Field(description="Compiler flags in order")
    ld_flags: tuple[str, ...] = Field(description="Linker flags in order")
    cc_image: str = Field(description="Toolchain image")
    use_precompiled_sdk: bool = Field(default=True)
    no_entry: bool = Field(default=True)
    build_mode: BuildMode = Field(default=BuildMode.RELEASE)
    execution_mode: ExecutionMode = Field(default=ExecutionMode.DOCKER)
    xdev_root: str = Field(
        default="",
        description="SDK root the loader and runner work against",
    )


class DependencyDesc(BaseModel):
    """A named group of build inputs, e.g. the SDK or a set of submodules."""

    model_config = ConfigDict(frozen=True)

    name: str
    modules: tuple[str, ...] = ()
    path: str | None = Field(
        default=None,
        description="Source root of the dependency, if not the package itself",
    )


class PackageDesc(BaseModel):
    """Package description as declared in ``xdev.toml``."""

    name: str
    addons: list[DependencyDesc] = Field(default_factory=list)


@dataclass
class ExecutionResult:
    """Outcome of a pipeline run.

    Attributes:
        exit_code: Exit status of the toolchain or analyzer.
        artifact_path: Produced artifact, when the run created one.
    """

    exit_code: int = 0
    artifact_path: Path | None = None

    @property
    def success(self) -> bool:
        return self.exit_code == 0

    def check(self) -> "ExecutionResult":
        """Raise NonZeroExitError unless the run succeeded."""
        if self.exit_code != 0:
            raise NonZeroExitError(self.exit_code)
        return self
