"""Capabilities the build pipeline consumes from external collaborators.

Package loading and build-plan generation live outside xdev. The pipeline
only depends on the narrow method sets declared here and never inspects
the objects these collaborators return.
"""

from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol, TextIO, runtime_checkable

from xdev.models.build import DependencyDesc, ExecutionResult


@runtime_checkable
class PackageRef(Protocol):
    """A loaded package with its resolved dependency graph."""

    @property
    def name(self) -> str: ...


@runtime_checkable
class BuildPlan(Protocol):
    """A materialized set of compile and link actions."""

    def emit_plan(self, sink: TextIO) -> None: ...

    def emit_compile_database(self, sink: TextIO) -> None: ...


@dataclass(frozen=True)
class PlanSettings:
    """Inputs a planner binds into the build plan."""

    cxx_flags: tuple[str, ...]
    ld_flags: tuple[str, ...]
    cache_dir: Path
    output: Path | None = None


@runtime_checkable
class PackageLoader(Protocol):
    def load(self, root: Path, addons: Sequence[DependencyDesc]) -> PackageRef: ...


@runtime_checkable
class BuildPlanner(Protocol):
    def parse(self, package: PackageRef, settings: PlanSettings) -> BuildPlan: ...


@dataclass(frozen=True)
class RunnerOptions:
    """Everything a runner needs to execute a build plan.

    Attributes:
        image: Toolchain image (docker mode only).
        package: Entry package of the build.
        root: Package root; the plan runs from here.
        cache_dir: Shared build cache.
        xdev_root: SDK root.
        output: Artifact path, if any.
        make_flags: Extra flags passed to make.
        use_docker: Run inside the toolchain container.
        use_precompiled_sdk: Link against the prebuilt SDK.
    """

    image: str
    package: PackageRef
    root: Path
    cache_dir: Path
    xdev_root: str = ""
    output: Path | None = None
    make_flags: tuple[str, ...] = field(default_factory=tuple)
    use_docker: bool = True
    use_precompiled_sdk: bool = True


@runtime_checkable
class Runner(Protocol):
    async def make(self, plan_file: Path) -> ExecutionResult: ...
