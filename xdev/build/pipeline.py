"""Whole-package build pipeline.

Sequences a build from package description to artifact:

1. resolve the package root and the build cache
2. load the package and its dependency graph
3. derive the output artifact path
4. parse a build plan bound to the resolved flags
5. emit the plan (plan-only mode) or a compile database, if requested
6. materialize the plan to a transient file and run it

The package root is threaded explicitly through every step; the process
working directory is never changed, so builds can run concurrently.
"""

import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import TextIO

from xdev.build.interfaces import (
    BuildPlan,
    BuildPlanner,
    PackageLoader,
    PackageRef,
    PlanSettings,
    RunnerOptions,
)
from xdev.build.package import MAIN_PACKAGE, dependency_descriptors, parse_package_desc
from xdev.build.registry import RunnerFactory
from xdev.build.runner import MakeRunner
from xdev.core.exceptions.errors import ConfigurationError, LoaderError, PlanError, XdevError
from xdev.core.logger.logger import get_logger
from xdev.models.build import BuildConfig, ExecutionMode, ExecutionResult

logger = get_logger(__name__)

PLAN_FILE = ".Makefile"
COMPILE_DATABASE_FILE = "compile_commands.json"
DEFAULT_CACHE_DIR = ".xdev-cache"


@dataclass
class BuildOptions:
    """Per-invocation build options.

    Attributes:
        output: Artifact path. Relative paths resolve against the package root.
        plan_only: Emit the build plan and stop.
        compile_database: Also write compile_commands.json into the package root.
        make_flags: Extra make flags, whitespace separated.
        submodules: Submodules to build as the ``self`` dependency.
        cache_dir: Build cache override (``XDEV_CACHE``).
        plan_sink: Destination of the plan in plan-only mode. Defaults to stdout.
    """

    output: Path | None = None
    plan_only: bool = False
    compile_database: bool = False
    make_flags: str = ""
    submodules: list[str] = field(default_factory=list)
    cache_dir: Path | None = None
    plan_sink: TextIO | None = None


def resolve_cache_dir(override: Path | None = None) -> Path:
    """Determine and create the build cache directory.

    Args:
        override: Explicit cache directory; defaults to ``~/.xdev-cache``.

    Returns:
        Absolute cache directory path, guaranteed to exist.

    Raises:
        ConfigurationError: If the directory cannot be determined or created.
    """
    try:
        cache_dir = override.resolve() if override else Path.home() / DEFAULT_CACHE_DIR
        cache_dir.mkdir(parents=True, exist_ok=True)
    except (OSError, RuntimeError) as e:
        raise ConfigurationError(
            f"Cannot create build cache directory: {e}",
            config_key="XDEV_CACHE",
        ) from e
    return cache_dir


class BuildPipeline:
    """Builds a package into a WebAssembly artifact."""

    def __init__(
        self,
        config: BuildConfig,
        loader: PackageLoader,
        planner: BuildPlanner,
        options: BuildOptions | None = None,
        runner_factory: RunnerFactory = MakeRunner,
    ):
        """Initialize the pipeline.

        Args:
            config: Resolved build configuration.
            loader: Package loader collaborator.
            planner: Build planner collaborator.
            options: Per-invocation options.
            runner_factory: Builds the runner that executes the plan.
        """
        self.config = config
        self.loader = loader
        self.planner = planner
        self.options = options or BuildOptions()
        self.runner_factory = runner_factory

    async def build(self, root_dir: Path) -> ExecutionResult:
        """Build the package rooted at ``root_dir``.

        Args:
            root_dir: Package root.

        Returns:
            ExecutionResult of the runner, or an empty success in plan-only mode.

        Raises:
            XdevError: If any step fails; nothing is retried.
        """
        root = root_dir.resolve()
        cache_dir = resolve_cache_dir(self.options.cache_dir)
        logger.info(f"Building package at {root} ({self.config.build_mode.value})")
        logger.debug(f"Build cache: {cache_dir}")

        package = self._load_package(root)
        output = self._resolve_output(root, package)
        plan = self._parse_plan(package, cache_dir, output)

        if self.options.plan_only:
            self._emit(plan.emit_plan, self.options.plan_sink or sys.stdout)
            return ExecutionResult(exit_code=0)

        if self.options.compile_database:
            self._write_compile_database(root, plan)

        plan_file = root / PLAN_FILE
        try:
            self._write_file(plan_file, plan.emit_plan)

            runner = self.runner_factory(
                RunnerOptions(
                    image=self.config.cc_image,
                    package=package,
                    root=root,
                    cache_dir=cache_dir,
                    xdev_root=self.config.xdev_root,
                    output=output,
                    make_flags=tuple(self.options.make_flags.split()),
                    use_docker=self.config.execution_mode is ExecutionMode.DOCKER,
                    use_precompiled_sdk=self.config.use_precompiled_sdk,
                )
            )
            result = await runner.make(plan_file)
        finally:
            self._remove_plan_file(plan_file)

        if result.success:
            logger.info(f"Build succeeded: {result.artifact_path or root}")
        return result

    def _load_package(self, root: Path) -> PackageRef:
        desc = parse_package_desc(root)
        addons = dependency_descriptors(desc, self.config, self.options.submodules)
        logger.debug(f"Dependencies of {desc.name}: {[a.name for a in addons]}")
        try:
            return self.loader.load(root, addons)
        except XdevError:
            raise
        except Exception as e:
            raise LoaderError(
                f"Failed to load package: {e}",
                package_path=str(root),
            ) from e

    def _resolve_output(self, root: Path, package: PackageRef) -> Path | None:
        output = self.options.output
        # main packages default to <dirname>.wasm
        if output is None and package.name == MAIN_PACKAGE:
            output = Path(root.name + ".wasm")
        if output is None:
            return None
        return output if output.is_absolute() else root / output

    def _parse_plan(
        self, package: PackageRef, cache_dir: Path, output: Path | None
    ) -> BuildPlan:
        settings = PlanSettings(
            cxx_flags=self.config.cxx_flags,
            ld_flags=self.config.ld_flags,
            cache_dir=cache_dir,
            output=output,
        )
        try:
            return self.planner.parse(package, settings)
        except XdevError:
            raise
        except Exception as e:
            raise PlanError(f"Failed to build plan: {e}") from e

    @staticmethod
    def _emit(emitter, sink: TextIO) -> None:
        try:
            emitter(sink)
        except XdevError:
            raise
        except Exception as e:
            raise PlanError(f"Failed to emit build plan: {e}") from e

    @classmethod
    def _write_file(cls, path: Path, emitter) -> None:
        try:
            with open(path, "w", encoding="utf-8") as f:
                cls._emit(emitter, f)
        except OSError as e:
            raise PlanError(
                f"Cannot write {path.name}: {e}",
                details={"path": str(path)},
            ) from e

    def _write_compile_database(self, root: Path, plan: BuildPlan) -> None:
        path = root / COMPILE_DATABASE_FILE
        self._write_file(path, plan.emit_compile_database)
        logger.info(f"Wrote {path}")

    @staticmethod
    def _remove_plan_file(plan_file: Path) -> None:
        try:
            plan_file.unlink(missing_ok=True)
        except OSError as e:
            logger.warning(f"Failed to remove {plan_file}: {e}")
