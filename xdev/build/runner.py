"""Default runner executing a build plan with make."""

from pathlib import Path

from xdev.build.interfaces import RunnerOptions
from xdev.core.logger.logger import get_logger
from xdev.models.build import ExecutionResult
from xdev.models.container import BindMount
from xdev.runtime.container import ContainerExecutor
from xdev.runtime.host import HostExecutor

logger = get_logger(__name__)


class MakeRunner:
    """Runs ``make`` against a materialized build plan.

    In docker mode the command runs in the toolchain image with the package
    root, the build cache and (when building the SDK from source) the SDK
    root mounted at their host paths. Otherwise it runs on the host.
    """

    def __init__(
        self,
        options: RunnerOptions,
        container_executor: ContainerExecutor | None = None,
        host_executor: HostExecutor | None = None,
    ):
        self.options = options
        self.container_executor = container_executor or ContainerExecutor(name_prefix="xdev-build")
        self.host_executor = host_executor or HostExecutor()

    def make_command(self, plan_file: Path) -> list[str]:
        """Build the make invocation for a plan file."""
        opts = self.options
        cmd = [
            "make",
            "-f",
            str(plan_file),
            f"XROOT={opts.xdev_root}",
            f"XCACHE={opts.cache_dir}",
            f"USE_PRECOMPILED_SDK={1 if opts.use_precompiled_sdk else 0}",
        ]
        if opts.output:
            cmd.append(f"OUTPUT={opts.output}")
        cmd.extend(opts.make_flags)
        return cmd

    def mounts(self) -> list[BindMount]:
        opts = self.options
        mounts = [BindMount(opts.root), BindMount(opts.cache_dir)]
        if not opts.use_precompiled_sdk and opts.xdev_root:
            mounts.append(BindMount(Path(opts.xdev_root)))
        if opts.output and not opts.output.parent.is_relative_to(opts.root):
            mounts.append(BindMount(opts.output.parent))
        return mounts

    async def make(self, plan_file: Path) -> ExecutionResult:
        """Execute the plan.

        Args:
            plan_file: Materialized build plan.

        Returns:
            ExecutionResult; ``artifact_path`` is set when make succeeded.
        """
        cmd = self.make_command(plan_file)
        if self.options.use_docker:
            result = await self.container_executor.run(
                self.options.image,
                cmd,
                working_dir=self.options.root,
                mounts=self.mounts(),
            )
        else:
            result = await self.host_executor.run(cmd, working_dir=self.options.root)

        if result.success and self.options.output:
            result.artifact_path = self.options.output
        return result


def make_runner_factory(timeout: float | None = None):
    """MakeRunner factory whose executors share a wait timeout."""

    def factory(options: RunnerOptions) -> MakeRunner:
        return MakeRunner(
            options,
            container_executor=ContainerExecutor(name_prefix="xdev-build", timeout=timeout),
            host_executor=HostExecutor(timeout=timeout),
        )

    return factory
