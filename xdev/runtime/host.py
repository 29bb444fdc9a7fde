"""Host executor for running a command directly on the build machine."""

import asyncio
import os
from collections.abc import Sequence
from pathlib import Path

from xdev.core.exceptions.errors import ExecutionError
from xdev.core.logger.logger import get_logger
from xdev.models.build import ExecutionResult

logger = get_logger(__name__)


class HostExecutor:
    """Runs commands as host processes.

    The child inherits the standard streams, so toolchain output reaches
    the terminal as it is produced.
    """

    def __init__(self, timeout: float | None = None):
        """Initialize the executor.

        Args:
            timeout: Maximum seconds to wait for the process (None = no limit).
        """
        self.timeout = timeout

    async def run(
        self,
        command: Sequence[str],
        working_dir: Path,
        env: dict[str, str] | None = None,
    ) -> ExecutionResult:
        """Run a command and wait for it to exit.

        Args:
            command: Command and arguments.
            working_dir: Working directory of the process.
            env: Extra environment variables.

        Returns:
            ExecutionResult with the process exit code.

        Raises:
            ExecutionError: If the process cannot be started or outlives
                the timeout; a timed-out process is killed first.
        """
        cmd = list(command)
        logger.info(f"Running on host: {' '.join(cmd)}")

        process_env = os.environ.copy()
        if env:
            process_env.update(env)

        try:
            process = await asyncio.create_subprocess_exec(
                *cmd,
                cwd=working_dir,
                env=process_env,
            )
        except OSError as e:
            raise ExecutionError(
                f"Failed to start {cmd[0]}: {e}",
                command=cmd,
            ) from e

        try:
            returncode = await asyncio.wait_for(process.wait(), timeout=self.timeout)
        except asyncio.TimeoutError as e:
            await self._kill(process)
            raise ExecutionError(
                f"Command timed out after {self.timeout} seconds",
                command=cmd,
            ) from e
        except asyncio.CancelledError:
            await self._kill(process)
            raise

        return ExecutionResult(exit_code=returncode)

    @staticmethod
    async def _kill(process: asyncio.subprocess.Process) -> None:
        if process.returncode is None:
            process.kill()
            await process.wait()
