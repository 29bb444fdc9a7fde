"""Container executor for running one command in a disposable container.

The executor drives the full container lifecycle:

- negotiate the Engine API version (once per executor)
- create the container with bind mounts at identical paths
- start it and wait until it is no longer running
- copy its combined output to the caller's sink
- remove it, on every exit path including errors and cancellation

Blocking Docker SDK calls run in worker threads, so awaiting ``run`` only
suspends the calling task.
"""

import asyncio
import sys
import time
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Any, BinaryIO

import docker
from docker.errors import DockerException, ImageNotFound
from docker.types import Mount

from xdev.core.exceptions.errors import (
    ContainerCreateError,
    ContainerStartError,
    ContainerTimeoutError,
    ContainerWaitError,
    LogStreamError,
    RuntimeUnavailableError,
)
from xdev.core.logger.logger import get_logger
from xdev.models.build import ExecutionResult
from xdev.models.container import BindMount, ContainerHandle

logger = get_logger(__name__)

# requests' connection errors derive from OSError, so this also covers an
# unreachable or crashed daemon.
_RUNTIME_ERRORS = (DockerException, OSError)


class ContainerExecutor:
    """Runs commands in containers through the Docker Engine API."""

    def __init__(
        self,
        client_factory: Callable[..., Any] = docker.from_env,
        output: BinaryIO | None = None,
        timeout: float | None = None,
        name_prefix: str = "xdev",
    ):
        """Initialize the executor.

        Args:
            client_factory: Builds a Docker client; called with ``version="auto"``.
            output: Sink for container output. Defaults to stdout.
            timeout: Maximum seconds to wait for the container (None = no limit).
            name_prefix: Prefix for generated container names.
        """
        self._client_factory = client_factory
        self._client: Any = None
        self._negotiate_lock = asyncio.Lock()
        self.output = output
        self.timeout = timeout
        self.name_prefix = name_prefix
        self.last_handle: ContainerHandle | None = None

    async def negotiate(self) -> Any:
        """Connect to the engine and negotiate the API version.

        Returns:
            The Docker client, created at most once per executor.

        Raises:
            RuntimeUnavailableError: If the engine cannot be reached.
        """
        async with self._negotiate_lock:
            if self._client is not None:
                return self._client
            try:
                client = await asyncio.to_thread(self._client_factory, version="auto")
            except _RUNTIME_ERRORS as e:
                raise RuntimeUnavailableError(
                    f"Cannot connect to the container engine: {e}"
                ) from e
            logger.debug(f"Container engine API version: {client.api.api_version}")
            self._client = client
            return client

    def generate_name(self) -> str:
        return f"{self.name_prefix}-{time.time_ns()}"

    async def run(
        self,
        image: str,
        command: Sequence[str],
        working_dir: Path,
        mounts: Sequence[BindMount] = (),
        name: str | None = None,
    ) -> ExecutionResult:
        """Run a command in a new container and wait for it to finish.

        Args:
            image: Image to create the container from.
            command: Command and arguments.
            working_dir: Working directory inside the container.
            mounts: Host directories to bind-mount.
            name: Container name. Generated if not provided.

        Returns:
            ExecutionResult carrying the container's exit code. A non-zero
            exit is reported here, not raised.

        Raises:
            ContainerInfraError: If any lifecycle step fails.
        """
        client = await self.negotiate()
        # the create call cannot be interrupted once it reached the engine
        create = asyncio.ensure_future(
            self._create(
                client, image, list(command), working_dir, mounts, name or self.generate_name()
            )
        )
        try:
            container, handle = await asyncio.shield(create)
        except asyncio.CancelledError:
            await self._discard(create)
            raise
        self.last_handle = handle

        try:
            await self._start(container, handle)
            exit_code = await self._wait(container, handle)
            await self._copy_logs(container, handle)
        finally:
            await self._remove(container, handle)

        if exit_code != 0:
            logger.info(f"Container {handle.name} exited with code {exit_code}")
        return ExecutionResult(exit_code=exit_code)

    async def _create(
        self,
        client: Any,
        image: str,
        command: list[str],
        working_dir: Path,
        mounts: Sequence[BindMount],
        name: str,
    ) -> tuple[Any, ContainerHandle]:
        logger.info(f"Creating container {name} from {image}")
        logger.debug(f"Command: {' '.join(command)}")

        docker_mounts = [
            Mount(
                target=str(m.container_path),
                source=str(m.source),
                type="bind",
                read_only=m.read_only,
            )
            for m in mounts
        ]
        try:
            container = await asyncio.to_thread(
                client.containers.create,
                image,
                command=command,
                working_dir=str(working_dir),
                stdin_open=True,
                tty=True,
                mounts=docker_mounts,
                name=name,
            )
        except ImageNotFound as e:
            raise ContainerCreateError(
                f"Image not found: {image}. Run: docker pull {image}",
                image=image,
            ) from e
        except _RUNTIME_ERRORS as e:
            raise ContainerCreateError(
                f"Failed to create container: {e}",
                image=image,
            ) from e

        return container, ContainerHandle(id=container.id, name=name, image=image)

    async def _discard(self, create: "asyncio.Future[tuple[Any, ContainerHandle]]") -> None:
        """Remove the container of a create call whose caller was cancelled."""
        try:
            container, handle = await create
        except ContainerCreateError:
            return
        self.last_handle = handle
        await self._remove(container, handle)

    async def _start(self, container: Any, handle: ContainerHandle) -> None:
        try:
            await asyncio.to_thread(container.start)
        except _RUNTIME_ERRORS as e:
            raise ContainerStartError(
                f"Failed to start container: {e}",
                container_id=handle.short_id,
                image=handle.image,
            ) from e
        handle.mark_started()

    async def _wait(self, container: Any, handle: ContainerHandle) -> int:
        """Block until the container is no longer running.

        Whichever comes first is authoritative: an exit status, or a
        runtime-level failure reported by the engine.
        """
        try:
            result = await asyncio.wait_for(
                asyncio.to_thread(container.wait, condition="not-running"),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError as e:
            raise ContainerTimeoutError(
                f"Container did not exit within {self.timeout} seconds",
                container_id=handle.short_id,
                image=handle.image,
            ) from e
        except _RUNTIME_ERRORS as e:
            raise ContainerWaitError(
                f"Failed waiting for container: {e}",
                container_id=handle.short_id,
                image=handle.image,
            ) from e

        if not result or result.get("StatusCode") is None:
            raise ContainerWaitError(
                "Container runtime returned no exit status",
                container_id=handle.short_id,
                image=handle.image,
            )

        error = result.get("Error")
        if error:
            message = error.get("Message") if isinstance(error, dict) else str(error)
            if message:
                raise ContainerWaitError(
                    f"Container runtime reported an error: {message}",
                    container_id=handle.short_id,
                    image=handle.image,
                )

        handle.mark_exited()
        return int(result["StatusCode"])

    async def _copy_logs(self, container: Any, handle: ContainerHandle) -> None:
        try:
            logs = await asyncio.to_thread(container.logs, stdout=True, stderr=True)
        except _RUNTIME_ERRORS as e:
            raise LogStreamError(
                f"Failed to fetch container output: {e}",
                container_id=handle.short_id,
                image=handle.image,
            ) from e

        sink = self.output if self.output is not None else sys.stdout.buffer
        try:
            sink.write(logs)
            sink.flush()
        except OSError as e:
            raise LogStreamError(
                f"Failed to write container output: {e}",
                container_id=handle.short_id,
                image=handle.image,
            ) from e

    async def _remove(self, container: Any, handle: ContainerHandle) -> None:
        """Force-remove the container; failures are logged, never raised.

        Shielded so that a cancelled run still removes its container.
        """
        try:
            await asyncio.shield(asyncio.to_thread(container.remove, force=True))
        except _RUNTIME_ERRORS as e:
            handle.mark_abandoned()
            logger.warning(
                f"Failed to remove container {handle.name} ({handle.short_id}): {e}"
            )
            return
        handle.mark_removed()
        logger.debug(f"Removed container {handle.name}")
