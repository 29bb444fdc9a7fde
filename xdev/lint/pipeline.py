"""Ad-hoc lint of individual source files in a disposable container."""

from collections.abc import Callable, Sequence
from pathlib import Path

from xdev.core.config.settings import DEFAULT_LINT_IMAGE
from xdev.core.exceptions.errors import ConfigurationError
from xdev.core.logger.logger import get_logger
from xdev.models.build import ExecutionResult
from xdev.models.container import BindMount
from xdev.runtime.container import ContainerExecutor

logger = get_logger(__name__)

LINT_TOOL = "clang-tidy"
LINT_CHECKS = "-*,misc-smart-contract-*"

FileSelector = Callable[[Sequence[str]], list[str]]


def first_file_only(files: Sequence[str]) -> list[str]:
    """Analyze only the first file; the current analyzer contract."""
    return [files[0]]


def all_files(files: Sequence[str]) -> list[str]:
    return list(files)


class LintPipeline:
    """Runs the smart-contract checks of clang-tidy over source files.

    Only the first file is analyzed by default. Pass ``file_selector=all_files``
    to analyze every file in the same container.
    """

    def __init__(
        self,
        executor: ContainerExecutor | None = None,
        image: str = DEFAULT_LINT_IMAGE,
        working_dir: Path | None = None,
        file_selector: FileSelector = first_file_only,
    ):
        """Initialize the pipeline.

        Args:
            executor: Container executor. A new one is created if not provided.
            image: Image providing the analyzer.
            working_dir: Directory mounted into the container. Defaults to cwd.
            file_selector: Chooses which of the given files are analyzed.
        """
        self.executor = executor or ContainerExecutor(name_prefix="xlinter-cpp")
        self.image = image
        self.working_dir = working_dir
        self.file_selector = file_selector

    def lint_command(self, files: Sequence[str]) -> list[str]:
        return [LINT_TOOL, f"-checks={LINT_CHECKS}", *self.file_selector(files)]

    async def lint(self, files: Sequence[str]) -> ExecutionResult:
        """Lint the given files.

        Args:
            files: Source files, relative to the working directory or absolute.

        Returns:
            ExecutionResult with the analyzer's exit code.

        Raises:
            ConfigurationError: If no files were given.
            ContainerInfraError: If the container could not be run.
        """
        if not files:
            raise ConfigurationError("No files to lint", config_key="files")

        cwd = (self.working_dir or Path.cwd()).resolve()
        if len(files) > 1 and self.file_selector is first_file_only:
            logger.warning(
                f"Only {files[0]} is analyzed; {len(files) - 1} more file(s) ignored"
            )

        return await self.executor.run(
            self.image,
            self.lint_command(files),
            working_dir=cwd,
            mounts=[BindMount(cwd)],
        )
