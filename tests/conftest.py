"""Pytest configuration and shared fixtures."""

import io
import shutil
import tempfile
from collections.abc import Sequence
from pathlib import Path
from typing import Generator, TextIO
from unittest.mock import MagicMock

import pytest

from xdev.build.interfaces import PlanSettings, RunnerOptions
from xdev.build.resolver import ResolverInputs, resolve_build_config
from xdev.core.exceptions.errors import XdevError
from xdev.models.build import BuildConfig, DependencyDesc, ExecutionResult


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory that is cleaned up after the test.

    Yields:
        Path to the temporary directory.
    """
    temp_path = Path(tempfile.mkdtemp())
    yield temp_path
    shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def main_package(temp_dir: Path) -> Path:
    """A main package in a directory named ``mycontract``."""
    root = temp_dir / "mycontract"
    root.mkdir()
    (root / "xdev.toml").write_text(
        '[package]\nname = "main"\n\n[dependencies]\nutils = ["strings"]\n'
    )
    return root


@pytest.fixture
def library_package(temp_dir: Path) -> Path:
    """A non-main package in a directory named ``token``."""
    root = temp_dir / "token"
    root.mkdir()
    (root / "xdev.toml").write_text('[package]\nname = "token"\n')
    return root


@pytest.fixture
def build_config() -> BuildConfig:
    """Release config against the precompiled SDK, docker execution."""
    return resolve_build_config(ResolverInputs())


@pytest.fixture
def source_build_config() -> BuildConfig:
    """Release config building the SDK from source."""
    return resolve_build_config(
        ResolverInputs(use_precompiled_sdk=False, xdev_root_override="/opt/xdev")
    )


# =============================================================================
# Collaborator fakes
# =============================================================================


class FakePackage:
    def __init__(self, name: str):
        self.name = name


class FakeLoader:
    """Records load calls and returns a package with a fixed name."""

    def __init__(self, package_name: str = "main", error: Exception | None = None):
        self.package_name = package_name
        self.error = error
        self.calls: list[tuple[Path, list[DependencyDesc]]] = []

    def load(self, root: Path, addons: Sequence[DependencyDesc]) -> FakePackage:
        self.calls.append((root, list(addons)))
        if self.error:
            raise self.error
        return FakePackage(self.package_name)


class FakePlan:
    PLAN_TEXT = "all:\n\t@echo building\n"
    COMPILE_DB_TEXT = '[{"file": "main.cc"}]'

    def emit_plan(self, sink: TextIO) -> None:
        sink.write(self.PLAN_TEXT)

    def emit_compile_database(self, sink: TextIO) -> None:
        sink.write(self.COMPILE_DB_TEXT)


class FakePlanner:
    def __init__(self, error: Exception | None = None):
        self.error = error
        self.settings: PlanSettings | None = None

    def parse(self, package: FakePackage, settings: PlanSettings) -> FakePlan:
        self.settings = settings
        if self.error:
            raise self.error
        return FakePlan()


class FakeRunner:
    """Runner double recording what it saw when make was called."""

    def __init__(
        self,
        options: RunnerOptions,
        result: ExecutionResult | None = None,
        error: XdevError | None = None,
    ):
        self.options = options
        self.result = result or ExecutionResult(exit_code=0, artifact_path=options.output)
        self.error = error
        self.plan_file: Path | None = None
        self.plan_existed = False
        self.plan_text = ""

    async def make(self, plan_file: Path) -> ExecutionResult:
        self.plan_file = plan_file
        self.plan_existed = plan_file.exists()
        if self.plan_existed:
            self.plan_text = plan_file.read_text()
        if self.error:
            raise self.error
        return self.result


class FakeRunnerFactory:
    """Runner factory handing out FakeRunners; set ``result``/``error`` first."""

    def __init__(self):
        self.result: ExecutionResult | None = None
        self.error: XdevError | None = None
        self.runners: list[FakeRunner] = []

    def __call__(self, options: RunnerOptions) -> FakeRunner:
        runner = FakeRunner(options, result=self.result, error=self.error)
        self.runners.append(runner)
        return runner

    @property
    def last(self) -> FakeRunner:
        return self.runners[-1]


@pytest.fixture
def fake_loader() -> FakeLoader:
    return FakeLoader()


@pytest.fixture
def fake_planner() -> FakePlanner:
    return FakePlanner()


@pytest.fixture
def runner_factory() -> FakeRunnerFactory:
    return FakeRunnerFactory()


# =============================================================================
# Docker client fakes
# =============================================================================


@pytest.fixture
def fake_container() -> MagicMock:
    """A container whose lifecycle calls all succeed with exit code 0."""
    container = MagicMock()
    container.id = "0123456789abcdef0123"
    container.wait.return_value = {"StatusCode": 0, "Error": None}
    container.logs.return_value = b"hello from container\n"
    return container


@pytest.fixture
def fake_client(fake_container: MagicMock) -> MagicMock:
    client = MagicMock()
    client.api.api_version = "1.43"
    client.containers.create.return_value = fake_container
    return client


@pytest.fixture
def client_factory(fake_client: MagicMock) -> MagicMock:
    return MagicMock(return_value=fake_client)


@pytest.fixture
def output_sink() -> io.BytesIO:
    return io.BytesIO()
