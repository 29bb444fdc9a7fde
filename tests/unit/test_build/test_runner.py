"""Tests for the default make runner."""

from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from xdev.build.interfaces import RunnerOptions
from xdev.build.runner import MakeRunner, make_runner_factory
from xdev.models.build import ExecutionResult
from xdev.models.container import BindMount


def make_options(root: Path, **kwargs) -> RunnerOptions:
    defaults = dict(
        image="xuper/emcc:latest",
        package=MagicMock(name="package"),
        root=root,
        cache_dir=root.parent / "cache",
        xdev_root="/usr/local/xdev",
        output=root / "mycontract.wasm",
    )
    defaults.update(kwargs)
    return RunnerOptions(**defaults)


def make_runner(options: RunnerOptions, result: ExecutionResult) -> MakeRunner:
    container_executor = MagicMock()
    container_executor.run = AsyncMock(return_value=result)
    host_executor = MagicMock()
    host_executor.run = AsyncMock(return_value=result)
    return MakeRunner(options, container_executor=container_executor, host_executor=host_executor)


class TestMakeCommand:
    def test_command_layout(self, temp_dir):
        runner = MakeRunner(make_options(temp_dir, make_flags=("-j4",)))
        cmd = runner.make_command(temp_dir / ".Makefile")

        assert cmd[:3] == ["make", "-f", str(temp_dir / ".Makefile")]
        assert "XROOT=/usr/local/xdev" in cmd
        assert f"XCACHE={temp_dir.parent / 'cache'}" in cmd
        assert "USE_PRECOMPILED_SDK=1" in cmd
        assert f"OUTPUT={temp_dir / 'mycontract.wasm'}" in cmd
        assert cmd[-1] == "-j4"

    def test_source_sdk(self, temp_dir):
        runner = MakeRunner(make_options(temp_dir, use_precompiled_sdk=False, output=None))
        cmd = runner.make_command(temp_dir / ".Makefile")

        assert "USE_PRECOMPILED_SDK=0" in cmd
        assert not any(arg.startswith("OUTPUT=") for arg in cmd)


class TestMounts:
    def test_root_and_cache(self, temp_dir):
        mounts = MakeRunner(make_options(temp_dir)).mounts()
        assert mounts == [BindMount(temp_dir), BindMount(temp_dir.parent / "cache")]

    def test_source_sdk_mounts_xdev_root(self, temp_dir):
        mounts = MakeRunner(
            make_options(temp_dir, use_precompiled_sdk=False, xdev_root="/opt/xdev")
        ).mounts()
        assert BindMount(Path("/opt/xdev")) in mounts

    def test_output_outside_root_is_mounted(self, temp_dir):
        out_dir = temp_dir.parent / "dist"
        mounts = MakeRunner(make_options(temp_dir, output=out_dir / "c.wasm")).mounts()
        assert BindMount(out_dir) in mounts


class TestMake:
    @pytest.mark.asyncio
    async def test_docker_mode_uses_container(self, temp_dir):
        options = make_options(temp_dir)
        runner = make_runner(options, ExecutionResult(exit_code=0))

        result = await runner.make(temp_dir / ".Makefile")

        runner.container_executor.run.assert_awaited_once()
        runner.host_executor.run.assert_not_called()
        args, kwargs = runner.container_executor.run.call_args
        assert args[0] == "xuper/emcc:latest"
        assert kwargs["working_dir"] == temp_dir
        assert result.artifact_path == temp_dir / "mycontract.wasm"

    @pytest.mark.asyncio
    async def test_host_mode_uses_host(self, temp_dir):
        options = make_options(temp_dir, use_docker=False)
        runner = make_runner(options, ExecutionResult(exit_code=0))

        await runner.make(temp_dir / ".Makefile")

        runner.host_executor.run.assert_awaited_once()
        runner.container_executor.run.assert_not_called()

    @pytest.mark.asyncio
    async def test_failed_make_has_no_artifact(self, temp_dir):
        runner = make_runner(make_options(temp_dir), ExecutionResult(exit_code=2))

        result = await runner.make(temp_dir / ".Makefile")

        assert result.exit_code == 2
        assert result.artifact_path is None


def test_factory_shares_timeout(temp_dir):
    runner = make_runner_factory(timeout=30.0)(make_options(temp_dir))
    assert runner.container_executor.timeout == 30.0
    assert runner.host_executor.timeout == 30.0
