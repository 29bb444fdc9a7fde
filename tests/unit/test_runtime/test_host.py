"""Tests for HostExecutor."""

import sys

import pytest

from xdev.core.exceptions.errors import ExecutionError
from xdev.runtime.host import HostExecutor


class TestHostExecutor:
    @pytest.mark.asyncio
    async def test_exit_code_returned(self, temp_dir):
        result = await HostExecutor().run(
            [sys.executable, "-c", "import sys; sys.exit(3)"], working_dir=temp_dir
        )
        assert result.exit_code == 3
        assert not result.success

    @pytest.mark.asyncio
    async def test_runs_in_working_dir(self, temp_dir):
        result = await HostExecutor().run(
            [sys.executable, "-c", "open('marker', 'w').close()"], working_dir=temp_dir
        )
        assert result.success
        assert (temp_dir / "marker").exists()

    @pytest.mark.asyncio
    async def test_extra_env(self, temp_dir):
        script = "import os, sys; sys.exit(0 if os.environ.get('XCACHE') == '/c' else 1)"
        result = await HostExecutor().run(
            [sys.executable, "-c", script], working_dir=temp_dir, env={"XCACHE": "/c"}
        )
        assert result.exit_code == 0

    @pytest.mark.asyncio
    async def test_missing_binary(self, temp_dir):
        with pytest.raises(ExecutionError) as exc_info:
            await HostExecutor().run(["xdev-no-such-make"], working_dir=temp_dir)
        assert exc_info.value.details["command"] == "xdev-no-such-make"

    @pytest.mark.asyncio
    async def test_timeout_kills_process(self, temp_dir):
        executor = HostExecutor(timeout=0.2)
        with pytest.raises(ExecutionError) as exc_info:
            await executor.run(
                [sys.executable, "-c", "import time; time.sleep(30)"], working_dir=temp_dir
            )
        assert "timed out" in str(exc_info.value)
