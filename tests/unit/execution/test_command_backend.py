"""Tests for SubprocessCommandBackend"""
import pytest

from autodev.execution.command_backend import SubprocessCommandBackend


@pytest.mark.asyncio
async def test_runs_mapped_executable_with_context(tmp_path):
    backend = SubprocessCommandBackend({"/plan": ["echo", "planning"]}, cwd=tmp_path)

    result = await backend.run("/plan", "checkout flow")

    assert result.success
    assert result.output.strip() == "planning checkout flow"
    assert result.metrics == {"exit_code": 0}
    assert result.error is None


@pytest.mark.asyncio
async def test_nonzero_exit_is_failure():
    backend = SubprocessCommandBackend({"/tasks": ["false"]})

    result = await backend.run("/tasks", "")

    assert not result.success
    assert result.error == "exit code 1"
    assert result.metrics == {"exit_code": 1}


@pytest.mark.asyncio
async def test_unmapped_command():
    result = await SubprocessCommandBackend({}).run("/unknown", "")

    assert not result.success
    assert result.error == "No executable mapped for /unknown"


@pytest.mark.asyncio
async def test_missing_executable():
    backend = SubprocessCommandBackend({"/evolve": ["autodev-missing-tool-xyz"]})

    result = await backend.run("/evolve", "")

    assert not result.success
    assert result.error == "autodev-missing-tool-xyz not found on PATH"
    assert backend.can_handle("/evolve") is False


@pytest.mark.asyncio
async def test_timeout_kills_process():
    backend = SubprocessCommandBackend({"/implement": ["sleep", "5"]}, timeout=0.1)

    result = await backend.run("/implement", "")

    assert not result.success
    assert result.error == "Command timed out"


@pytest.mark.asyncio
async def test_health_check():
    assert await SubprocessCommandBackend({"/plan": ["echo"]}).health_check() is True
    assert await SubprocessCommandBackend({"/plan": ["autodev-missing-tool-xyz"]}).health_check() is False


def test_default_command_map():
    backend = SubprocessCommandBackend()
    assert backend.command_map["/specify"] == ["specify", "specify"]
