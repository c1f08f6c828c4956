"""Tests for EnvironmentRouter"""
import pytest

from autodev.execution.router import EnvironmentRouter
from autodev.orchestration.models import AutomationStep


@pytest.mark.asyncio
async def test_run_command_delegates(fake_command_backend):
    backend = fake_command_backend()
    router = EnvironmentRouter(backend)

    result = await router.run_command("/plan", "login page")

    assert result.success
    assert result.output == "/plan ok"
    assert backend.calls == [("/plan", "login page")]


@pytest.mark.asyncio
async def test_run_command_timeout(fake_command_backend):
    router = EnvironmentRouter(fake_command_backend(delay=0.5), timeout=0.01)

    result = await router.run_command("/evolve", "")

    assert not result.success
    assert result.error == "/evolve exceeded maximum duration"


@pytest.mark.asyncio
async def test_run_command_exception(fake_command_backend):
    router = EnvironmentRouter(fake_command_backend({"/tasks": ValueError("bad input")}))

    result = await router.run_command("/tasks", "")

    assert not result.success
    assert result.error == "bad input"


def test_automation_unavailable_by_default(fake_command_backend):
    assert EnvironmentRouter(fake_command_backend()).automation_available is False


def test_automation_available(fake_command_backend, fake_automation_backend):
    router = EnvironmentRouter(fake_command_backend(), fake_automation_backend())
    assert router.automation_available is True


@pytest.mark.asyncio
async def test_perform_without_backend_fails(fake_command_backend):
    result = await EnvironmentRouter(fake_command_backend()).perform(AutomationStep("click", target="#go"))

    assert not result.success
    assert "No automation backend configured" in result.error


@pytest.mark.asyncio
async def test_capture_checkpoint(fake_command_backend, fake_automation_backend):
    automation = fake_automation_backend()
    router = EnvironmentRouter(fake_command_backend(), automation)

    artifact = await router.capture_checkpoint("exec_1_plan_pre")

    assert artifact == "/shots/exec_1_plan_pre.png"
    assert automation.steps[0].type == "screenshot"


@pytest.mark.asyncio
async def test_capture_checkpoint_failure(fake_command_backend, fake_automation_backend):
    router = EnvironmentRouter(fake_command_backend(), fake_automation_backend(capture=False))

    assert await router.capture_checkpoint("exec_1_plan_post") is None
