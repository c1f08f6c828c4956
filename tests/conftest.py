"""Pytest configuration and fixtures."""

import asyncio

import pytest

from autodev.config import manager
from autodev.config.manager import ConfigManager
from autodev.execution.protocol import (
    AutomationBackend,
    AutomationResult,
    BackendResult,
    CommandBackend,
)
from autodev.output.formatter import reset_formatter


@pytest.fixture(autouse=True)
def reset_config(tmp_path, monkeypatch):
    """Isolate user config and reset cached singletons before each test."""
    monkeypatch.setattr(manager, "get_config_file", lambda: tmp_path / "user-config.toml")
    ConfigManager.reset()
    reset_formatter()
    yield
    ConfigManager.reset()
    reset_formatter()


class FakeCommandBackend(CommandBackend):
    """Command backend with scripted outcomes per command.

    An outcome is a bool, an exception to raise, or a list of those consumed
    one call at a time.
    """

    def __init__(self, outcomes=None, default=True, delay=0.0):
        self.outcomes = dict(outcomes or {})
        self.default = default
        self.delay = delay
        self.calls = []

    async def run(self, command, context):
        self.calls.append((command, context))
        if self.delay:
            await asyncio.sleep(self.delay)

        outcome = self.outcomes.get(command, self.default)
        if isinstance(outcome, list):
            outcome = outcome.pop(0) if len(outcome) > 1 else outcome[0]
        if isinstance(outcome, Exception):
            raise outcome
        if outcome:
            return BackendResult(success=True, output=f"{command} ok")
        return BackendResult(success=False, error=f"{command} failed")

    def can_handle(self, command):
        return True

    async def health_check(self):
        return True


class FakeAutomationBackend(AutomationBackend):
    """Automation backend that records steps and returns screenshot paths"""

    def __init__(self, available=True, capture=True, fail_types=()):
        self.available = available
        self.capture = capture
        self.fail_types = set(fail_types)
        self.steps = []

    def is_available(self):
        return self.available

    async def perform(self, step):
        self.steps.append(step)
        if step.type in self.fail_types:
            return AutomationResult(success=False, error=f"{step.type} failed")
        if step.type == "screenshot":
            if not self.capture:
                return AutomationResult(success=False, error="capture failed")
            return AutomationResult(success=True, artifact=f"/shots/{step.target or 'page'}.png")
        return AutomationResult(success=True, value=step.value)


@pytest.fixture
def fake_command_backend():
    """Factory for scripted command backends."""
    return FakeCommandBackend


@pytest.fixture
def fake_automation_backend():
    """Factory for recording automation backends."""
    return FakeAutomationBackend
