"""Execution backends: command, automation and routing between them"""
from autodev.execution.automation import UnavailableAutomationBackend
from autodev.execution.command_backend import SubprocessCommandBackend
from autodev.execution.protocol import (
    AutomationBackend,
    AutomationResult,
    BackendResult,
    BackendUnavailableError,
    CommandBackend,
)
from autodev.execution.router import EnvironmentRouter

__all__ = [
    "AutomationBackend",
    "AutomationResult",
    "BackendResult",
    "BackendUnavailableError",
    "CommandBackend",
    "EnvironmentRouter",
    "SubprocessCommandBackend",
    "UnavailableAutomationBackend",
]
