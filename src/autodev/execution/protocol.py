"""Interfaces for the command and automation backends"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

from autodev.orchestration.models import AutomationStep


class BackendUnavailableError(Exception):
    """Raised when a backend is asked to act but is not available."""

    pass


@dataclass
class BackendResult:
    """Result from the command-execution backend"""
    success: bool
    output: str = ""
    duration: float = 0.0
    error: str | None = None
    metrics: dict = field(default_factory=dict)


@dataclass
class AutomationResult:
    """Result from one automation step"""
    success: bool
    artifact: str | None = None  # e.g. screenshot path
    value: Any = None  # extracted data
    error: str | None = None
    duration: float = 0.0


class CommandBackend(ABC):
    """Runs command identifiers such as /specify or /evolve"""

    @abstractmethod
    async def run(self, command: str, context: str) -> BackendResult:
        """Run command with free-text context and return its result"""
        pass

    @abstractmethod
    def can_handle(self, command: str) -> bool:
        """Check if this backend knows how to run command"""
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Verify backend is available and working"""
        pass


class AutomationBackend(ABC):
    """Performs typed steps: navigate, click, type, scroll, screenshot, evaluate, wait"""

    @abstractmethod
    async def perform(self, step: AutomationStep) -> AutomationResult:
        """Perform one step"""
        pass

    @abstractmethod
    def is_available(self) -> bool:
        """Whether steps can be performed at all"""
        pass
