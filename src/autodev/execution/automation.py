"""Automation backend used when no browser automation is configured"""
from autodev.execution.protocol import AutomationBackend, AutomationResult, BackendUnavailableError
from autodev.orchestration.models import AutomationStep


class UnavailableAutomationBackend(AutomationBackend):
    """Reports itself unavailable so environment selection degrades to terminal"""

    def is_available(self) -> bool:
        return False

    async def perform(self, step: AutomationStep) -> AutomationResult:
        raise BackendUnavailableError(f"No automation backend configured for '{step.type}' step")
