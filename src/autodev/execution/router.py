"""Routes actions and automation steps to backends with bounded waits"""
import asyncio
import logging
import time

from autodev.execution.automation import UnavailableAutomationBackend
from autodev.execution.protocol import (
    AutomationBackend,
    AutomationResult,
    BackendResult,
    CommandBackend,
)
from autodev.orchestration.models import AutomationStep

logger = logging.getLogger(__name__)


class EnvironmentRouter:
    """Single entry point for backend calls.

    Every call is bounded by timeout; a timeout or a raised exception is
    returned as an unsuccessful result, never propagated.
    """

    def __init__(
        self,
        command_backend: CommandBackend,
        automation_backend: AutomationBackend | None = None,
        timeout: float = 300.0,
    ):
        self.command_backend = command_backend
        self.automation_backend = automation_backend or UnavailableAutomationBackend()
        self.timeout = timeout

    @property
    def automation_available(self) -> bool:
        return self.automation_backend.is_available()

    async def run_command(self, command: str, context: str) -> BackendResult:
        start = time.monotonic()
        try:
            return await asyncio.wait_for(self.command_backend.run(command, context), timeout=self.timeout)
        except asyncio.TimeoutError:
            return BackendResult(
                success=False,
                duration=time.monotonic() - start,
                error=f"{command} exceeded maximum duration",
            )
        except Exception as e:
            logger.warning("Command %s raised: %s", command, e)
            return BackendResult(success=False, duration=time.monotonic() - start, error=str(e))

    async def perform(self, step: AutomationStep) -> AutomationResult:
        start = time.monotonic()
        try:
            return await asyncio.wait_for(self.automation_backend.perform(step), timeout=self.timeout)
        except asyncio.TimeoutError:
            return AutomationResult(
                success=False,
                duration=time.monotonic() - start,
                error=f"Automation step '{step.type}' timed out",
            )
        except Exception as e:
            logger.warning("Automation step %s raised: %s", step.label, e)
            return AutomationResult(success=False, duration=time.monotonic() - start, error=str(e))

    async def capture_checkpoint(self, name: str) -> str | None:
        """Screenshot artifact path, or None when capture failed"""
        result = await self.perform(AutomationStep("screenshot", target=name))
        if not result.success:
            logger.debug("Checkpoint %s not captured: %s", name, result.error)
            return None
        return result.artifact
