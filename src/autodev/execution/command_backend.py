"""Run command identifiers as subprocesses of external tools"""
import asyncio
import logging
import time
from pathlib import Path

from autodev.config import defaults
from autodev.execution.protocol import BackendResult, CommandBackend
from autodev.execution.tools import tool_for_executable

logger = logging.getLogger(__name__)


class SubprocessCommandBackend(CommandBackend):
    """Maps /commands to external executables and runs them.

    The free-text context is passed as the final argument.
    """

    OUTPUT_PREVIEW = 2000

    def __init__(
        self,
        command_map: dict[str, list[str]] | None = None,
        cwd: Path | None = None,
        timeout: float = 300.0,
    ):
        self.command_map = command_map if command_map is not None else defaults.DEFAULT_COMMAND_MAP
        self.cwd = cwd
        self.timeout = timeout

    def can_handle(self, command: str) -> bool:
        """Handle if the command is mapped and its executable is installed"""
        argv = self.command_map.get(command)
        return bool(argv) and tool_for_executable(argv[0]).is_available()

    async def run(self, command: str, context: str) -> BackendResult:
        argv = self.command_map.get(command)
        if not argv:
            return BackendResult(success=False, error=f"No executable mapped for {command}")

        tool = tool_for_executable(argv[0])
        if not tool.is_available():
            return BackendResult(success=False, error=f"{tool.executable} not found on PATH")

        cmd = [*argv, context] if context else list(argv)
        start = time.monotonic()

        try:
            process = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=self.cwd,
            )

            try:
                stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=self.timeout)
            except asyncio.TimeoutError:
                process.kill()
                await process.wait()
                return BackendResult(
                    success=False,
                    duration=time.monotonic() - start,
                    error="Command timed out",
                )

            duration = time.monotonic() - start
            out = stdout.decode(errors="replace")
            err = stderr.decode(errors="replace")
            success = process.returncode == 0

            return BackendResult(
                success=success,
                output=out[: self.OUTPUT_PREVIEW],
                duration=duration,
                error=None if success else (err[:200] or out[:200] or f"exit code {process.returncode}"),
                metrics={"exit_code": process.returncode},
            )

        except OSError as e:
            logger.warning("Failed to launch %s: %s", cmd[0], e)
            return BackendResult(success=False, duration=time.monotonic() - start, error=str(e))

    async def health_check(self) -> bool:
        return any(self.can_handle(command) for command in self.command_map)
