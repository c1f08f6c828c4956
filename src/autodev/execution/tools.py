"""External tools invoked by name: the specify workflow CLI and the evolutionary optimizer"""
import shutil
from dataclasses import dataclass


@dataclass(frozen=True)
class ExternalTool:
    """A named executable the engine only needs to detect and call"""
    name: str
    executable: str
    description: str = ""

    def path(self) -> str | None:
        return shutil.which(self.executable)

    def is_available(self) -> bool:
        return self.path() is not None


SPEC_WORKFLOW_TOOL = ExternalTool(
    name="spec-workflow",
    executable="specify",
    description="Specification workflow (constitution, specify, plan, tasks, implement)",
)

EVOLUTION_TOOL = ExternalTool(
    name="evolution",
    executable="shinka_launch",
    description="Evolutionary code optimization",
)

KNOWN_TOOLS = (SPEC_WORKFLOW_TOOL, EVOLUTION_TOOL)


def tool_for_executable(executable: str) -> ExternalTool:
    for tool in KNOWN_TOOLS:
        if tool.executable == executable:
            return tool
    return ExternalTool(name=executable, executable=executable)


def tool_availability() -> dict[str, bool]:
    """Availability flag per known tool"""
    return {tool.name: tool.is_available() for tool in KNOWN_TOOLS}
