"""Output formatting using Rich for terminal output."""

from typing import Any

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.theme import Theme

from autodev.feedback.models import EvolutionCycle, FeedbackResponse
from autodev.orchestration.models import AutonomousAction, WorkflowExecution

AUTODEV_THEME = Theme(
    {
        "env.terminal": "green",
        "env.browser": "cyan",
        "env.hybrid": "magenta",
        "success": "green",
        "error": "red bold",
        "warning": "yellow",
        "info": "blue",
        "metadata": "dim",
    }
)


class OutputFormatter:
    """Handles all output formatting for autodev."""

    def __init__(self, color: bool = True, verbose: bool = False) -> None:
        self.console = Console(theme=AUTODEV_THEME, force_terminal=color, no_color=not color)
        self.verbose = verbose

    def print_error(self, message: str) -> None:
        self.console.print(f"[error]Error: {message}[/error]")

    def print_success(self, message: str) -> None:
        self.console.print(f"[success]{message}[/success]")

    def print_info(self, message: str) -> None:
        self.console.print(f"[info]{message}[/info]")

    def print_warning(self, message: str) -> None:
        self.console.print(f"[warning]{message}[/warning]")

    def print_plan(self, actions: list[AutonomousAction], reasoning: str | None = None) -> None:
        """Print planned actions as a table."""
        if not actions:
            self.print_info("No actions required")
        else:
            table = Table(title="Autonomous Execution Plan")
            table.add_column("#", justify="right", style="metadata")
            table.add_column("Command", style="cyan")
            table.add_column("Priority", justify="right")
            table.add_column("Reason")
            table.add_column("Depends on", style="metadata")

            for index, action in enumerate(actions, 1):
                table.add_row(
                    str(index),
                    action.command,
                    str(action.priority),
                    action.reason,
                    ", ".join(action.dependencies) or "-",
                )
            self.console.print(table)

        if reasoning and self.verbose:
            self.console.print(Panel(reasoning, title="Reasoning", border_style="info"))

    def print_execution(self, execution: WorkflowExecution) -> None:
        """Print per-step results and the overall success rate."""
        table = Table(title=f"Execution {execution.id}")
        table.add_column("Step", style="cyan")
        table.add_column("Environment")
        table.add_column("Result", justify="center")
        table.add_column("Duration", justify="right")
        table.add_column("Notes", style="metadata")

        for result in execution.results:
            env_style = f"env.{result.environment}"
            status = "[success]ok[/success]" if result.success else "[error]failed[/error]"
            notes = []
            if result.fallback_used:
                notes.append(f"fallback: {result.fallback_used}")
            if result.error:
                notes.append(result.error)
            table.add_row(
                result.name,
                f"[{env_style}]{result.environment}[/{env_style}]",
                status,
                f"{result.duration:.2f}s",
                "; ".join(notes),
            )

        self.console.print(table)
        style = "success" if execution.success_rate >= 0.8 else "warning"
        self.console.print(
            f"[{style}]Success rate: {execution.success_rate:.0%} "
            f"({execution.successful_steps}/{execution.total_steps})[/{style}] "
            f"[metadata]in {execution.execution_time:.1f}s[/metadata]"
        )
        for note in execution.guidance:
            self.print_info(f"Guidance: {note}")

    def print_list(self, title: str, items: list[str]) -> None:
        if not items:
            return
        self.console.print(f"\n[bold]{title}[/bold]")
        for item in items:
            self.console.print(f"  - {item}")

    def print_feedback_response(self, response: FeedbackResponse) -> None:
        self.console.print(Panel(
            f"[bold]{response.action}[/bold]\n{response.reasoning}",
            title="Feedback Response",
            border_style="info",
        ))
        if response.evolution_triggered:
            cycle = response.cycle_id or "skipped (cycle already active)"
            self.print_warning(f"Evolution cycle triggered: {cycle}")

    def print_cycle(self, cycle: EvolutionCycle) -> None:
        style = "success" if cycle.success else "warning"
        self.console.print(Panel(
            f"Trigger: {cycle.trigger}\n"
            f"Improved metrics: {', '.join(cycle.improved_metrics()) or 'none'}",
            title=f"[{style}]Evolution cycle {cycle.id}: {'SUCCESS' if cycle.success else 'PARTIAL'}[/{style}]",
            border_style=style,
        ))
        self.print_list("Actions", cycle.actions_performed)
        self.print_list("Learnings", cycle.learnings)
        self.print_list("Next recommendations", cycle.next_recommendations)

    def print_status(self, status: dict[str, Any]) -> None:
        table = Table(title="Engine Status")
        table.add_column("Property", style="cyan")
        table.add_column("Value")

        loop = status.get("feedback_loop", {})
        workflows = status.get("workflows", {})
        table.add_row("Project state", status.get("project_state", "-"))
        table.add_row("Code quality", status.get("code_quality", "-"))
        table.add_row("Automation backend", "available" if status.get("automation_available") else "unavailable")
        for tool, available in status.get("tools", {}).items():
            table.add_row(f"Tool: {tool}", "available" if available else "missing")
        table.add_row("Workflows run", str(workflows.get("total", 0)))
        table.add_row("Feedback items", str(loop.get("total_feedback", 0)))
        table.add_row("Evolution cycles", str(loop.get("evolution_cycles", 0)))
        table.add_row("Recent cycle success", f"{loop.get('success_rate', 0.0):.0f}%")
        table.add_row("Learning models", str(status.get("learning_models", 0)))

        self.console.print(table)
        self.print_list("Recent activity", loop.get("recent_activity", []))
        self.print_list("Recommendations", loop.get("recommendations", []))


# Global formatter instance
_formatter: OutputFormatter | None = None


def get_formatter(color: bool = True, verbose: bool = False) -> OutputFormatter:
    """Get or create the global formatter instance."""
    global _formatter
    if _formatter is None:
        _formatter = OutputFormatter(color=color, verbose=verbose)
    return _formatter


def reset_formatter() -> None:
    global _formatter
    _formatter = None
