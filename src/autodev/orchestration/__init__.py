"""Planning and execution core."""
from autodev.orchestration.intent import IntentClassifier
from autodev.orchestration.models import (
    AutomationStep,
    AutonomousAction,
    Decision,
    Intent,
    ProjectContext,
    StepResult,
    VisualComparison,
    WorkflowExecution,
    WorkflowSealedError,
)
from autodev.orchestration.planner import ActionPlanner, render_plan
from autodev.orchestration.selector import EnvironmentSelector

__all__ = [
    "ActionPlanner",
    "AutomationStep",
    "AutonomousAction",
    "Decision",
    "EnvironmentSelector",
    "Intent",
    "IntentClassifier",
    "ProjectContext",
    "StepResult",
    "VisualComparison",
    "WorkflowExecution",
    "WorkflowSealedError",
    "render_plan",
]
