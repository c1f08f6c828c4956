"""Unified terminal + automation workflow construction."""

import logging
import re
import uuid
from dataclasses import dataclass, field

from autodev.config import defaults
from autodev.orchestration.models import AutomationStep, AutonomousAction

logger = logging.getLogger(__name__)

DEFAULT_URL = "https://example.com"
_URL_PATTERN = re.compile(r"(https?://\S+|[a-zA-Z0-9-]+\.[a-zA-Z]{2,})")
_CLICK_PATTERN = re.compile(r"click\s+(?:on\s+)?[\"']?([^\"'\n]+)[\"']?", re.IGNORECASE)
_TYPE_PATTERN = re.compile(r"(?:type|enter|fill)\s+[\"']([^\"']+)[\"']", re.IGNORECASE)

BASE_CHECKPOINTS = [
    "before_browser_initialization",
    "after_navigation",
    "during_form_interaction",
    "after_data_extraction",
    "workflow_completion",
]


@dataclass
class WebRequirements:
    """Whether a request needs the automation backend, and for what"""
    requires_browser: bool = False
    reasons: list[str] = field(default_factory=list)
    browser_tasks: list[str] = field(default_factory=list)


@dataclass
class UnifiedWorkflow:
    """Terminal actions plus automation steps for one request"""
    id: str
    name: str
    actions: list[AutonomousAction] = field(default_factory=list)
    steps: list[AutomationStep] = field(default_factory=list)
    checkpoints: list[str] = field(default_factory=list)
    requirements: WebRequirements = field(default_factory=WebRequirements)


def analyze_web_requirements(
    text: str,
    actions: list[AutonomousAction],
    web_keywords: list[str] | None = None,
    market_keywords: list[str] | None = None,
) -> WebRequirements:
    web_keywords = web_keywords or defaults.DEFAULT_WEB_REQUIREMENT_KEYWORDS
    market_keywords = market_keywords or defaults.DEFAULT_MARKET_KEYWORDS
    lowered = (text or "").lower()

    requirements = WebRequirements(
        requires_browser=any(k in lowered for k in web_keywords) or any(k in lowered for k in market_keywords)
    )

    if requirements.requires_browser:
        requirements.reasons.append("Web interaction keywords detected in user input")
        if "screenshot" in lowered:
            requirements.browser_tasks.append("Take screenshots for visual analysis")
            requirements.reasons.append("Visual documentation required")
        if "competitor" in lowered or "market" in lowered:
            requirements.browser_tasks.append("Research competitor websites and market data")
            requirements.reasons.append("Market intelligence gathering required")
        if "form" in lowered or "login" in lowered:
            requirements.browser_tasks.append("Automate web form interactions")
            requirements.reasons.append("Web form automation needed")
        if "github" in lowered or "repository" in lowered:
            requirements.browser_tasks.append("Navigate GitHub interface for repository management")
            requirements.reasons.append("GitHub web interface interaction needed")

    for action in actions:
        command = action.command.lower()
        if "specify" in command or "plan" in command:
            requirements.browser_tasks.append("Research similar implementations for specification")
            requirements.reasons.append("Research needed to inform planning decisions")

    return requirements


def generate_steps(text: str) -> list[AutomationStep]:
    """Automation steps inferred from a request"""
    lowered = (text or "").lower()

    if "open" in lowered or "navigate" in lowered or "go to" in lowered:
        match = _URL_PATTERN.search(text)
        return [
            AutomationStep("navigate", target=match.group(0) if match else DEFAULT_URL),
            AutomationStep("wait", value="2000"),
            AutomationStep("screenshot"),
        ]

    if "click" in lowered or "press" in lowered:
        match = _CLICK_PATTERN.search(text)
        return [
            AutomationStep("click", target=match.group(1).strip() if match else "button"),
            AutomationStep("wait", value="1000"),
            AutomationStep("screenshot"),
        ]

    if "type" in lowered or "enter" in lowered or "fill" in lowered:
        match = _TYPE_PATTERN.search(text)
        return [
            AutomationStep("type", target="input", value=match.group(1) if match else "sample text"),
            AutomationStep("screenshot"),
        ]

    if "screenshot" in lowered or "capture" in lowered:
        return [AutomationStep("screenshot")]

    return [AutomationStep("navigate", target=DEFAULT_URL), AutomationStep("screenshot")]


class WorkflowBuilder:
    """Combines planned actions with automation steps according to a mode.

    Modes:
        conservative: a 3s wait after the first step and an extra
            verification checkpoint
        balanced: steps as generated
        aggressive: a timing evaluation step and an extra /evolve action
    """

    def __init__(self, automation_available: bool = False, mode: str = "balanced"):
        if mode not in ("conservative", "balanced", "aggressive"):
            raise ValueError(f"Unknown execution mode: {mode}")
        self.automation_available = automation_available
        self.mode = mode

    def build(self, text: str, actions: list[AutonomousAction]) -> UnifiedWorkflow:
        requirements = analyze_web_requirements(text, actions)
        workflow = UnifiedWorkflow(
            id=f"workflow_{uuid.uuid4().hex[:8]}",
            name=f"Autonomous: {text[:40]}",
            actions=list(actions),
            requirements=requirements,
        )

        if requirements.requires_browser and self.automation_available:
            workflow.steps = generate_steps(text)
            workflow.checkpoints = list(BASE_CHECKPOINTS)

            if self.mode == "aggressive":
                workflow.steps.append(
                    AutomationStep("evaluate", value='window.performance.measure("autonomous_timing")')
                )
                workflow.actions.append(AutonomousAction(
                    command="/evolve",
                    reason="Aggressive mode: Continuous evolution during execution",
                    priority=5,
                    expected_outcome="Real-time optimization during workflow execution",
                ))
            elif self.mode == "conservative":
                workflow.steps.insert(1, AutomationStep("wait", value="3000"))
                workflow.checkpoints.append("verification_checkpoint")

        logger.info(
            "Workflow %s: %d actions, %d automation steps, %d checkpoints",
            workflow.id,
            len(workflow.actions),
            len(workflow.steps),
            len(workflow.checkpoints),
        )
        return workflow
