"""Core data models for planning and workflow execution."""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

VALID_CATEGORIES = {"create", "improve", "fix", "optimize", "explore", "maintain"}
VALID_URGENCIES = {"low", "medium", "high", "critical"}
VALID_SCOPES = {"feature", "project", "architecture", "performance"}
VALID_ENVIRONMENTS = {"terminal", "browser", "hybrid"}
VALID_STEP_TYPES = {"navigate", "click", "type", "scroll", "screenshot", "evaluate", "wait"}
CODE_QUALITY_GRADES = ("poor", "fair", "good", "excellent")


class WorkflowSealedError(Exception):
    """Raised when a sealed workflow execution is mutated."""

    pass


@dataclass
class UserFeedback:
    """Feedback item from a user-facing source"""
    type: str  # "feature_request" | "bug_report" | "improvement" | "praise"
    content: str
    priority: str  # "low" | "medium" | "high" | "critical"
    timestamp: datetime = field(default_factory=datetime.now)
    source: str = "direct"  # "github" | "direct" | "analytics" | "reviews"


@dataclass
class MarketTrend:
    """Observed technology/market trend"""
    technology: str
    trend_direction: str  # "rising" | "declining" | "stable"
    adoption_rate: float = 0.0
    relevance_score: float = 0.0
    source: str = "unknown"
    timestamp: datetime = field(default_factory=datetime.now)


@dataclass
class BugReport:
    """Known defect"""
    severity: str  # "low" | "medium" | "high" | "critical"
    description: str
    component: str = "unknown"
    frequency: int = 1
    timestamp: datetime = field(default_factory=datetime.now)


@dataclass
class PerformanceMetric:
    """Single measured performance metric with its threshold"""
    metric: str
    value: float
    threshold: float
    trend: str = "stable"  # "improving" | "declining" | "stable"
    timestamp: datetime = field(default_factory=datetime.now)

    @property
    def breached(self) -> bool:
        return self.value < self.threshold


@dataclass
class ProjectContext:
    """Snapshot of artifact presence and operational signals.

    Flags reflect artifact state at snapshot time only.
    """
    has_constitution: bool = False
    has_specification: bool = False
    has_plan: bool = False
    has_tasks: bool = False
    has_implementation: bool = False
    code_quality: str = "fair"
    user_feedback: list[UserFeedback] = field(default_factory=list)
    market_trends: list[MarketTrend] = field(default_factory=list)
    bug_reports: list[BugReport] = field(default_factory=list)
    performance_metrics: list[PerformanceMetric] = field(default_factory=list)
    last_evolution: datetime | None = None
    snapshot_at: datetime = field(default_factory=datetime.now)

    def completed_phases(self) -> list[str]:
        """Names of the workflow phases whose artifacts exist"""
        phases = [
            ("Constitution", self.has_constitution),
            ("Specification", self.has_specification),
            ("Plan", self.has_plan),
            ("Tasks", self.has_tasks),
            ("Implementation", self.has_implementation),
        ]
        return [name for name, present in phases if present]

    def describe_state(self) -> str:
        phases = self.completed_phases()
        return " -> ".join(phases) if phases else "Initial"


@dataclass(frozen=True)
class Intent:
    """Structured classification of a free-text request"""
    category: str
    domain: str
    urgency: str
    scope: str
    keywords: tuple[str, ...] = ()

    def to_dict(self) -> dict:
        return {
            "category": self.category,
            "domain": self.domain,
            "urgency": self.urgency,
            "scope": self.scope,
            "keywords": list(self.keywords),
        }


@dataclass(frozen=True)
class AutonomousAction:
    """A planned, prioritized unit of work"""
    command: str
    reason: str
    priority: int
    expected_outcome: str
    dependencies: tuple[str, ...] = ()

    def to_dict(self) -> dict:
        return {
            "command": self.command,
            "reason": self.reason,
            "priority": self.priority,
            "expected_outcome": self.expected_outcome,
            "dependencies": list(self.dependencies),
        }


@dataclass(frozen=True)
class AutomationStep:
    """One typed step for the automation backend"""
    type: str  # navigate, click, type, scroll, screenshot, evaluate, wait
    target: str | None = None
    value: str | None = None
    options: tuple[tuple[str, Any], ...] = ()

    @property
    def label(self) -> str:
        return f"{self.type} {self.target}" if self.target else self.type


@dataclass(frozen=True)
class Decision:
    """Environment assignment for one action or automation step.

    Never mutated: a failed decision yields a new one via fallback_to().
    """
    subject: AutonomousAction | AutomationStep
    environment: str
    confidence: float
    reasoning: str
    fallbacks: tuple[str, ...] = ()

    @property
    def subject_name(self) -> str:
        if isinstance(self.subject, AutonomousAction):
            return self.subject.command
        return self.subject.label

    def fallback_to(self, strategy: str, environment: str, reasoning: str) -> "Decision":
        """Create the decision used when falling back to strategy"""
        remaining = self.fallbacks[self.fallbacks.index(strategy) + 1:] if strategy in self.fallbacks else ()
        return Decision(
            subject=self.subject,
            environment=environment,
            confidence=self.confidence,
            reasoning=reasoning,
            fallbacks=remaining,
        )


@dataclass
class VisualComparison:
    """Classification of the change between two checkpoints"""
    changes: list[str] = field(default_factory=list)
    significance: str = "none"  # "none" | "minor" | "major"
    recommendation: str = ""
    before: str | None = None
    after: str | None = None


@dataclass
class StepResult:
    """Outcome of one executed step"""
    name: str
    environment: str
    success: bool
    duration: float = 0.0
    output: str = ""
    screenshot: str | None = None
    extracted_data: Any = None
    error: str | None = None
    fallback_used: str | None = None


@dataclass
class WorkflowExecution:
    """Aggregate result of running a plan; sealed once returned"""
    id: str
    started_at: datetime = field(default_factory=datetime.now)
    finished_at: datetime | None = None
    results: list[StepResult] = field(default_factory=list)
    decisions: list[Decision] = field(default_factory=list)
    visual_comparisons: list[VisualComparison] = field(default_factory=list)
    guidance: list[str] = field(default_factory=list)
    cancelled: bool = False
    _sealed: bool = field(default=False, repr=False)

    @property
    def sealed(self) -> bool:
        return self._sealed

    @property
    def total_steps(self) -> int:
        return len(self.results)

    @property
    def successful_steps(self) -> int:
        return sum(1 for r in self.results if r.success)

    @property
    def success_rate(self) -> float:
        if not self.results:
            return 0.0
        return self.successful_steps / len(self.results)

    @property
    def execution_time(self) -> float:
        end = self.finished_at or datetime.now()
        return (end - self.started_at).total_seconds()

    @property
    def screenshots(self) -> list[str]:
        return [r.screenshot for r in self.results if r.screenshot]

    def _check_open(self) -> None:
        if self._sealed:
            raise WorkflowSealedError(f"Workflow execution {self.id} is sealed")

    def add_result(self, result: StepResult) -> None:
        self._check_open()
        self.results.append(result)

    def add_decision(self, decision: Decision) -> None:
        self._check_open()
        self.decisions.append(decision)

    def add_comparison(self, comparison: VisualComparison) -> None:
        self._check_open()
        self.visual_comparisons.append(comparison)

    def add_guidance(self, note: str) -> None:
        self._check_open()
        self.guidance.append(note)

    def seal(self) -> None:
        if self._sealed:
            return
        self.finished_at = datetime.now()
        self._sealed = True

    def to_dict(self) -> dict:
        """Convert to dict for JSON serialization"""
        return {
            "id": self.id,
            "started_at": self.started_at.isoformat(),
            "finished_at": self.finished_at.isoformat() if self.finished_at else None,
            "success_rate": self.success_rate,
            "execution_time": self.execution_time,
            "cancelled": self.cancelled,
            "results": [
                {
                    "name": r.name,
                    "environment": r.environment,
                    "success": r.success,
                    "duration": r.duration,
                    "screenshot": r.screenshot,
                    "error": r.error,
                    "fallback_used": r.fallback_used,
                }
                for r in self.results
            ],
            "guidance": list(self.guidance),
        }
