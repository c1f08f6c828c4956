"""Builds ProjectContext snapshots from project artifacts and history."""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from pathlib import Path

from autodev.config import defaults
from autodev.feedback.history import EvolutionHistory, FeedbackHistory
from autodev.orchestration.models import (
    BugReport,
    MarketTrend,
    PerformanceMetric,
    ProjectContext,
    UserFeedback,
)

logger = logging.getLogger(__name__)

# FeedbackData.type -> UserFeedback.type
DEFAULT_SIGNAL_WINDOW = timedelta(days=30)

_USER_FEEDBACK_TYPES = {
    "bug": "bug_report",
    "feature_request": "feature_request",
    "success": "praise",
}


@dataclass
class ProjectSignals:
    """Operational signals supplied by collaborators outside the history logs"""
    user_feedback: list[UserFeedback] = field(default_factory=list)
    market_trends: list[MarketTrend] = field(default_factory=list)
    bug_reports: list[BugReport] = field(default_factory=list)
    performance_metrics: list[PerformanceMetric] = field(default_factory=list)


class ContextSnapshotBuilder:
    """Reads artifact presence and history into a ProjectContext.

    Pure read: nothing in the project or the history logs is modified.
    Artifact layout::

        .specify/memory/constitution.md
        .specify/specs/<feature>/plan.md
        .specify/specs/<feature>/tasks.md
    """

    def __init__(
        self,
        project_root: Path,
        feedback_history: FeedbackHistory | None = None,
        evolution_history: EvolutionHistory | None = None,
        implementation_indicators: list[str] | None = None,
        signal_window: timedelta = DEFAULT_SIGNAL_WINDOW,
    ):
        self.project_root = project_root
        self.signal_window = signal_window
        self.feedback_history = feedback_history
        self.evolution_history = evolution_history
        self.implementation_indicators = (
            implementation_indicators or defaults.DEFAULT_IMPLEMENTATION_INDICATORS
        )

    @property
    def specify_dir(self) -> Path:
        return self.project_root / ".specify"

    @property
    def specs_dir(self) -> Path:
        return self.specify_dir / "specs"

    def build(self, signals: ProjectSignals | None = None, now: datetime | None = None) -> ProjectContext:
        signals = signals or ProjectSignals()
        recent = self._recent_feedback(now)

        user_feedback = list(signals.user_feedback) + self._user_feedback_from_history(recent)
        bug_reports = list(signals.bug_reports) + self._bug_reports_from_history(recent)
        metrics = list(signals.performance_metrics)

        context = ProjectContext(
            has_constitution=self.has_constitution(),
            has_specification=self.has_specification(),
            has_plan=self._any_spec_contains("plan.md"),
            has_tasks=self._any_spec_contains("tasks.md"),
            has_implementation=self.has_implementation(),
            user_feedback=user_feedback,
            market_trends=list(signals.market_trends),
            bug_reports=bug_reports,
            performance_metrics=metrics,
            last_evolution=(
                self.evolution_history.last_completed_at() if self.evolution_history else None
            ),
        )
        context.code_quality = self.assess_code_quality(context)

        logger.debug("Project context snapshot: %s", context.describe_state())
        return context

    def has_constitution(self) -> bool:
        return (self.specify_dir / "memory" / "constitution.md").is_file()

    def has_specification(self) -> bool:
        return self.specs_dir.is_dir() and any(self.specs_dir.iterdir())

    def has_implementation(self) -> bool:
        return any((self.project_root / name).exists() for name in self.implementation_indicators)

    def _any_spec_contains(self, filename: str) -> bool:
        if not self.specs_dir.is_dir():
            return False
        return any(
            (spec / filename).is_file() for spec in self.specs_dir.iterdir() if spec.is_dir()
        )

    def assess_code_quality(self, context: ProjectContext) -> str:
        """Coarse grade from defect and metric signals"""
        if any(bug.severity == "critical" for bug in context.bug_reports):
            return "poor"
        if context.bug_reports or any(m.breached for m in context.performance_metrics):
            return "fair"
        if not context.has_implementation:
            return "fair"
        if (self.project_root / "tests").is_dir():
            return "excellent"
        return "good"

    def _recent_feedback(self, now: datetime | None) -> list:
        """History items inside the signal window; older ones no longer count"""
        if not self.feedback_history:
            return []
        return self.feedback_history.within(self.signal_window, now)

    def _user_feedback_from_history(self, recent: list) -> list[UserFeedback]:
        return [
            UserFeedback(
                type=_USER_FEEDBACK_TYPES.get(item.type, "improvement"),
                content=item.content,
                priority=item.priority,
                timestamp=item.timestamp,
                source="direct",
            )
            for item in recent
            if item.source == "user"
        ]

    def _bug_reports_from_history(self, recent: list) -> list[BugReport]:
        return [
            BugReport(
                severity=item.priority,
                description=item.content,
                component=item.source,
                timestamp=item.timestamp,
            )
            for item in recent
            if item.type == "bug"
        ]
