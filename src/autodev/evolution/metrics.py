"""Metric snapshots taken before and after evolution cycles"""
import logging
from abc import ABC, abstractmethod
from pathlib import Path

from autodev.config import defaults
from autodev.feedback.history import FeedbackHistory
from autodev.orchestration.context import ContextSnapshotBuilder
from autodev.orchestration.models import WorkflowExecution

logger = logging.getLogger(__name__)

QUALITY_SCORES = {"poor": 25.0, "fair": 50.0, "good": 75.0, "excellent": 95.0}
SOURCE_SUFFIXES = (".py", ".js", ".ts")


class MetricsProvider(ABC):
    """Supplies numeric project metrics (higher is better)"""

    @abstractmethod
    async def snapshot(self) -> dict[str, float]:
        """Current value of every tracked metric"""
        pass

    def record_execution(self, execution: WorkflowExecution) -> None:
        """Hook for providers that derive metrics from executions"""
        pass

    async def measure_performance(self) -> float | None:
        """Current performance score, or None when unknown"""
        return (await self.snapshot()).get("performance")


class StateMetricsProvider(MetricsProvider):
    """Derives metrics from project artifacts, feedback history and recent executions.

    Values recorded through record_metric() take precedence over derived ones.
    """

    def __init__(
        self,
        context_builder: ContextSnapshotBuilder,
        feedback_history: FeedbackHistory,
        tracked: list[str] | None = None,
        window: int = 20,
    ):
        self.context_builder = context_builder
        self.feedback_history = feedback_history
        self.tracked = tracked or defaults.DEFAULT_TRACKED_METRICS
        self.window = window
        self._recorded: dict[str, float] = {}
        self._last_execution: WorkflowExecution | None = None

    def record_metric(self, name: str, value: float) -> None:
        self._recorded[name] = float(value)

    def record_execution(self, execution: WorkflowExecution) -> None:
        self._last_execution = execution

    async def snapshot(self) -> dict[str, float]:
        context = self.context_builder.build()
        recent = self.feedback_history.last(self.window)

        derived = {
            "code_quality": QUALITY_SCORES.get(context.code_quality, 50.0),
            "performance": self._latest_performance(),
            "user_satisfaction": self._user_satisfaction(recent),
            "market_alignment": 100.0 * len(context.completed_phases()) / 5,
            "technical_debt": max(0.0, 100.0 - 10.0 * len(context.bug_reports)),
            "test_coverage": self._test_coverage(self.context_builder.project_root),
            "build_success": 100.0 * self._last_execution.success_rate if self._last_execution else 0.0,
        }
        derived.update(self._recorded)
        return {name: derived[name] for name in self.tracked if name in derived}

    def _latest_performance(self) -> float:
        for item in reversed(self.feedback_history.last(self.window)):
            if _is_monitor_report(item):
                continue
            value = item.metric("performance")
            if value is not None:
                return value
        return 100.0

    @staticmethod
    def _user_satisfaction(recent) -> float:
        rated = [f for f in recent if f.type in ("success", "bug", "failure")]
        if not rated:
            return 50.0
        positive = sum(1 for f in rated if f.type == "success")
        return 100.0 * positive / len(rated)

    @staticmethod
    def _test_coverage(project_root: Path) -> float:
        """Share of source files that have a matching test_ file"""
        tests_dir = project_root / "tests"
        if not tests_dir.is_dir():
            return 0.0
        test_names = {p.stem for p in tests_dir.rglob("test_*") if p.suffix in SOURCE_SUFFIXES}
        sources = [
            p for p in project_root.rglob("*")
            if p.suffix in SOURCE_SUFFIXES
            and not p.name.startswith(("test_", "__"))
            and tests_dir not in p.parents
            and not any(part.startswith(".") for part in p.relative_to(project_root).parts)
        ]
        if not sources:
            return 0.0
        covered = sum(1 for p in sources if f"test_{p.stem}" in test_names)
        return 100.0 * covered / len(sources)


def _is_monitor_report(item) -> bool:
    """Degradation reports echo a reading taken here, so they are not a new measurement"""
    return item.source == "system" and item.type == "performance_issue"
