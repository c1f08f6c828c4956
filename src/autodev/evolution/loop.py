"""Continuous feedback loop: monitors + ingestor + scheduler"""
import logging
from dataclasses import dataclass, field
from pathlib import Path

from autodev.config.schema import SchedulerConfig
from autodev.evolution.metrics import MetricsProvider
from autodev.evolution.monitors import (
    CycleTimer,
    ExternalFeedbackMonitor,
    FeedbackSource,
    FileChangeWatcher,
    PerformanceMonitor,
    PeriodicMonitor,
)
from autodev.evolution.scheduler import EvolutionScheduler
from autodev.feedback.ingestor import FeedbackIngestor
from autodev.feedback.models import FeedbackData, FeedbackResponse

logger = logging.getLogger(__name__)


@dataclass
class LoopStatus:
    """Snapshot of loop activity"""
    is_active: bool
    total_feedback: int
    evolution_cycles: int
    success_rate: float  # percent of the last five cycles
    recent_activity: list[str] = field(default_factory=list)
    recommendations: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "is_active": self.is_active,
            "total_feedback": self.total_feedback,
            "evolution_cycles": self.evolution_cycles,
            "success_rate": self.success_rate,
            "recent_activity": list(self.recent_activity),
            "recommendations": list(self.recommendations),
        }


class ContinuousFeedbackLoop:
    """Starts and stops every background event source around one ingestor"""

    def __init__(
        self,
        ingestor: FeedbackIngestor,
        scheduler: EvolutionScheduler,
        metrics: MetricsProvider,
        project_root: Path,
        config: SchedulerConfig | None = None,
        sources: list[FeedbackSource] | None = None,
        performance_threshold: float = 70.0,
    ):
        self.ingestor = ingestor
        self.scheduler = scheduler
        self.config = config or SchedulerConfig()
        self.monitors: list[PeriodicMonitor] = [
            CycleTimer(scheduler, self.config.cycle_interval_hours * 3600, self.config.run_on_start),
            PerformanceMonitor(
                ingestor, metrics, self.config.performance_poll_minutes * 60, performance_threshold
            ),
            ExternalFeedbackMonitor(ingestor, sources or [], self.config.external_poll_minutes * 60),
            FileChangeWatcher(
                ingestor, project_root, self.config.file_watch_seconds, self.config.watch_suffixes
            ),
        ]
        self.is_active = False

    def start(self) -> None:
        if self.is_active:
            logger.info("Continuous feedback loop already running")
            return
        self.is_active = True
        for monitor in self.monitors:
            monitor.start()
        logger.info("Continuous feedback loop started with %d monitors", len(self.monitors))

    async def stop(self) -> None:
        for monitor in self.monitors:
            await monitor.stop()
        self.is_active = False
        logger.info("Continuous feedback loop stopped")

    async def process_feedback(self, feedback: FeedbackData) -> FeedbackResponse:
        return await self.ingestor.ingest(feedback)

    def status_report(self) -> LoopStatus:
        recent = self.scheduler.history.recent(5)
        success_rate = 100.0 * sum(1 for c in recent if c.success) / len(recent) if recent else 0.0
        return LoopStatus(
            is_active=self.is_active,
            total_feedback=len(self.ingestor.history),
            evolution_cycles=len(self.scheduler.history),
            success_rate=success_rate,
            recent_activity=[f"{c.id}: {'SUCCESS' if c.success else 'FAILED'}" for c in recent],
            recommendations=self.recommendations(),
        )

    def recommendations(self) -> list[str]:
        recommendations = []
        recent = self.ingestor.history.last(10)

        if sum(1 for f in recent if f.type == "bug") > 3:
            recommendations.append("Increase automated testing and code review processes")
        if sum(1 for f in recent if f.type == "performance_issue") > 2:
            recommendations.append("Schedule comprehensive performance optimization")

        last_cycle = self.scheduler.history.last()
        if last_cycle is not None and not last_cycle.success:
            recommendations.append("Review and refine evolution strategy based on recent failures")

        return recommendations
