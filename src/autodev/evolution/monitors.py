"""Background event sources feeding the feedback ingestor"""
import asyncio
import logging
from abc import ABC, abstractmethod
from pathlib import Path

from autodev.config import defaults
from autodev.evolution.metrics import MetricsProvider
from autodev.evolution.scheduler import EvolutionScheduler
from autodev.feedback.ingestor import FeedbackIngestor
from autodev.feedback.models import FeedbackData

logger = logging.getLogger(__name__)

IGNORED_DIRS = {".git", ".specify", "node_modules", "__pycache__", ".venv", "venv"}


class FeedbackSource(ABC):
    """External feedback provider (issue trackers, reviews, ...)"""

    @abstractmethod
    async def fetch(self) -> list[FeedbackData]:
        """Feedback items that arrived since the last fetch"""
        pass


class PeriodicMonitor(ABC):
    """Runs tick() every interval seconds in a background task.

    A failing tick is logged; the monitor keeps running.
    """

    name = "monitor"

    def __init__(self, interval: float, run_immediately: bool = False):
        self.interval = interval
        self.run_immediately = run_immediately
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    @abstractmethod
    async def tick(self) -> None:
        pass

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._run(), name=self.name)

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None

    async def _run(self) -> None:
        if not self.run_immediately:
            await asyncio.sleep(self.interval)
        while True:
            try:
                await self.tick()
            except Exception as e:
                logger.error("%s tick failed: %s", self.name, e)
            await asyncio.sleep(self.interval)


class CycleTimer(PeriodicMonitor):
    """Fires a scheduled evolution cycle unconditionally"""

    name = "evolution-timer"

    def __init__(self, scheduler: EvolutionScheduler, interval: float, run_immediately: bool = True):
        super().__init__(interval, run_immediately)
        self.scheduler = scheduler

    async def tick(self) -> None:
        await self.scheduler.run_cycle("scheduled")


class PerformanceMonitor(PeriodicMonitor):
    """Reports a high-priority performance_issue when performance drops below threshold.

    A degraded reading is reported once; the same reading is not reported
    again until performance recovers or the reading changes.
    """

    name = "performance-monitor"

    def __init__(
        self,
        ingestor: FeedbackIngestor,
        metrics: MetricsProvider,
        interval: float,
        threshold: float = 70.0,
    ):
        super().__init__(interval)
        self.ingestor = ingestor
        self.metrics = metrics
        self.threshold = threshold
        self._last_reported: float | None = None

    async def tick(self) -> None:
        performance = await self.metrics.measure_performance()
        if performance is None:
            return
        if performance >= self.threshold:
            self._last_reported = None
            return
        if performance == self._last_reported:
            return
        self._last_reported = performance
        await self.ingestor.ingest(FeedbackData(
            source="system",
            type="performance_issue",
            content="Performance degradation detected",
            priority="high",
            metrics={"performance": performance},
        ))


class ExternalFeedbackMonitor(PeriodicMonitor):
    """Polls external feedback sources"""

    name = "external-feedback-monitor"

    def __init__(self, ingestor: FeedbackIngestor, sources: list[FeedbackSource], interval: float):
        super().__init__(interval)
        self.ingestor = ingestor
        self.sources = sources

    async def tick(self) -> None:
        for source in self.sources:
            try:
                items = await source.fetch()
            except Exception as e:
                logger.warning("Feedback source %s failed: %s", type(source).__name__, e)
                continue
            for item in items:
                await self.ingestor.ingest(item)


class FileChangeWatcher(PeriodicMonitor):
    """Polls source file modification times and reports changes as low-priority feedback"""

    name = "file-watcher"

    def __init__(
        self,
        ingestor: FeedbackIngestor,
        root: Path,
        interval: float,
        suffixes: list[str] | None = None,
    ):
        super().__init__(interval, run_immediately=True)
        self.ingestor = ingestor
        self.root = root
        self.suffixes = tuple(suffixes or defaults.DEFAULT_WATCH_SUFFIXES)
        self._mtimes: dict[Path, float] | None = None

    def scan(self) -> dict[Path, float]:
        mtimes = {}
        for path in self.root.rglob("*"):
            if path.suffix not in self.suffixes or not path.is_file():
                continue
            if IGNORED_DIRS.intersection(path.relative_to(self.root).parts):
                continue
            try:
                mtimes[path] = path.stat().st_mtime
            except OSError:
                continue
        return mtimes

    def changed_files(self) -> list[Path]:
        """Files created or modified since the previous call; the first call only records a baseline"""
        current = self.scan()
        previous, self._mtimes = self._mtimes, current
        if previous is None:
            return []
        return sorted(p for p, mtime in current.items() if previous.get(p) != mtime)

    async def tick(self) -> None:
        for path in self.changed_files():
            await self.ingestor.ingest(FeedbackData(
                source="system",
                type="improvement",
                content=f"Code change detected in {path.relative_to(self.root)}",
                priority="low",
            ))
