"""Evolution cycles: measure, gather, plan, execute, measure again."""

import logging
import time
import uuid
from datetime import datetime

from autodev.config.schema import SchedulerConfig
from autodev.events import CycleRequested, EventBus
from autodev.evolution.metrics import MetricsProvider
from autodev.feedback.history import EvolutionHistory, FeedbackHistory, HistoryStore
from autodev.feedback.models import EvolutionCycle
from autodev.intelligence.gatherer import IntelligenceGatherer
from autodev.orchestration.checkpoint import RECENT_VISUAL_WINDOW, CheckpointManager
from autodev.orchestration.context import ContextSnapshotBuilder
from autodev.orchestration.coordinator import ExecutionCoordinator
from autodev.orchestration.intent import IntentClassifier
from autodev.orchestration.models import WorkflowExecution
from autodev.orchestration.planner import ActionPlanner

logger = logging.getLogger(__name__)

DEFAULT_DOMAIN = "software_development"
DEFAULT_KEYWORDS = ["automation", "development", "AI", "optimization"]


def new_cycle_id() -> str:
    return f"cycle_{int(time.time() * 1000)}_{uuid.uuid4().hex[:9]}"


class EvolutionScheduler:
    """Owns evolution cycle execution and the evolution history.

    Only one cycle runs at a time: a request that arrives while a cycle is
    active is logged and skipped. Cycles therefore never interleave their
    before/after metric snapshots.
    """

    def __init__(
        self,
        bus: EventBus,
        context_builder: ContextSnapshotBuilder,
        classifier: IntentClassifier,
        planner: ActionPlanner,
        gatherer: IntelligenceGatherer,
        coordinator: ExecutionCoordinator,
        metrics: MetricsProvider,
        feedback_history: FeedbackHistory,
        history: EvolutionHistory | None = None,
        config: SchedulerConfig | None = None,
        store: HistoryStore | None = None,
        checkpoints: CheckpointManager | None = None,
    ):
        self.bus = bus
        self.context_builder = context_builder
        self.classifier = classifier
        self.planner = planner
        self.gatherer = gatherer
        self.coordinator = coordinator
        self.metrics = metrics
        self.feedback_history = feedback_history
        self.history = history if history is not None else EvolutionHistory()
        self.config = config or SchedulerConfig()
        self.store = store
        self.checkpoints = checkpoints
        self._active = False
        self.skipped_requests = 0

        bus.subscribe(CycleRequested, self._on_cycle_requested)

    @property
    def active(self) -> bool:
        return self._active

    async def _on_cycle_requested(self, event: CycleRequested) -> EvolutionCycle | None:
        return await self.run_cycle(event.trigger)

    async def run_cycle(self, trigger: str = "scheduled") -> EvolutionCycle | None:
        """Run one full cycle; None when another cycle is already active"""
        if self._active:
            self.skipped_requests += 1
            logger.info("Evolution cycle already active, skipping %s request", trigger)
            return None

        self._active = True
        cycle = EvolutionCycle(id=new_cycle_id(), trigger=trigger)
        logger.info("Evolution cycle %s started (%s)", cycle.id, trigger)

        try:
            cycle.metrics_before = await self.metrics.snapshot()

            text = self.synthesize_feedback()
            intent = self.classifier.classify(text)
            domain = intent.domain if intent.domain != "general" else DEFAULT_DOMAIN
            keywords = list(intent.keywords) or DEFAULT_KEYWORDS
            intelligence = await self.gatherer.gather(domain, keywords)

            context = self.context_builder.build()
            actions = self.planner.plan(context, intent, intelligence)
            execution = await self.coordinator.execute(
                actions,
                text,
                research_opportunities=intelligence.research_opportunities(),
                recent_visual=self.has_recent_visual(),
            )
            for summary in summarize_actions(execution):
                cycle.record_action(summary)
            self.metrics.record_execution(execution)

            cycle.metrics_after = await self.metrics.snapshot()
            cycle.success = len(cycle.improved_metrics()) >= self.config.min_improved_metrics
            cycle.learnings = extract_learnings(cycle)
            cycle.next_recommendations = list(intelligence.recommendations)

            logger.info(
                "Evolution cycle %s completed (%s)", cycle.id, "SUCCESS" if cycle.success else "PARTIAL"
            )
        except Exception as e:
            cycle.success = False
            cycle.learnings.append(f"Evolution failed: {e}")
            logger.error("Evolution cycle %s failed: %s", cycle.id, e)
        finally:
            cycle.seal()
            self.history.append(cycle)
            if self.store:
                self.store.append_cycle(cycle)
            self._active = False

        return cycle

    def has_recent_visual(self) -> bool:
        if self.checkpoints is None:
            return False
        return self.checkpoints.has_recent(datetime.now() - RECENT_VISUAL_WINDOW)

    def synthesize_feedback(self, limit: int = 10) -> str:
        """Recent feedback contents as one request text"""
        return ". ".join(f.content for f in self.feedback_history.last(limit))


def summarize_actions(execution: WorkflowExecution) -> list[str]:
    summaries = []
    for result in execution.results:
        if result.success:
            summaries.append(f"{result.name}: {result.output.strip()[:200] or 'completed'}")
        else:
            summaries.append(f"{result.name}: FAILED - {result.error or 'unknown error'}")
    return summaries


def extract_learnings(cycle: EvolutionCycle) -> list[str]:
    if cycle.success:
        return [
            "Evolution cycle successful - pattern can be replicated",
            f"Actions {', '.join(cycle.actions_performed)} showed positive results",
        ]
    return ["Evolution cycle needs refinement", "Consider alternative action sequences"]
