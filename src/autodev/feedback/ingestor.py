"""Feedback ingestion: immediate response, trigger check and learning updates"""
import logging
from datetime import datetime, timedelta

from autodev.config.schema import FeedbackConfig
from autodev.events import CycleRequested, EventBus
from autodev.feedback.history import FeedbackHistory, HistoryStore
from autodev.feedback.learning import LearningModelTable
from autodev.feedback.models import EvolutionCycle, FeedbackData, FeedbackResponse

logger = logging.getLogger(__name__)

DEFAULT_RESPONSE = ("Monitor", "Feedback noted and logged for analysis")


def respond(feedback: FeedbackData) -> FeedbackResponse:
    """Immediate response label for a feedback item's (type, priority)"""
    action, reasoning = DEFAULT_RESPONSE

    if feedback.type == "bug":
        if feedback.priority == "critical":
            action, reasoning = "Immediate Fix Required", "Critical bug detected - triggering emergency fix workflow"
        else:
            action, reasoning = "Schedule Bug Fix", "Bug added to fix queue based on priority level"
    elif feedback.type == "performance_issue":
        action, reasoning = "Performance Analysis", "Performance degradation detected - scheduling optimization"
    elif feedback.type == "feature_request" and feedback.priority == "high":
        action, reasoning = (
            "Evaluate Feature",
            "High-priority feature request - analyzing market fit and feasibility",
        )
    elif feedback.type == "success":
        action, reasoning = "Reinforce Success", "Positive outcome detected - analyzing for replication patterns"

    return FeedbackResponse(action=action, reasoning=reasoning)


class FeedbackIngestor:
    """Single entry point for every feedback source.

    IDLE -> RESPONDING -> (EVOLVING -> IDLE | IDLE). Each item is appended to
    history before anything else. When the trigger predicate holds a
    CycleRequested event is published; the subscribed scheduler owns the
    cycle itself.
    """

    def __init__(
        self,
        bus: EventBus,
        history: FeedbackHistory | None = None,
        models: LearningModelTable | None = None,
        config: FeedbackConfig | None = None,
        store: HistoryStore | None = None,
    ):
        self.bus = bus
        self.config = config or FeedbackConfig()
        self.history = history if history is not None else FeedbackHistory()
        self.models = models if models is not None else LearningModelTable(self.config)
        self.store = store
        self.state = "idle"

    async def ingest(self, feedback: FeedbackData) -> FeedbackResponse:
        self.history.append(feedback)
        if self.store:
            self.store.append_feedback(feedback)

        self.state = "responding"
        response = respond(feedback)
        logger.info("Feedback [%s/%s] from %s: %s", feedback.type, feedback.priority, feedback.source, response.action)

        try:
            if self.should_trigger_evolution(feedback):
                self.state = "evolving"
                response.evolution_triggered = True
                results = await self.bus.publish(
                    CycleRequested(trigger=self._trigger_for(feedback), reason=response.reasoning)
                )
                cycle = next((r for r in results if isinstance(r, EvolutionCycle)), None)
                if cycle is not None:
                    response.cycle_id = cycle.id

            self.models.update(feedback, response.action, response.reasoning)
            if self.store:
                self.store.save_models(self.models.to_list())
        finally:
            self.state = "idle"

        return response

    def should_trigger_evolution(self, feedback: FeedbackData, now: datetime | None = None) -> bool:
        if feedback.priority == "critical":
            return True

        performance = feedback.metric("performance")
        if (
            feedback.type == "performance_issue"
            and performance is not None
            and performance < self.config.performance_trigger_threshold
        ):
            return True

        window = timedelta(hours=self.config.trigger_window_hours)
        return self.history.count_high_priority(window, now) >= self.config.trigger_count

    @staticmethod
    def _trigger_for(feedback: FeedbackData) -> str:
        if feedback.type == "performance_issue":
            return "performance_drop"
        if feedback.source == "market":
            return "market_change"
        return "feedback"
