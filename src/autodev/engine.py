"""Autonomous engine: wires classification, planning, execution and feedback together."""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta

from autodev.config.manager import ConfigManager
from autodev.config.schema import EngineConfig
from autodev.events import EventBus
from autodev.evolution.loop import ContinuousFeedbackLoop
from autodev.evolution.metrics import MetricsProvider, StateMetricsProvider
from autodev.evolution.monitors import FeedbackSource
from autodev.evolution.scheduler import EvolutionScheduler
from autodev.execution.command_backend import SubprocessCommandBackend
from autodev.execution.protocol import AutomationBackend, CommandBackend
from autodev.execution.router import EnvironmentRouter
from autodev.execution.tools import tool_availability
from autodev.feedback.history import EvolutionHistory, FeedbackHistory, HistoryStore
from autodev.feedback.ingestor import FeedbackIngestor
from autodev.feedback.learning import LearningModelTable
from autodev.feedback.models import EvolutionCycle, FeedbackData, FeedbackResponse
from autodev.intelligence.gatherer import IntelligenceGatherer, IntelligenceSource
from autodev.intelligence.models import IntelligenceReport
from autodev.orchestration.checkpoint import RECENT_VISUAL_WINDOW, CheckpointManager
from autodev.orchestration.context import ContextSnapshotBuilder, ProjectSignals
from autodev.orchestration.coordinator import ExecutionCoordinator
from autodev.orchestration.intent import IntentClassifier
from autodev.orchestration.models import AutonomousAction, Intent, ProjectContext, WorkflowExecution
from autodev.orchestration.planner import ActionPlanner, render_plan
from autodev.orchestration.selector import EnvironmentSelector
from autodev.orchestration.visual import VisualFeedbackAnalyzer
from autodev.orchestration.workflow import UnifiedWorkflow, WorkflowBuilder

logger = logging.getLogger(__name__)


@dataclass
class EngineRequest:
    """One free-text request and how to run it"""
    text: str
    environment: str = "auto"  # auto, terminal, browser, hybrid
    mode: str | None = None  # None uses execution.mode
    visual_feedback: bool | None = None  # None uses execution.visual_feedback
    market_intelligence: bool = True
    evolution_enabled: bool = True


@dataclass
class PlanResult:
    """Plan for a request, without execution"""
    intent: Intent
    context: ProjectContext
    intelligence: IntelligenceReport
    actions: list[AutonomousAction]
    plan_text: str
    reasoning: str


@dataclass
class EngineResult:
    """Everything produced while processing one request"""
    plan: PlanResult
    workflow: UnifiedWorkflow
    execution: WorkflowExecution
    recommendations: list[str] = field(default_factory=list)
    next_actions: list[AutonomousAction] = field(default_factory=list)
    feedback_response: FeedbackResponse | None = None

    @property
    def success(self) -> bool:
        return self.execution.success_rate >= 0.8

    def to_dict(self) -> dict:
        return {
            "intent": self.plan.intent.to_dict(),
            "actions": [a.to_dict() for a in self.plan.actions],
            "execution": self.execution.to_dict(),
            "recommendations": list(self.recommendations),
            "next_actions": [a.to_dict() for a in self.next_actions],
        }


@dataclass
class PerformanceTracker:
    """Rolling averages over processed workflows"""
    total_workflows: int = 0
    avg_success_rate: float = 0.0
    avg_execution_time: float = 0.0
    environment_usage: dict[str, int] = field(
        default_factory=lambda: {"terminal": 0, "browser": 0, "hybrid": 0}
    )

    def record(self, execution: WorkflowExecution) -> None:
        n = self.total_workflows
        self.avg_success_rate = (self.avg_success_rate * n + execution.success_rate) / (n + 1)
        self.avg_execution_time = (self.avg_execution_time * n + execution.execution_time) / (n + 1)
        self.total_workflows = n + 1
        for result in execution.results:
            self.environment_usage[result.environment] = self.environment_usage.get(result.environment, 0) + 1


class AutonomousEngine:
    """Library entry point.

    Owns one instance of every component and the shared history. Feedback
    reaches the evolution scheduler only through the event bus.
    """

    def __init__(
        self,
        config: EngineConfig | None = None,
        command_backend: CommandBackend | None = None,
        automation_backend: AutomationBackend | None = None,
        intelligence_source: IntelligenceSource | None = None,
        analyzer: VisualFeedbackAnalyzer | None = None,
        metrics: MetricsProvider | None = None,
        feedback_sources: list[FeedbackSource] | None = None,
        persist: bool = True,
    ):
        self.config = config or ConfigManager.get_config()
        self.project_root = self.config.project_root()
        self.store = HistoryStore(self.config.state_dir()) if persist else None

        self.feedback_history = FeedbackHistory(self.store.load_feedback() if self.store else None)
        self.evolution_history = EvolutionHistory(self.store.load_cycles() if self.store else None)
        self.learning_models = LearningModelTable(
            self.config.feedback, self.store.load_models() if self.store else None
        )

        execution_config = self.config.execution
        self.router = EnvironmentRouter(
            command_backend
            or SubprocessCommandBackend(
                execution_config.command_map, cwd=self.project_root, timeout=execution_config.step_timeout
            ),
            automation_backend,
            timeout=execution_config.step_timeout,
        )
        self.checkpoints = CheckpointManager(self.config.state_dir() / "checkpoints")

        self.classifier = IntentClassifier(self.config.intent)
        self.context_builder = ContextSnapshotBuilder(
            self.project_root,
            self.feedback_history,
            self.evolution_history,
            execution_config.implementation_indicators,
            timedelta(days=self.config.feedback.context_window_days),
        )
        self.planner = ActionPlanner(self.config.planner)
        self.selector = EnvironmentSelector(self.config.selector, self.router.automation_available)
        self.coordinator = ExecutionCoordinator(
            self.router, self.selector, analyzer, execution_config, self.checkpoints
        )
        if intelligence_source is not None:
            self.gatherer = IntelligenceGatherer(intelligence_source, self.config.intelligence)
        else:
            self.gatherer = IntelligenceGatherer.from_config(self.config.intelligence)

        self.metrics = metrics or StateMetricsProvider(
            self.context_builder, self.feedback_history, self.config.scheduler.tracked_metrics
        )
        self.performance = PerformanceTracker()

        self.bus = EventBus()
        self.ingestor = FeedbackIngestor(
            self.bus, self.feedback_history, self.learning_models, self.config.feedback, self.store
        )
        self.scheduler = EvolutionScheduler(
            self.bus,
            self.context_builder,
            self.classifier,
            self.planner,
            self.gatherer,
            # separate coordinator: cancel() only affects request workflows
            ExecutionCoordinator(self.router, self.selector, analyzer, execution_config, self.checkpoints),
            self.metrics,
            self.feedback_history,
            self.evolution_history,
            self.config.scheduler,
            self.store,
            self.checkpoints,
        )
        self.loop = ContinuousFeedbackLoop(
            self.ingestor,
            self.scheduler,
            self.metrics,
            self.project_root,
            self.config.scheduler,
            feedback_sources,
            self.config.feedback.performance_trigger_threshold,
        )

    async def plan(self, text: str, signals: ProjectSignals | None = None) -> PlanResult:
        intent = self.classifier.classify(text)
        context = self.context_builder.build(signals)
        intelligence = await self.gatherer.gather(intent.domain, list(intent.keywords))
        actions = self.planner.plan(context, intent, intelligence)
        return PlanResult(
            intent=intent,
            context=context,
            intelligence=intelligence,
            actions=actions,
            plan_text=render_plan(actions),
            reasoning=self.planner.explain(context, intent, actions, intelligence),
        )

    async def process_request(
        self, request: EngineRequest | str, signals: ProjectSignals | None = None
    ) -> EngineResult:
        if isinstance(request, str):
            request = EngineRequest(text=request)
        logger.info("Processing request: %s", request.text[:80])

        plan = await self.plan(request.text, signals)
        mode = request.mode or self.config.execution.mode
        workflow = WorkflowBuilder(self.router.automation_available, mode).build(request.text, plan.actions)

        visual = self.config.execution.visual_feedback if request.visual_feedback is None else request.visual_feedback
        self.coordinator.config = self.config.execution.model_copy(update={"visual_feedback": visual})
        execution = await self.coordinator.execute(
            workflow.actions,
            request.text,
            steps=workflow.steps,
            requested=request.environment,
            research_opportunities=plan.intelligence.research_opportunities(),
            recent_visual=self.checkpoints.has_recent(datetime.now() - RECENT_VISUAL_WINDOW),
        )
        self.performance.record(execution)
        self.metrics.record_execution(execution)

        result = EngineResult(
            plan=plan,
            workflow=workflow,
            execution=execution,
            recommendations=self.recommendations(request, execution, mode, visual),
            next_actions=self.next_actions(request, execution, workflow),
        )

        if request.evolution_enabled:
            result.feedback_response = await self.ingestor.ingest(execution_feedback(execution))
        return result

    def cancel(self) -> None:
        self.coordinator.cancel()

    async def submit_feedback(self, feedback: FeedbackData) -> FeedbackResponse:
        return await self.ingestor.ingest(feedback)

    async def evolve(self, trigger: str = "user_request") -> EvolutionCycle | None:
        return await self.scheduler.run_cycle(trigger)

    def recommendations(
        self, request: EngineRequest, execution: WorkflowExecution, mode: str, visual: bool
    ) -> list[str]:
        recommendations = []

        if execution.success_rate < 0.8:
            recommendations.append("Consider breaking down complex tasks into smaller steps for higher success rate")
        if execution.execution_time > 30:
            recommendations.append(
                "Workflow execution time is high - consider parallel execution or caching strategies"
            )
        if visual and len(execution.screenshots) < 3:
            recommendations.append("Enable more visual checkpoints for better debugging and validation")

        browser_steps = sum(1 for r in execution.results if r.environment in ("browser", "hybrid"))
        if browser_steps == 0 and self.router.automation_available:
            recommendations.append(
                "Consider leveraging browser capabilities for market research and visual validation"
            )

        if mode == "conservative" and execution.success_rate > 0.95:
            recommendations.append(
                "High success rate achieved - consider switching to balanced mode for faster execution"
            )
        elif mode == "aggressive" and execution.success_rate < 0.7:
            recommendations.append(
                "Low success rate in aggressive mode - consider switching to balanced or conservative mode"
            )

        if not request.evolution_enabled:
            recommendations.append("Enable evolution cycles for continuous improvement and optimization")

        return recommendations

    def next_actions(
        self, request: EngineRequest, execution: WorkflowExecution, workflow: UnifiedWorkflow
    ) -> list[AutonomousAction]:
        actions = []

        if execution.success_rate < 0.9:
            actions.append(AutonomousAction(
                command="/evolve",
                reason="Sub-optimal performance detected, evolutionary improvement recommended",
                priority=8,
                expected_outcome="Improved workflow performance and success rate",
            ))
        if len(execution.screenshots) + len(execution.visual_comparisons) > 5:
            actions.append(AutonomousAction(
                command="/document",
                reason="Rich visual insights captured, documentation update recommended",
                priority=6,
                expected_outcome="Updated documentation with visual workflow evidence",
            ))
        if request.market_intelligence and self.router.automation_available:
            actions.append(AutonomousAction(
                command="/market-analysis",
                reason="Market intelligence requested, web research recommended",
                priority=7,
                expected_outcome="Market trends and competitive analysis report",
            ))
        if workflow.steps:
            actions.append(AutonomousAction(
                command="/validate",
                reason="Browser workflow executed, validation recommended",
                priority=5,
                expected_outcome="Workflow results validated and documented",
            ))
        if self.performance.total_workflows > 5 and self.performance.avg_success_rate < 0.85:
            actions.append(AutonomousAction(
                command="/optimize",
                reason=(
                    f"Average success rate ({round(self.performance.avg_success_rate * 100)}%) "
                    "below target, optimization needed"
                ),
                priority=9,
                expected_outcome="Improved workflow patterns and execution strategies",
                dependencies=("/evolve",),
            ))

        return sorted(actions, key=lambda a: a.priority, reverse=True)

    def status(self) -> dict:
        context = self.context_builder.build()
        return {
            "project_state": context.describe_state(),
            "code_quality": context.code_quality,
            "automation_available": self.router.automation_available,
            "tools": tool_availability(),
            "workflows": {
                "total": self.performance.total_workflows,
                "avg_success_rate": self.performance.avg_success_rate,
                "avg_execution_time": self.performance.avg_execution_time,
                "environment_usage": dict(self.performance.environment_usage),
            },
            "feedback_loop": self.loop.status_report().to_dict(),
            "learning_models": len(self.learning_models),
        }


def execution_feedback(execution: WorkflowExecution) -> FeedbackData:
    """System feedback describing a finished workflow execution"""
    succeeded = execution.total_steps > 0 and execution.success_rate >= 0.8
    return FeedbackData(
        source="system",
        type="success" if succeeded else "failure",
        content=(
            f"Workflow {execution.id} completed {execution.successful_steps}/{execution.total_steps} steps"
        ),
        priority="low" if succeeded else "medium",
        metrics={"success_rate": execution.success_rate * 100},
    )
