"""Cross-environment execution of a planned workflow."""

import logging
import time
import uuid

from autodev.config.schema import ExecutionConfig
from autodev.execution.router import EnvironmentRouter
from autodev.orchestration.checkpoint import CheckpointManager, VisualCheckpoint
from autodev.orchestration.models import (
    AutomationStep,
    AutonomousAction,
    Decision,
    StepResult,
    WorkflowExecution,
)
from autodev.orchestration.selector import EnvironmentSelector, describe_fallback, fallback_environment
from autodev.orchestration.visual import FileVisualAnalyzer, VisualFeedbackAnalyzer

logger = logging.getLogger(__name__)


class ExecutionCoordinator:
    """Runs actions, then automation steps, collecting one result per step.

    A failed step walks its decision's fallbacks in order; if every fallback
    fails the step is recorded as failed and execution moves on. The action
    list is never modified during a run. Visual comparisons only produce
    guidance for the next planning pass.
    """

    def __init__(
        self,
        router: EnvironmentRouter,
        selector: EnvironmentSelector,
        analyzer: VisualFeedbackAnalyzer | None = None,
        config: ExecutionConfig | None = None,
        checkpoints: CheckpointManager | None = None,
    ):
        self.router = router
        self.selector = selector
        self.analyzer = analyzer or FileVisualAnalyzer()
        self.config = config or ExecutionConfig()
        self.checkpoints = checkpoints
        self._cancelled = False

    def cancel(self) -> None:
        """Stop scheduling further steps once the current one returns"""
        self._cancelled = True

    async def execute(
        self,
        actions: list[AutonomousAction],
        text: str = "",
        steps: list[AutomationStep] | tuple[AutomationStep, ...] = (),
        requested: str = "auto",
        research_opportunities: list[str] | None = None,
        recent_visual: bool = False,
    ) -> WorkflowExecution:
        self._cancelled = False
        execution = WorkflowExecution(id=f"exec_{uuid.uuid4().hex[:8]}")
        plan = tuple(actions)
        queued = tuple(steps)

        logger.info("Executing %d actions and %d automation steps", len(plan), len(queued))

        for action in plan:
            if self._cancelled:
                break
            decision = self.selector.select(
                action,
                text,
                requested=requested,
                research_opportunities=research_opportunities,
                recent_visual=recent_visual,
                queued_steps=len(queued),
            )
            execution.add_result(await self._run_with_fallbacks(decision, text, execution))

        for step in queued:
            if self._cancelled:
                break
            decision = self.selector.select_for_step(step)
            execution.add_result(await self._run_with_fallbacks(decision, text, execution))

        if self._cancelled:
            execution.cancelled = True
            logger.info("Execution %s cancelled after %d steps", execution.id, execution.total_steps)

        execution.seal()
        logger.info(
            "Execution %s finished: %d/%d steps succeeded",
            execution.id,
            execution.successful_steps,
            execution.total_steps,
        )
        return execution

    async def _run_with_fallbacks(
        self, decision: Decision, text: str, execution: WorkflowExecution
    ) -> StepResult:
        execution.add_decision(decision)
        result = await self._attempt(decision, text, execution)

        current = decision
        for strategy in decision.fallbacks:
            if result.success:
                break
            logger.info(
                "%s failed in %s (%s), trying fallback: %s",
                decision.subject_name,
                current.environment,
                result.error,
                describe_fallback(strategy),
            )
            current = current.fallback_to(
                strategy,
                fallback_environment(strategy, current.environment),
                describe_fallback(strategy),
            )
            execution.add_decision(current)
            result = await self._attempt(current, text, execution)
            result.fallback_used = strategy

        if not result.success:
            logger.warning("%s failed after all fallbacks: %s", decision.subject_name, result.error)
        return result

    async def _attempt(self, decision: Decision, text: str, execution: WorkflowExecution) -> StepResult:
        start = time.monotonic()
        try:
            if isinstance(decision.subject, AutomationStep):
                result = await self._run_step(decision.subject, decision.environment)
            elif decision.environment == "terminal":
                result = await self._run_terminal(decision.subject, text)
            elif decision.environment == "browser":
                result = await self._run_browser(decision, text, execution)
            else:
                result = await self._run_hybrid(decision, text, execution)
        except Exception as e:
            logger.warning("Step %s raised: %s", decision.subject_name, e)
            result = StepResult(
                name=decision.subject_name,
                environment=decision.environment,
                success=False,
                error=str(e),
            )
        result.duration = time.monotonic() - start
        return result

    async def _run_terminal(self, action: AutonomousAction, text: str) -> StepResult:
        outcome = await self.router.run_command(action.command, text)
        return StepResult(
            name=action.command,
            environment="terminal",
            success=outcome.success,
            output=outcome.output,
            error=outcome.error,
        )

    async def _run_hybrid(self, decision: Decision, text: str, execution: WorkflowExecution) -> StepResult:
        gated = self.config.visual_feedback and decision.confidence > self.config.checkpoint_confidence_threshold
        before = await self._checkpoint(decision, "pre", execution) if gated else None

        result = await self._run_terminal(decision.subject, text)
        result.environment = "hybrid"

        after = await self._checkpoint(decision, "post", execution) if gated else None
        result.screenshot = after
        if before and after:
            await self._compare(before, after, decision, execution)
        return result

    async def _run_browser(self, decision: Decision, text: str, execution: WorkflowExecution) -> StepResult:
        before = await self._checkpoint(decision, "pre", execution)

        result = await self._run_terminal(decision.subject, text)
        result.environment = "browser"

        after = await self._checkpoint(decision, "post", execution)
        result.screenshot = after
        if after is None:
            result.success = False
            result.error = result.error or "Post-step validation checkpoint could not be captured"
        elif before:
            await self._compare(before, after, decision, execution)
        return result

    async def _run_step(self, step: AutomationStep, environment: str) -> StepResult:
        if environment == "terminal":
            return StepResult(
                name=step.label,
                environment="terminal",
                success=False,
                error=f"Automation step '{step.type}' has no terminal equivalent",
            )

        outcome = await self.router.perform(step)
        return StepResult(
            name=step.label,
            environment=environment,
            success=outcome.success,
            screenshot=outcome.artifact if step.type == "screenshot" else None,
            extracted_data=outcome.value,
            error=outcome.error,
        )

    async def _checkpoint(self, decision: Decision, phase: str, execution: WorkflowExecution) -> str | None:
        name = f"{execution.id}_{decision.subject_name.strip('/')}_{phase}"
        artifact = await self.router.capture_checkpoint(name)
        if artifact and self.checkpoints is not None:
            self.checkpoints.save_checkpoint(VisualCheckpoint(
                workflow_id=execution.id,
                step=decision.subject_name,
                phase=phase,
                artifact=artifact,
                confidence=decision.confidence,
            ))
        return artifact

    async def _compare(self, before: str, after: str, decision: Decision, execution: WorkflowExecution) -> None:
        try:
            comparison = await self.analyzer.compare(before, after, goal=decision.subject_name)
        except Exception as e:
            logger.warning("Visual comparison for %s failed: %s", decision.subject_name, e)
            return

        execution.add_comparison(comparison)
        if comparison.significance != "none":
            execution.add_guidance(f"{decision.subject_name}: {comparison.recommendation}")
