"""Heuristic action planning from project context, intent and intelligence."""

import logging
from datetime import datetime, timedelta

from autodev.config.schema import PlannerConfig
from autodev.intelligence.models import IntelligenceReport
from autodev.orchestration.models import AutonomousAction, Intent, ProjectContext

logger = logging.getLogger(__name__)


class ActionPlanner:
    """Turns a context snapshot into a priority-ordered list of actions.

    Every rule is evaluated independently and all applicable actions are kept.
    Ordering is by priority only (stable for ties). Dependencies are advisory
    metadata and are never used to reorder the plan, so a dependency may
    legitimately appear after its dependent.
    """

    def __init__(self, config: PlannerConfig | None = None):
        self.config = config or PlannerConfig()

    def plan(
        self,
        context: ProjectContext,
        intent: Intent,
        intelligence: IntelligenceReport | None = None,
        now: datetime | None = None,
    ) -> list[AutonomousAction]:
        intelligence = intelligence or IntelligenceReport()
        now = now or context.snapshot_at
        actions: list[AutonomousAction] = []

        if not context.has_constitution:
            actions.append(AutonomousAction(
                command="/constitution",
                reason="No project constitution found. Establishing foundational principles for consistent development.",
                priority=10,
                expected_outcome="Clear project principles and development guidelines established",
            ))

        if intent.category == "create" and not context.has_specification:
            actions.append(AutonomousAction(
                command="/specify",
                reason="New creation request requires detailed specification before implementation.",
                priority=9,
                expected_outcome="Comprehensive requirements and user stories defined",
                dependencies=("/constitution",),
            ))

        if self.market_signal_count(context, intelligence) > 0:
            actions.append(AutonomousAction(
                command="/specify",
                reason="Market trends indicate need for feature updates to maintain competitiveness.",
                priority=7,
                expected_outcome="Specification updated with market-driven enhancements",
                dependencies=("/constitution",),
            ))

        if self.needs_performance_optimization(context):
            actions.append(AutonomousAction(
                command="/evolve",
                reason="Performance metrics below threshold. Evolutionary optimization required.",
                priority=8,
                expected_outcome="Code optimized for better performance through evolutionary algorithms",
                dependencies=("/tasks",),
            ))

        if any(bug.severity == "critical" for bug in context.bug_reports):
            actions.append(AutonomousAction(
                command="/plan",
                reason="Critical bugs detected. Need structured plan for resolution.",
                priority=10,
                expected_outcome="Comprehensive bug resolution plan created",
                dependencies=("/specify",),
            ))

        if self.has_high_priority_feedback(context):
            actions.append(AutonomousAction(
                command="/tasks",
                reason="High-priority user feedback requires actionable task breakdown.",
                priority=8,
                expected_outcome="User feedback converted to implementable tasks",
                dependencies=("/plan",),
            ))

        if self.evolution_due(context, now):
            actions.append(AutonomousAction(
                command="/evolve",
                reason="Scheduled evolutionary cycle to maintain competitive advantage.",
                priority=6,
                expected_outcome="Codebase evolved with latest best practices and optimizations",
                dependencies=("/implement",),
            ))

        if context.has_tasks and not context.has_implementation:
            actions.append(AutonomousAction(
                command="/implement",
                reason="Tasks are ready for implementation. Executing development plan.",
                priority=9,
                expected_outcome="All planned tasks implemented and tested",
                dependencies=("/tasks",),
            ))

        # sorted() is stable, so equal priorities keep rule order
        ordered = sorted(actions, key=lambda a: a.priority, reverse=True)
        logger.debug("Planned %d actions: %s", len(ordered), [a.command for a in ordered])
        return ordered

    def market_signal_count(self, context: ProjectContext, intelligence: IntelligenceReport) -> int:
        threshold = self.config.min_trend_relevance
        from_report = len(intelligence.relevant_trends(threshold))
        from_context = sum(1 for t in context.market_trends if t.relevance_score >= threshold)
        return from_report + from_context

    @staticmethod
    def needs_performance_optimization(context: ProjectContext) -> bool:
        return any(m.breached and m.trend == "declining" for m in context.performance_metrics)

    @staticmethod
    def has_high_priority_feedback(context: ProjectContext) -> bool:
        return any(f.priority in ("high", "critical") for f in context.user_feedback)

    def evolution_due(self, context: ProjectContext, now: datetime) -> bool:
        if context.last_evolution is None:
            return True
        return now - context.last_evolution >= timedelta(days=self.config.evolution_interval_days)

    def explain(
        self,
        context: ProjectContext,
        intent: Intent,
        actions: list[AutonomousAction],
        intelligence: IntelligenceReport | None = None,
        now: datetime | None = None,
    ) -> str:
        """Human-readable reasoning behind a plan"""
        intelligence = intelligence or IntelligenceReport()
        now = now or context.snapshot_at
        trends = [t.technology for t in intelligence.tech_trends] + [
            t.technology for t in context.market_trends
        ]
        focus = actions[0].reason if actions else "Maintaining current trajectory"

        lines = [
            "Autonomous Decision Reasoning:",
            "",
            "Context Analysis:",
            f"  - User Intent: {intent.category} ({intent.urgency} urgency)",
            f"  - Project State: {context.describe_state()}",
            f"  - Market Trends: {', '.join(trends) if trends else 'none'}",
            "",
            "Strategic Direction:",
            f"  - {len(actions)} autonomous actions identified",
            f"  - Priority focus: {focus}",
            f"  - Evolution cycle: {'Active' if self.evolution_due(context, now) else 'Monitoring'}",
            "",
            "Continuous Improvement:",
            f"  - Performance optimization: "
            f"{'Required' if self.needs_performance_optimization(context) else 'Stable'}",
            f"  - User feedback integration: "
            f"{'Pending' if self.has_high_priority_feedback(context) else 'Processed'}",
            f"  - Market alignment: "
            f"{'Updating' if self.market_signal_count(context, intelligence) else 'Aligned'}",
        ]
        return "\n".join(lines)


def render_plan(actions: list[AutonomousAction]) -> str:
    """Numbered execution plan text"""
    if not actions:
        return "Autonomous Execution Plan: no actions required"

    lines = ["Autonomous Execution Plan:", ""]
    for index, action in enumerate(actions, 1):
        lines.append(f"{index}. {action.command} (priority {action.priority})")
        lines.append(f"   Reason: {action.reason}")
        lines.append(f"   Expected: {action.expected_outcome}")
        if action.dependencies:
            lines.append(f"   Dependencies: {', '.join(action.dependencies)}")
        lines.append("")
    return "\n".join(lines).rstrip()
