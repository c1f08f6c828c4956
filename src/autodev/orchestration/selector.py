"""Execution environment selection with confidence scoring."""

import logging
import re

from autodev.config.schema import SelectorConfig
from autodev.orchestration.models import VALID_ENVIRONMENTS, AutomationStep, AutonomousAction, Decision

logger = logging.getLogger(__name__)

# Fallback strategy -> (environment, description); "same" reuses the failed environment
FALLBACK_STRATEGIES = {
    "terminal_fallback": ("terminal", "Fall back to terminal-only execution"),
    "hybrid": ("hybrid", "Retry in hybrid mode"),
    "retry": ("same", "Retry with different approach"),
    "terminal_only": ("terminal", "Execute in terminal only"),
}

_FALLBACKS_BY_ENVIRONMENT = {
    "hybrid": ("terminal_fallback", "retry", "terminal_only"),
    "browser": ("hybrid", "retry", "terminal_only"),
    "terminal": ("retry", "terminal_only"),
}


def describe_fallback(strategy: str) -> str:
    return FALLBACK_STRATEGIES.get(strategy, ("terminal", strategy))[1]


def fallback_environment(strategy: str, current: str) -> str:
    environment = FALLBACK_STRATEGIES.get(strategy, ("terminal", ""))[0]
    return current if environment == "same" else environment


class EnvironmentSelector:
    """Assigns terminal, browser or hybrid execution to actions.

    Counts web and terminal indicator hits in the triggering text, then lets
    per-command heuristics override the count. Without an automation backend
    every automatic assignment degrades to terminal.
    """

    def __init__(self, config: SelectorConfig | None = None, automation_available: bool = False):
        self.config = config or SelectorConfig()
        self.automation_available = automation_available
        self._web_patterns = self._compile(self.config.web_indicators)
        self._terminal_patterns = self._compile(self.config.terminal_indicators)

    @staticmethod
    def _compile(indicators: list[str]) -> list[re.Pattern[str]]:
        return [re.compile(re.escape(indicator), re.IGNORECASE) for indicator in indicators]

    @staticmethod
    def _hits(patterns: list[re.Pattern[str]], text: str) -> int:
        """Number of distinct indicators present in text"""
        return sum(1 for pattern in patterns if pattern.search(text))

    def score(self, text: str) -> tuple[int, int]:
        """(web hits, terminal hits) for text"""
        text = text or ""
        return self._hits(self._web_patterns, text), self._hits(self._terminal_patterns, text)

    def select(
        self,
        action: AutonomousAction,
        text: str = "",
        requested: str = "auto",
        research_opportunities: list[str] | None = None,
        recent_visual: bool = False,
        queued_steps: int = 0,
    ) -> Decision:
        if requested != "auto":
            if requested not in VALID_ENVIRONMENTS:
                raise ValueError(f"Unknown execution environment: {requested}")
            return self._decision(action, requested, 1.0, f"Environment '{requested}' explicitly requested")

        environment, confidence, reasoning = self._from_indicators(text)

        override = self._override(action, research_opportunities or [], recent_visual, queued_steps)
        if override is not None:
            environment, confidence, reasoning = override

        if environment != "terminal" and not self.automation_available:
            logger.debug("No automation backend, %s degraded to terminal for %s", environment, action.command)
            environment = "terminal"
            reasoning = f"{reasoning} (automation backend unavailable, using terminal)"

        decision = self._decision(action, environment, confidence, reasoning)
        logger.info(
            "Decision for %s: %s (%d%% confidence)",
            action.command,
            decision.environment,
            round(decision.confidence * 100),
        )
        return decision

    def select_for_step(self, step: AutomationStep) -> Decision:
        """Automation steps always target the browser"""
        return Decision(
            subject=step,
            environment="browser",
            confidence=self.config.max_confidence,
            reasoning=f"Automation step '{step.type}' requires the browser",
            fallbacks=("retry", "terminal_only"),
        )

    def _from_indicators(self, text: str) -> tuple[str, float, str]:
        web_hits, terminal_hits = self.score(text)
        strict_min = self.config.pure_environment_min_hits

        if web_hits > terminal_hits and self.automation_available:
            environment = "browser" if web_hits >= strict_min else "hybrid"
            return environment, self._confidence(web_hits), f"Web indicators dominate ({web_hits} vs {terminal_hits})"

        if terminal_hits > web_hits:
            environment = "terminal" if terminal_hits >= strict_min else "hybrid"
            return (
                environment,
                self._confidence(terminal_hits),
                f"Terminal indicators dominate ({terminal_hits} vs {web_hits})",
            )

        if self.automation_available:
            return "hybrid", self.config.base_confidence, "No dominant environment, combining terminal and browser"
        return "terminal", self.config.base_confidence, "Default terminal execution"

    def _confidence(self, hits: int) -> float:
        return min(self.config.base_confidence + self.config.confidence_step * hits, self.config.max_confidence)

    @staticmethod
    def _override(
        action: AutonomousAction,
        research_opportunities: list[str],
        recent_visual: bool,
        queued_steps: int,
    ) -> tuple[str, float, str] | None:
        command = action.command
        if "/constitution" in command or "/specify" in command:
            if research_opportunities:
                return "hybrid", 0.85, "Specification benefits from web research context"
        elif "/evolve" in command:
            if recent_visual:
                return "hybrid", 0.9, "Evolution optimization enhanced by visual performance data"
        elif "/implement" in command:
            if queued_steps > 0:
                return "hybrid", 0.8, "Implementation requires web testing and validation"
        return None

    @staticmethod
    def _decision(action: AutonomousAction, environment: str, confidence: float, reasoning: str) -> Decision:
        return Decision(
            subject=action,
            environment=environment,
            confidence=confidence,
            reasoning=reasoning,
            fallbacks=_FALLBACKS_BY_ENVIRONMENT[environment],
        )
