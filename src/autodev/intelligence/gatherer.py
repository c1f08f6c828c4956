"""Intelligence gathering: sources and the aggregating gatherer."""

import asyncio
import logging
from abc import ABC, abstractmethod

from autodev.config.schema import IntelligenceConfig
from autodev.intelligence.models import (
    CompetitorInsight,
    IntelligenceReport,
    MarketOpportunity,
    TechTrend,
    UserDemandSignal,
)
from autodev.llm.client import LLMClient, LLMClientFactory, LLMResponseError, parse_json_object

logger = logging.getLogger(__name__)


class IntelligenceError(Exception):
    """Base exception for intelligence gathering errors."""

    pass


class IntelligenceResponseError(IntelligenceError):
    """Source returned an invalid/unparseable response."""

    pass


class IntelligenceSource(ABC):
    """Supplies trend/competitor/demand/opportunity signals for a domain"""

    @abstractmethod
    async def gather(self, domain: str, keywords: list[str]) -> IntelligenceReport:
        """Return signals for domain and keywords"""
        pass


class StaticIntelligenceSource(IntelligenceSource):
    """Returns a fixed, caller-supplied report.

    Keeps randomness out of planning; the default is an empty report, which
    means no market-driven actions are planned.
    """

    def __init__(self, report: IntelligenceReport | None = None):
        self.report = report or IntelligenceReport()

    async def gather(self, domain: str, keywords: list[str]) -> IntelligenceReport:
        return IntelligenceReport(
            domain=domain,
            keywords=list(keywords),
            tech_trends=list(self.report.tech_trends),
            competitors=list(self.report.competitors),
            user_demands=list(self.report.user_demands),
            opportunities=list(self.report.opportunities),
            recommendations=list(self.report.recommendations),
        )


class LLMIntelligenceSource(IntelligenceSource):
    """Asks an LLM for market signals and validates the JSON it returns"""

    MAX_RETRIES = 2
    RETRY_DELAY_MS = 500

    def __init__(self, llm_client: LLMClient):
        self.llm_client = llm_client

    async def gather(self, domain: str, keywords: list[str]) -> IntelligenceReport:
        prompt = self._build_prompt(domain, keywords)
        last_error: Exception | None = None

        for attempt in range(self.MAX_RETRIES + 1):
            try:
                response = await self.llm_client.complete(
                    prompt,
                    system="You are a software market analyst. Return ONLY valid JSON, no markdown.",
                )
                return self._parse_report(response.content, domain, keywords)
            except IntelligenceResponseError as e:
                last_error = e
                logger.warning(f"Intelligence attempt {attempt + 1} failed: {e}")
                if attempt < self.MAX_RETRIES:
                    await asyncio.sleep(self.RETRY_DELAY_MS / 1000)

        raise IntelligenceError(f"LLM intelligence failed: {last_error}")

    def _build_prompt(self, domain: str, keywords: list[str]) -> str:
        clean_keywords = [k.replace("{", "").replace("}", "")[:50] for k in keywords[:10]]
        return f"""Report current market signals for a software project.

Domain: {domain[:50]}
Keywords: {", ".join(clean_keywords) if clean_keywords else "none"}

Output ONLY this JSON:
{{"tech_trends": [{{"technology": "<name>", "momentum": "rising|declining|stable|emerging",
   "adoption_score": <0-100>, "relevance_to_project": <0.0-1.0>}}],
  "competitors": [{{"name": "<name>", "strengths": ["..."], "weaknesses": ["..."]}}],
  "user_demands": [{{"demand": "<text>", "intensity": <0-100>}}],
  "opportunities": [{{"opportunity": "<text>", "potential_roi": <number>,
   "risk_level": "low|medium|high"}}]}}"""

    def _parse_report(self, content: str, domain: str, keywords: list[str]) -> IntelligenceReport:
        try:
            data = parse_json_object(content)
        except LLMResponseError as e:
            raise IntelligenceResponseError(str(e)) from e

        try:
            return IntelligenceReport(
                domain=domain,
                keywords=list(keywords),
                tech_trends=[
                    TechTrend(
                        technology=str(t["technology"]),
                        momentum=str(t.get("momentum", "stable")),
                        adoption_score=float(t.get("adoption_score", 0)),
                        relevance_to_project=float(t.get("relevance_to_project", 0)),
                    )
                    for t in data.get("tech_trends", [])
                ],
                competitors=[
                    CompetitorInsight(
                        name=str(c["name"]),
                        strengths=list(c.get("strengths", [])),
                        weaknesses=list(c.get("weaknesses", [])),
                    )
                    for c in data.get("competitors", [])
                ],
                user_demands=[
                    UserDemandSignal(demand=str(d["demand"]), intensity=float(d.get("intensity", 0)))
                    for d in data.get("user_demands", [])
                ],
                opportunities=[
                    MarketOpportunity(
                        opportunity=str(o["opportunity"]),
                        potential_roi=float(o.get("potential_roi", 0)),
                        risk_level=str(o.get("risk_level", "medium")),
                    )
                    for o in data.get("opportunities", [])
                ],
            )
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise IntelligenceResponseError(f"Malformed intelligence entry: {e}") from e


class IntelligenceGatherer:
    """Aggregates one source into a ranked report with recommendations.

    Source failures never reach the planner: they are logged and an empty
    report is returned instead.
    """

    def __init__(self, source: IntelligenceSource, config: IntelligenceConfig | None = None):
        self.source = source
        self.config = config or IntelligenceConfig()

    @classmethod
    def from_config(cls, config: IntelligenceConfig) -> "IntelligenceGatherer":
        source: IntelligenceSource = StaticIntelligenceSource()
        if config.provider == "llm":
            client = LLMClientFactory.create(config.model)
            if client is not None:
                source = LLMIntelligenceSource(client)
            else:
                logger.warning("LLM intelligence requested but unavailable, using static source")
        return cls(source, config)

    async def gather(self, domain: str, keywords: list[str]) -> IntelligenceReport:
        logger.info("Gathering intelligence for %s (%s)", domain, ", ".join(keywords))
        try:
            report = await self.source.gather(domain, keywords)
        except Exception as e:
            logger.warning(f"Intelligence gathering failed: {e}")
            return IntelligenceReport(domain=domain, keywords=list(keywords))

        if not self.config.trend_analysis:
            report.tech_trends = []
        if not self.config.competitor_analysis:
            report.competitors = []
        if not self.config.user_demand_analysis:
            report.user_demands = []
        if not self.config.opportunity_analysis:
            report.opportunities = []

        report.user_demands.sort(key=lambda d: d.intensity, reverse=True)
        report.opportunities.sort(key=lambda o: o.potential_roi, reverse=True)
        report.recommendations = report.recommendations or generate_recommendations(report)
        return report


def generate_recommendations(report: IntelligenceReport) -> list[str]:
    """Strategic recommendations from a ranked report"""
    recommendations: list[str] = []

    rising = [t for t in report.tech_trends if t.momentum in ("rising", "emerging")]
    if rising:
        trend = rising[0]
        recommendations.append(
            f"Consider adopting {trend.technology} - showing {trend.momentum} momentum "
            f"with {trend.adoption_score:g}% adoption score"
        )

    if report.user_demands:
        top = report.user_demands[0]
        recommendations.append(f"High priority user demand: {top.demand} (intensity: {top.intensity:g})")

    if report.competitors and report.competitors[0].weaknesses:
        competitor = report.competitors[0]
        recommendations.append(
            f"Differentiate from {competitor.name} by addressing their weakness: "
            f"{competitor.weaknesses[0]}"
        )

    if report.opportunities:
        top_opportunity = report.opportunities[0]
        recommendations.append(
            f"Focus on {top_opportunity.opportunity} - {top_opportunity.potential_roi:g}% ROI "
            f"potential with {top_opportunity.risk_level} risk"
        )

    recommendations.append(
        "Schedule evolutionary optimization cycles based on user feedback intensity and market momentum"
    )
    return recommendations
