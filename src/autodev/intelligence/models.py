"""Intelligence report shapes returned by intelligence sources."""
from dataclasses import dataclass, field


@dataclass
class TechTrend:
    """Technology momentum signal"""
    technology: str
    momentum: str = "stable"  # "rising" | "declining" | "stable" | "emerging"
    adoption_score: float = 0.0
    relevance_to_project: float = 0.0


@dataclass
class CompetitorInsight:
    """What is known about one competitor"""
    name: str
    strengths: list[str] = field(default_factory=list)
    weaknesses: list[str] = field(default_factory=list)
    market_share: float = 0.0


@dataclass
class UserDemandSignal:
    """Aggregated user demand"""
    demand: str
    intensity: float = 0.0
    source: str = "surveys"
    sentiment: str = "neutral"


@dataclass
class MarketOpportunity:
    """Opportunity ranked by potential return"""
    opportunity: str
    potential_roi: float = 0.0
    risk_level: str = "medium"  # "low" | "medium" | "high"
    technical_feasibility: float = 0.0


@dataclass
class IntelligenceReport:
    """Trend, competitor, demand and opportunity signals for one domain.

    Opaque to the planner beyond counts and simple numeric fields.
    """
    domain: str = "general"
    keywords: list[str] = field(default_factory=list)
    tech_trends: list[TechTrend] = field(default_factory=list)
    competitors: list[CompetitorInsight] = field(default_factory=list)
    user_demands: list[UserDemandSignal] = field(default_factory=list)
    opportunities: list[MarketOpportunity] = field(default_factory=list)
    recommendations: list[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.tech_trends or self.competitors or self.user_demands or self.opportunities)

    def relevant_trends(self, min_relevance: float = 0.0) -> list[TechTrend]:
        return [t for t in self.tech_trends if t.relevance_to_project >= min_relevance]

    def research_opportunities(self) -> list[str]:
        """Topics worth researching through the automation backend"""
        topics = [o.opportunity for o in self.opportunities]
        topics.extend(f"competitor analysis: {c.name}" for c in self.competitors)
        return topics

    def to_dict(self) -> dict:
        return {
            "domain": self.domain,
            "keywords": list(self.keywords),
            "tech_trends": [t.technology for t in self.tech_trends],
            "competitors": [c.name for c in self.competitors],
            "user_demands": [d.demand for d in self.user_demands],
            "opportunities": [o.opportunity for o in self.opportunities],
            "recommendations": list(self.recommendations),
        }
