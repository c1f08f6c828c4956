"""Market and technology intelligence."""
from autodev.intelligence.gatherer import (
    IntelligenceError,
    IntelligenceGatherer,
    IntelligenceResponseError,
    IntelligenceSource,
    LLMIntelligenceSource,
    StaticIntelligenceSource,
    generate_recommendations,
)
from autodev.intelligence.models import IntelligenceReport

__all__ = [
    "IntelligenceError",
    "IntelligenceGatherer",
    "IntelligenceReport",
    "IntelligenceResponseError",
    "IntelligenceSource",
    "LLMIntelligenceSource",
    "StaticIntelligenceSource",
    "generate_recommendations",
]
