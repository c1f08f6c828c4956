"""Evolution cycles, metrics and background monitoring"""
from autodev.evolution.loop import ContinuousFeedbackLoop, LoopStatus
from autodev.evolution.metrics import MetricsProvider, StateMetricsProvider
from autodev.evolution.monitors import FeedbackSource
from autodev.evolution.scheduler import EvolutionScheduler

__all__ = [
    "ContinuousFeedbackLoop",
    "EvolutionScheduler",
    "FeedbackSource",
    "LoopStatus",
    "MetricsProvider",
    "StateMetricsProvider",
]
