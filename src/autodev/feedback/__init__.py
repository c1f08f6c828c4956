"""Feedback records, history logs, learning models and ingestion"""
from autodev.feedback.history import EvolutionHistory, FeedbackHistory, HistoryStore
from autodev.feedback.ingestor import FeedbackIngestor, respond
from autodev.feedback.learning import LearningModelTable, pattern_key
from autodev.feedback.models import (
    CycleSealedError,
    EvolutionCycle,
    FeedbackData,
    FeedbackResponse,
    LearningModel,
)

__all__ = [
    "CycleSealedError",
    "EvolutionCycle",
    "EvolutionHistory",
    "FeedbackData",
    "FeedbackHistory",
    "FeedbackIngestor",
    "FeedbackResponse",
    "HistoryStore",
    "LearningModel",
    "LearningModelTable",
    "pattern_key",
    "respond",
]
