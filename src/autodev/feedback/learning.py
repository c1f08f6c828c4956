"""Learning model bookkeeping keyed by (feedback type, priority, response)"""
import logging
from typing import Iterator

from autodev.config.schema import FeedbackConfig
from autodev.feedback.models import FeedbackData, LearningModel

logger = logging.getLogger(__name__)


def pattern_key(feedback_type: str, priority: str, action: str) -> str:
    return f"{feedback_type}_{priority}_{action}"


class LearningModelTable:
    """Owns every LearningModel.

    Confidence only ever increases, by a fixed increment capped at 1.0.
    Success rate is min(confidence * observations / 10, 1.0).
    """

    def __init__(self, config: FeedbackConfig | None = None, models: list[LearningModel] | None = None):
        self.config = config or FeedbackConfig()
        self._models: dict[str, LearningModel] = {m.pattern: m for m in models or []}

    def __len__(self) -> int:
        return len(self._models)

    def __iter__(self) -> Iterator[LearningModel]:
        return iter(list(self._models.values()))

    def get(self, pattern: str) -> LearningModel | None:
        return self._models.get(pattern)

    def update(self, feedback: FeedbackData, action: str, outcome: str) -> LearningModel:
        pattern = pattern_key(feedback.type, feedback.priority, action)
        model = self._models.get(pattern)
        if model is None:
            model = LearningModel(
                pattern=pattern,
                confidence=self.config.learning_initial_confidence,
                success_rate=self.config.learning_initial_confidence,
            )
            self._models[pattern] = model

        model.context.append(feedback.content)
        model.outcomes.append(outcome)
        model.confidence = min(round(model.confidence + self.config.learning_increment, 10), 1.0)
        model.success_rate = min(model.confidence * len(model.outcomes) / 10, 1.0)

        logger.debug("Learning model %s: confidence=%.2f", pattern, model.confidence)
        return model

    def to_list(self) -> list[LearningModel]:
        return list(self._models.values())
