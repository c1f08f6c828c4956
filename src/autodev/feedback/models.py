"""Feedback, evolution cycle and learning model records."""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

VALID_SOURCES = {"user", "system", "market", "performance", "evolution"}
VALID_TYPES = {"success", "failure", "improvement", "bug", "feature_request", "performance_issue"}
VALID_PRIORITIES = {"low", "medium", "high", "critical"}
VALID_TRIGGERS = {"scheduled", "feedback", "market_change", "performance_drop", "user_request"}
HIGH_PRIORITIES = {"high", "critical"}


class CycleSealedError(Exception):
    """Raised when a completed evolution cycle is modified."""

    pass


@dataclass(frozen=True)
class FeedbackData:
    """One immutable observed event"""
    source: str
    type: str
    content: str
    priority: str = "medium"
    metrics: dict[str, float] | None = None
    timestamp: datetime = field(default_factory=datetime.now)

    def __post_init__(self):
        if self.source not in VALID_SOURCES:
            raise ValueError(f"Invalid feedback source: {self.source}")
        if self.type not in VALID_TYPES:
            raise ValueError(f"Invalid feedback type: {self.type}")
        if self.priority not in VALID_PRIORITIES:
            raise ValueError(f"Invalid feedback priority: {self.priority}")
        if self.metrics is not None:
            object.__setattr__(self, "metrics", dict(self.metrics))

    @property
    def is_high_priority(self) -> bool:
        return self.priority in HIGH_PRIORITIES

    def metric(self, name: str) -> float | None:
        if not self.metrics:
            return None
        value = self.metrics.get(name)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return None
        return float(value)

    def to_dict(self) -> dict:
        return {
            "source": self.source,
            "type": self.type,
            "content": self.content,
            "priority": self.priority,
            "metrics": dict(self.metrics) if self.metrics else None,
            "timestamp": self.timestamp.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "FeedbackData":
        return cls(
            source=data["source"],
            type=data["type"],
            content=data["content"],
            priority=data.get("priority", "medium"),
            metrics=data.get("metrics"),
            timestamp=datetime.fromisoformat(data["timestamp"]),
        )


@dataclass
class FeedbackResponse:
    """Immediate response chosen for a feedback item"""
    action: str
    reasoning: str
    evolution_triggered: bool = False
    cycle_id: str | None = None


@dataclass
class EvolutionCycle:
    """One intelligence -> plan -> execute -> measure pass"""
    id: str
    trigger: str
    start_time: datetime = field(default_factory=datetime.now)
    end_time: datetime | None = None
    actions_performed: list[str] = field(default_factory=list)
    metrics_before: dict[str, Any] = field(default_factory=dict)
    metrics_after: dict[str, Any] | None = None
    success: bool = False
    learnings: list[str] = field(default_factory=list)
    next_recommendations: list[str] = field(default_factory=list)

    @property
    def sealed(self) -> bool:
        return self.end_time is not None

    def record_action(self, summary: str) -> None:
        if self.sealed:
            raise CycleSealedError(f"Evolution cycle {self.id} is sealed")
        self.actions_performed.append(summary)

    def seal(self, end_time: datetime | None = None) -> None:
        if self.sealed:
            raise CycleSealedError(f"Evolution cycle {self.id} is already sealed")
        self.end_time = end_time or datetime.now()

    def improved_metrics(self) -> list[str]:
        """Names of numeric metrics that strictly increased"""
        if not self.metrics_after or not self.metrics_before:
            return []
        improved = []
        for key, after in self.metrics_after.items():
            before = self.metrics_before.get(key)
            if _is_number(before) and _is_number(after) and after > before:
                improved.append(key)
        return improved

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "trigger": self.trigger,
            "start_time": self.start_time.isoformat(),
            "end_time": self.end_time.isoformat() if self.end_time else None,
            "actions_performed": list(self.actions_performed),
            "metrics_before": self.metrics_before,
            "metrics_after": self.metrics_after,
            "success": self.success,
            "learnings": list(self.learnings),
            "next_recommendations": list(self.next_recommendations),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "EvolutionCycle":
        end_time = data.get("end_time")
        return cls(
            id=data["id"],
            trigger=data["trigger"],
            start_time=datetime.fromisoformat(data["start_time"]),
            end_time=datetime.fromisoformat(end_time) if end_time else None,
            actions_performed=data.get("actions_performed", []),
            metrics_before=data.get("metrics_before", {}),
            metrics_after=data.get("metrics_after"),
            success=data.get("success", False),
            learnings=data.get("learnings", []),
            next_recommendations=data.get("next_recommendations", []),
        )


@dataclass
class LearningModel:
    """Accumulated statistics for one (type, priority, response) pattern"""
    pattern: str
    confidence: float = 0.5
    success_rate: float = 0.5
    context: list[str] = field(default_factory=list)
    outcomes: list[str] = field(default_factory=list)
    recommendations: list[str] = field(default_factory=list)

    @property
    def observations(self) -> int:
        return len(self.outcomes)

    def to_dict(self) -> dict:
        return {
            "pattern": self.pattern,
            "confidence": self.confidence,
            "success_rate": self.success_rate,
            "context": list(self.context),
            "outcomes": list(self.outcomes),
            "recommendations": list(self.recommendations),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "LearningModel":
        return cls(**data)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)
