"""Tests for feedback and evolution records"""
from datetime import datetime

import pytest

from autodev.feedback.models import CycleSealedError, EvolutionCycle, FeedbackData, LearningModel


def test_feedback_is_immutable():
    feedback = FeedbackData(source="user", type="bug", content="x", priority="critical")

    with pytest.raises(AttributeError):
        feedback.priority = "low"


@pytest.mark.parametrize(
    "field,value",
    [("source", "twitter"), ("type", "rant"), ("priority", "urgent")],
)
def test_feedback_rejects_unknown_values(field, value):
    kwargs = {"source": "user", "type": "bug", "content": "x", "priority": "low", field: value}
    with pytest.raises(ValueError):
        FeedbackData(**kwargs)


def test_feedback_metric_lookup():
    feedback = FeedbackData(
        source="performance",
        type="performance_issue",
        content="slow",
        metrics={"performance": 0, "latency": 120.5, "flag": True},
    )

    assert feedback.metric("performance") == 0.0
    assert feedback.metric("latency") == 120.5
    assert feedback.metric("flag") is None
    assert feedback.metric("missing") is None
    assert FeedbackData(source="user", type="bug", content="x").metric("performance") is None


def test_feedback_metrics_are_copied():
    readings = {"performance": 50.0}
    feedback = FeedbackData(source="user", type="performance_issue", content="slow", metrics=readings)

    readings["performance"] = 99.0
    readings["latency"] = 1.0

    assert feedback.metric("performance") == 50.0
    assert feedback.metrics == {"performance": 50.0}


def test_feedback_round_trip():
    feedback = FeedbackData(
        source="market", type="improvement", content="trend", priority="high",
        metrics={"share": 3.0}, timestamp=datetime(2025, 3, 1, 9, 30),
    )
    assert FeedbackData.from_dict(feedback.to_dict()) == feedback


def test_high_priority():
    assert FeedbackData(source="user", type="bug", content="x", priority="high").is_high_priority
    assert not FeedbackData(source="user", type="bug", content="x", priority="medium").is_high_priority


def test_cycle_seal_rejects_changes():
    cycle = EvolutionCycle(id="cycle_1", trigger="scheduled")
    cycle.record_action("/plan: ok")
    cycle.seal()

    assert cycle.sealed
    with pytest.raises(CycleSealedError):
        cycle.record_action("/tasks: ok")
    with pytest.raises(CycleSealedError):
        cycle.seal()


def test_improved_metrics_only_counts_numeric_increases():
    cycle = EvolutionCycle(
        id="cycle_1",
        trigger="feedback",
        metrics_before={"a": 1, "b": 5, "c": 0, "d": "n/a", "e": True},
        metrics_after={"a": 2, "b": 5, "c": 3, "d": "better", "e": 2, "f": 9},
    )
    assert cycle.improved_metrics() == ["a", "c"]


def test_improved_metrics_without_after():
    assert EvolutionCycle(id="c", trigger="scheduled", metrics_before={"a": 1}).improved_metrics() == []


def test_cycle_round_trip():
    cycle = EvolutionCycle(id="cycle_1", trigger="user_request", start_time=datetime(2025, 1, 1))
    cycle.record_action("/evolve: FAILED - boom")
    cycle.learnings.append("Evolution cycle needs refinement")
    cycle.seal(datetime(2025, 1, 1, 0, 5))

    restored = EvolutionCycle.from_dict(cycle.to_dict())

    assert restored == cycle
    assert restored.sealed


def test_learning_model_round_trip():
    model = LearningModel(pattern="bug_critical_Immediate Fix Required", confidence=0.7, outcomes=["a", "b"])
    assert LearningModel.from_dict(model.to_dict()) == model
    assert model.observations == 2
