"""Tests for ContextSnapshotBuilder"""
from datetime import datetime, timedelta

import pytest

from autodev.feedback.history import EvolutionHistory, FeedbackHistory
from autodev.feedback.models import EvolutionCycle, FeedbackData
from autodev.orchestration.context import ContextSnapshotBuilder, ProjectSignals
from autodev.orchestration.models import PerformanceMetric


@pytest.fixture
def project(tmp_path):
    return tmp_path


def write(path, text="x"):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text)


def test_empty_project(project):
    context = ContextSnapshotBuilder(project).build()

    assert context.describe_state() == "Initial"
    assert context.last_evolution is None
    assert context.code_quality == "fair"


def test_artifact_detection(project):
    write(project / ".specify" / "memory" / "constitution.md")
    write(project / ".specify" / "specs" / "001-login" / "plan.md")
    write(project / ".specify" / "specs" / "001-login" / "tasks.md")
    (project / "src").mkdir()

    context = ContextSnapshotBuilder(project).build()

    assert context.has_constitution
    assert context.has_specification
    assert context.has_plan
    assert context.has_tasks
    assert context.has_implementation


def test_specification_without_plan(project):
    (project / ".specify" / "specs" / "002-search").mkdir(parents=True)

    context = ContextSnapshotBuilder(project).build()

    assert context.has_specification
    assert not context.has_plan


def test_custom_implementation_indicators(project):
    write(project / "Cargo.toml")

    assert not ContextSnapshotBuilder(project).build().has_implementation
    assert ContextSnapshotBuilder(project, implementation_indicators=["Cargo.toml"]).build().has_implementation


def test_history_feeds_context(project):
    feedback = FeedbackHistory([
        FeedbackData(source="user", type="feature_request", content="dark mode", priority="high"),
        FeedbackData(source="system", type="bug", content="crash on save", priority="critical"),
    ])
    cycle = EvolutionCycle(id="cycle_1", trigger="scheduled")
    cycle.seal(datetime(2025, 1, 1))
    evolution = EvolutionHistory([cycle])

    context = ContextSnapshotBuilder(project, feedback, evolution).build()

    assert [f.type for f in context.user_feedback] == ["feature_request"]
    assert context.user_feedback[0].priority == "high"
    assert [b.severity for b in context.bug_reports] == ["critical"]
    assert context.last_evolution == datetime(2025, 1, 1)
    assert context.code_quality == "poor"


def test_stale_history_is_ignored(project):
    year_ago = datetime.now() - timedelta(days=365)
    feedback = FeedbackHistory([
        FeedbackData(source="system", type="bug", content="crash on save", priority="critical", timestamp=year_ago),
        FeedbackData(source="user", type="improvement", content="faster search", timestamp=year_ago),
    ])

    context = ContextSnapshotBuilder(project, feedback).build()

    assert context.bug_reports == []
    assert context.user_feedback == []
    assert context.code_quality != "poor"


def test_signal_window_is_configurable(project):
    feedback = FeedbackHistory([
        FeedbackData(source="system", type="bug", content="crash", priority="critical",
                     timestamp=datetime.now() - timedelta(days=3)),
    ])

    assert ContextSnapshotBuilder(project, feedback).build().code_quality == "poor"
    narrow = ContextSnapshotBuilder(project, feedback, signal_window=timedelta(days=1))
    assert narrow.build().bug_reports == []


def test_signals_are_merged(project):
    signals = ProjectSignals(performance_metrics=[PerformanceMetric(metric="p95", value=50, threshold=70)])
    (project / "src").mkdir()

    context = ContextSnapshotBuilder(project).build(signals)

    assert len(context.performance_metrics) == 1
    assert context.code_quality == "fair"


@pytest.mark.parametrize("with_tests,grade", [(True, "excellent"), (False, "good")])
def test_code_quality_with_implementation(project, with_tests, grade):
    (project / "src").mkdir()
    if with_tests:
        (project / "tests").mkdir()

    assert ContextSnapshotBuilder(project).build().code_quality == grade


def test_build_does_not_modify_project(project):
    ContextSnapshotBuilder(project).build()

    assert list(project.iterdir()) == []
