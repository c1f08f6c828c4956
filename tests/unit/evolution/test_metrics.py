"""Tests for StateMetricsProvider"""
import pytest

from autodev.evolution.metrics import StateMetricsProvider
from autodev.feedback.history import FeedbackHistory
from autodev.feedback.models import FeedbackData
from autodev.orchestration.context import ContextSnapshotBuilder
from autodev.orchestration.models import StepResult, WorkflowExecution


@pytest.fixture
def history():
    return FeedbackHistory()


@pytest.fixture
def provider(tmp_path, history):
    return StateMetricsProvider(ContextSnapshotBuilder(tmp_path, history), history)


@pytest.mark.asyncio
async def test_empty_project_snapshot(provider):
    snapshot = await provider.snapshot()

    assert snapshot == {
        "code_quality": 50.0,
        "performance": 100.0,
        "user_satisfaction": 50.0,
        "market_alignment": 0.0,
        "technical_debt": 100.0,
        "test_coverage": 0.0,
        "build_success": 0.0,
    }


@pytest.mark.asyncio
async def test_performance_from_latest_feedback(provider, history):
    history.append(FeedbackData(source="performance", type="performance_issue", content="a", metrics={"performance": 40}))
    history.append(FeedbackData(source="user", type="improvement", content="b"))
    history.append(FeedbackData(source="performance", type="performance_issue", content="c", metrics={"performance": 65}))

    assert await provider.measure_performance() == 65.0


@pytest.mark.asyncio
async def test_performance_ignores_degradation_reports(provider, history):
    history.append(FeedbackData(source="user", type="performance_issue", content="slow", metrics={"performance": 50}))
    history.append(FeedbackData(
        source="system", type="performance_issue", content="Performance degradation detected",
        priority="high", metrics={"performance": 20},
    ))

    assert await provider.measure_performance() == 50.0


@pytest.mark.asyncio
async def test_user_satisfaction_and_debt(provider, history):
    history.append(FeedbackData(source="system", type="success", content="ok"))
    history.append(FeedbackData(source="system", type="success", content="ok"))
    history.append(FeedbackData(source="user", type="bug", content="crash", priority="high"))
    history.append(FeedbackData(source="system", type="failure", content="failed"))

    snapshot = await provider.snapshot()

    assert snapshot["user_satisfaction"] == 50.0
    assert snapshot["technical_debt"] == 90.0
    assert snapshot["code_quality"] == 50.0


@pytest.mark.asyncio
async def test_market_alignment_counts_phases(tmp_path, provider):
    constitution = tmp_path / ".specify" / "memory" / "constitution.md"
    constitution.parent.mkdir(parents=True)
    constitution.write_text("principles")
    (tmp_path / "src").mkdir()

    assert (await provider.snapshot())["market_alignment"] == 40.0


@pytest.mark.asyncio
async def test_test_coverage(tmp_path, provider):
    (tmp_path / "src").mkdir()
    (tmp_path / "src" / "app.py").write_text("")
    (tmp_path / "src" / "util.py").write_text("")
    (tmp_path / "src" / "__init__.py").write_text("")
    (tmp_path / "tests").mkdir()
    (tmp_path / "tests" / "test_app.py").write_text("")

    assert (await provider.snapshot())["test_coverage"] == 50.0


@pytest.mark.asyncio
async def test_build_success_from_last_execution(provider):
    execution = WorkflowExecution(id="exec_1")
    execution.add_result(StepResult(name="/plan", environment="terminal", success=True))
    execution.add_result(StepResult(name="/tasks", environment="terminal", success=False))

    provider.record_execution(execution)

    assert (await provider.snapshot())["build_success"] == 50.0


@pytest.mark.asyncio
async def test_recorded_metrics_take_precedence(provider):
    provider.record_metric("performance", 42)

    assert await provider.measure_performance() == 42.0


@pytest.mark.asyncio
async def test_tracked_subset(tmp_path, history):
    provider = StateMetricsProvider(ContextSnapshotBuilder(tmp_path, history), history, tracked=["performance"])

    assert await provider.snapshot() == {"performance": 100.0}
