"""Tests for configuration schema."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from autodev.config.schema import EngineConfig, ExecutionConfig, FeedbackConfig


def test_default_config():
    """Test default configuration values."""
    config = EngineConfig.default()

    assert config.global_.project_root is None
    assert config.global_.state_dir == ".specify/memory"
    assert config.execution.checkpoint_confidence_threshold == 0.7
    assert config.execution.mode == "balanced"
    assert config.execution.visual_feedback is True
    assert config.feedback.trigger_count == 3
    assert config.feedback.trigger_window_hours == 24.0
    assert config.planner.evolution_interval_days == 7
    assert config.scheduler.min_improved_metrics == 3
    assert config.selector.pure_environment_min_hits == 3


def test_default_vocabularies():
    config = EngineConfig()

    assert list(config.intent.categories) == ["create", "fix", "optimize", "improve", "explore"]
    assert "website" in config.selector.web_indicators
    assert "docker" in config.selector.terminal_indicators
    assert config.execution.command_map["/evolve"] == ["shinka_launch"]


def test_default_lists_are_not_shared():
    """Mutating one config must not leak into another."""
    first = EngineConfig()
    second = EngineConfig()

    first.execution.command_map["/custom"] = ["custom"]
    first.selector.web_indicators.append("dashboard")

    assert "/custom" not in second.execution.command_map
    assert "dashboard" not in second.selector.web_indicators


def test_global_alias_round_trip():
    config = EngineConfig.model_validate({"global": {"state_dir": "state"}})

    assert config.global_.state_dir == "state"
    assert "global" in config.model_dump(by_alias=True)


def test_populate_by_field_name():
    config = EngineConfig(execution=ExecutionConfig(mode="aggressive"))
    assert config.execution.mode == "aggressive"


def test_project_root_defaults_to_cwd():
    assert EngineConfig().project_root() == Path.cwd()


def test_state_dir_under_project_root(tmp_path):
    config = EngineConfig.model_validate({"global": {"project_root": str(tmp_path)}})

    assert config.project_root() == tmp_path
    assert config.state_dir() == tmp_path / ".specify" / "memory"


def test_invalid_type_rejected():
    with pytest.raises(ValidationError):
        FeedbackConfig(trigger_count="many")
