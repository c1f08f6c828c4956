"""Configuration schema using Pydantic."""

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from autodev.config import defaults


class GlobalConfig(BaseModel):
    """Global engine configuration."""

    project_root: str | None = None  # None means current working directory
    state_dir: str = defaults.DEFAULT_STATE_DIR
    color: bool = True
    verbose: bool = False
    log_level: str = "WARNING"


class IntentConfig(BaseModel):
    """Keyword vocabularies for intent classification."""

    categories: dict[str, list[str]] = Field(
        default_factory=lambda: {k: list(v) for k, v in defaults.DEFAULT_CATEGORY_KEYWORDS.items()}
    )
    urgent_keywords: list[str] = Field(default_factory=lambda: list(defaults.DEFAULT_URGENT_KEYWORDS))
    high_keywords: list[str] = Field(
        default_factory=lambda: list(defaults.DEFAULT_HIGH_URGENCY_KEYWORDS)
    )
    domains: list[str] = Field(default_factory=lambda: list(defaults.DEFAULT_DOMAINS))
    scopes: dict[str, list[str]] = Field(
        default_factory=lambda: {k: list(v) for k, v in defaults.DEFAULT_SCOPE_KEYWORDS.items()}
    )
    max_keywords: int = 10
    min_keyword_length: int = 4


class PlannerConfig(BaseModel):
    """Action planning thresholds."""

    evolution_interval_days: float = defaults.DEFAULT_EVOLUTION_INTERVAL_DAYS
    min_trend_relevance: float = 0.0


class SelectorConfig(BaseModel):
    """Environment selection vocabularies and confidence scaling."""

    web_indicators: list[str] = Field(default_factory=lambda: list(defaults.DEFAULT_WEB_INDICATORS))
    terminal_indicators: list[str] = Field(
        default_factory=lambda: list(defaults.DEFAULT_TERMINAL_INDICATORS)
    )
    pure_environment_min_hits: int = 3  # fewer winning hits than this -> hybrid
    base_confidence: float = 0.5
    confidence_step: float = 0.1
    max_confidence: float = 0.95


class ExecutionConfig(BaseModel):
    """Execution coordination settings."""

    checkpoint_confidence_threshold: float = defaults.DEFAULT_CHECKPOINT_CONFIDENCE_THRESHOLD
    step_timeout: float = 300.0  # seconds, per backend call
    mode: str = "balanced"  # conservative, balanced, aggressive
    visual_feedback: bool = True
    command_map: dict[str, list[str]] = Field(
        default_factory=lambda: {k: list(v) for k, v in defaults.DEFAULT_COMMAND_MAP.items()}
    )
    implementation_indicators: list[str] = Field(
        default_factory=lambda: list(defaults.DEFAULT_IMPLEMENTATION_INDICATORS)
    )


class FeedbackConfig(BaseModel):
    """Feedback trigger thresholds and learning increments."""

    trigger_window_hours: float = 24.0
    trigger_count: int = 3
    performance_trigger_threshold: float = 70.0
    context_window_days: float = 30.0  # history older than this no longer shapes plans
    learning_initial_confidence: float = 0.5
    learning_increment: float = 0.1


class SchedulerConfig(BaseModel):
    """Evolution scheduling and background monitor intervals."""

    cycle_interval_hours: float = 24.0
    performance_poll_minutes: float = 5.0
    external_poll_minutes: float = 60.0
    file_watch_seconds: float = 10.0
    watch_suffixes: list[str] = Field(default_factory=lambda: list(defaults.DEFAULT_WATCH_SUFFIXES))
    tracked_metrics: list[str] = Field(default_factory=lambda: list(defaults.DEFAULT_TRACKED_METRICS))
    min_improved_metrics: int = 3
    run_on_start: bool = True


class IntelligenceConfig(BaseModel):
    """Intelligence source selection."""

    provider: str = "static"  # static, llm
    model: str = "claude-3-5-haiku-latest"
    trend_analysis: bool = True
    competitor_analysis: bool = True
    user_demand_analysis: bool = True
    opportunity_analysis: bool = True


class EngineConfig(BaseModel):
    """Root configuration model for autodev."""

    model_config = ConfigDict(populate_by_name=True)

    global_: GlobalConfig = Field(default_factory=GlobalConfig, alias="global")
    intent: IntentConfig = Field(default_factory=IntentConfig)
    planner: PlannerConfig = Field(default_factory=PlannerConfig)
    selector: SelectorConfig = Field(default_factory=SelectorConfig)
    execution: ExecutionConfig = Field(default_factory=ExecutionConfig)
    feedback: FeedbackConfig = Field(default_factory=FeedbackConfig)
    scheduler: SchedulerConfig = Field(default_factory=SchedulerConfig)
    intelligence: IntelligenceConfig = Field(default_factory=IntelligenceConfig)

    @classmethod
    def default(cls) -> "EngineConfig":
        """Create default configuration."""
        return cls()

    def project_root(self) -> Path:
        """Resolve the project root directory."""
        if self.global_.project_root:
            return Path(self.global_.project_root).expanduser()
        return Path.cwd()

    def state_dir(self) -> Path:
        """Resolve the directory holding persisted history."""
        return self.project_root() / self.global_.state_dir


def get_config_dir() -> Path:
    """Get the configuration directory path."""
    config_dir = Path.home() / ".config" / "autodev"
    config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir


def get_config_file() -> Path:
    """Get the main configuration file path."""
    return get_config_dir() / "config.toml"
