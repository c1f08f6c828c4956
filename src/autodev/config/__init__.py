"""Configuration management."""

from autodev.config.manager import ConfigManager
from autodev.config.schema import EngineConfig

__all__ = ["ConfigManager", "EngineConfig"]
