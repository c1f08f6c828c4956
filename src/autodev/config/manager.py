"""Layered configuration: defaults, user file, project file, environment."""

import json
import os
from pathlib import Path
from typing import Any

import toml

from autodev.config.schema import EngineConfig, get_config_file

PROJECT_CONFIG_NAME = ".autodev.toml"
ENV_PREFIX = "AUTODEV_"


class ConfigManager:
    """Loads and caches the engine configuration.

    Later layers win, and nested tables are merged key by key:

    1. Defaults from the schema
    2. User config (~/.config/autodev/config.toml)
    3. Project config (.autodev.toml in cwd or a parent, up to home)
    4. Environment, e.g. AUTODEV_EXECUTION__MODE=conservative
    """

    _config: EngineConfig | None = None

    @classmethod
    def get_config(cls) -> EngineConfig:
        if cls._config is None:
            cls._config = cls.load_config()
        return cls._config

    @classmethod
    def load_config(cls) -> EngineConfig:
        layers = [cls._read_toml(get_config_file()), cls._read_toml(cls._find_project_config()), cls._env_overrides()]

        config_dict: dict[str, Any] = {}
        for layer in layers:
            config_dict = cls._deep_merge(config_dict, layer)
        return EngineConfig.model_validate(config_dict) if config_dict else EngineConfig.default()

    @classmethod
    def reload(cls) -> EngineConfig:
        cls._config = cls.load_config()
        return cls._config

    @classmethod
    def reset(cls) -> None:
        cls._config = None

    @staticmethod
    def _read_toml(path: Path | None) -> dict[str, Any]:
        if path is None or not path.exists():
            return {}
        return toml.load(path)

    @staticmethod
    def _find_project_config() -> Path | None:
        cwd = Path.cwd()
        for parent in [cwd, *cwd.parents]:
            candidate = parent / PROJECT_CONFIG_NAME
            if candidate.exists():
                return candidate
            if parent == Path.home():
                break
        return None

    @staticmethod
    def _env_overrides(environ: dict[str, str] | None = None) -> dict[str, Any]:
        """AUTODEV_<SECTION>__<KEY> variables as a nested dict; values are JSON when they parse"""
        overrides: dict[str, Any] = {}
        for name, raw in (os.environ if environ is None else environ).items():
            if not name.startswith(ENV_PREFIX) or "__" not in name:
                continue
            section, key = name[len(ENV_PREFIX):].lower().split("__", 1)
            overrides.setdefault(section, {})[key] = parse_value(raw)
        return overrides

    @classmethod
    def _deep_merge(cls, base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
        result = base.copy()
        for key, value in override.items():
            if isinstance(result.get(key), dict) and isinstance(value, dict):
                result[key] = cls._deep_merge(result[key], value)
            else:
                result[key] = value
        return result

    @classmethod
    def set_value(cls, key_path: str, value: Any) -> EngineConfig:
        """Store one override in the user config file and reload.

        Only the overridden keys are written, so later default changes still
        reach the user. Unknown keys raise KeyError; invalid values raise
        pydantic's ValidationError and leave the file untouched.
        """
        if cls.get_value(key_path, _MISSING) is _MISSING:
            raise KeyError(f"Unknown configuration key: {key_path}")

        config_file = get_config_file()
        user_dict = cls._read_toml(config_file)
        *sections, leaf = key_path.split(".")
        current = user_dict
        for section in sections:
            current = current.setdefault(section, {})
        current[leaf] = value

        EngineConfig.model_validate(cls._deep_merge(cls.get_config().model_dump(by_alias=True), user_dict))
        with open(config_file, "w") as f:
            toml.dump(user_dict, f)
        return cls.reload()

    @classmethod
    def get_value(cls, key_path: str, default: Any = None) -> Any:
        current: Any = cls.get_config().model_dump(by_alias=True)
        for key in key_path.split("."):
            if not isinstance(current, dict) or key not in current:
                return default
            current = current[key]
        return current


_MISSING = object()


def parse_value(raw: str) -> Any:
    """Interpret a command-line or environment string as JSON, else keep it as text"""
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return raw
