"""Configuration system for habitscore. YAML-based with env var expansion and env var overlay."""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator

from habitscore.frequency import HALF_LIFE_DAYS


# --- Config Models ---


class ScoringConfig(BaseModel):
    """Tuning of the score recurrence."""
    half_life_days: float = HALF_LIFE_DAYS
    default_days: int = 7  # rows printed by `habitscore score`

    @field_validator("half_life_days")
    @classmethod
    def _validate_half_life(cls, v: float) -> float:
        if v <= 0:
            raise ValueError(f"half_life_days must be positive, got {v}")
        return v

    @field_validator("default_days")
    @classmethod
    def _validate_default_days(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"default_days must be at least 1, got {v}")
        return v


class LoggingConfig(BaseModel):
    """Logging configuration."""
    format: str = "text"   # "text" or "json"
    level: str = "WARNING"


class Config(BaseModel):
    scoring: ScoringConfig = Field(default_factory=ScoringConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


# --- Helpers ---

_ENV_PATTERN = re.compile(r"\$\{(\w+)\}")


def get_config_dir() -> Path:
    """Get or create habitscore config directory."""
    config_dir = Path.home() / ".habitscore"
    config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir


def get_config_path() -> Path:
    return get_config_dir() / "config.yaml"


def _expand_env_vars(data: Any) -> Any:
    """Recursively expand ${VAR} in strings."""
    if isinstance(data, str):
        return _ENV_PATTERN.sub(lambda m: os.environ.get(m.group(1), m.group(0)), data)
    if isinstance(data, dict):
        return {k: _expand_env_vars(v) for k, v in data.items()}
    if isinstance(data, list):
        return [_expand_env_vars(v) for v in data]
    return data


# Mapping of HABITSCORE_* env var suffixes to (section, field) tuples.
_ENV_VAR_MAP: dict[str, tuple[str, str]] = {
    "SCORING_HALF_LIFE_DAYS": ("scoring", "half_life_days"),
    "SCORING_DEFAULT_DAYS": ("scoring", "default_days"),
    "LOG_FORMAT": ("logging", "format"),
    "LOG_LEVEL": ("logging", "level"),
}


def _get_section_models() -> dict[str, type[BaseModel]]:
    return {
        "scoring": ScoringConfig,
        "logging": LoggingConfig,
    }


def _apply_env_overlay(data: dict[str, Any]) -> dict[str, Any]:
    """Apply HABITSCORE_* environment variables on top of YAML data dict.

    Converts values to the correct type based on Pydantic field annotations.
    """
    section_models = _get_section_models()

    for env_suffix, (section, field) in _ENV_VAR_MAP.items():
        raw_val = os.environ.get(f"HABITSCORE_{env_suffix}")
        if raw_val is None:
            continue

        model_cls = section_models.get(section)
        target_type: type = str
        if model_cls is not None:
            field_info = model_cls.model_fields.get(field)
            if field_info is not None:
                ann = field_info.annotation
                if ann is int:
                    target_type = int
                elif ann is float:
                    target_type = float

        try:
            typed_val: Any = target_type(raw_val)
        except (ValueError, TypeError):
            typed_val = raw_val  # fall back to string; Pydantic will validate

        if section not in data or not isinstance(data[section], dict):
            data[section] = {}
        data[section][field] = typed_val

    return data


def load_config(path: Path | None = None) -> Config:
    """Load config from YAML, expanding env vars, then applying HABITSCORE_* env overlay."""
    config_path = path or get_config_path()
    if config_path.exists():
        with open(config_path) as f:
            raw = yaml.safe_load(f) or {}
        data = _expand_env_vars(raw)
    else:
        data = {}
    data = _apply_env_overlay(data)
    return Config(**data)


def save_config(config: Config, path: Path | None = None) -> None:
    """Save config to YAML."""
    config_path = path or get_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)
    with open(config_path, "w") as f:
        yaml.dump(config.model_dump(), f, default_flow_style=False, sort_keys=False)


def get_config_value(config: Config, key_path: str) -> Any:
    """Get nested config value via dot notation (e.g. 'scoring.half_life_days')."""
    obj: Any = config
    for part in key_path.split("."):
        if isinstance(obj, BaseModel):
            obj = getattr(obj, part, None)
        elif isinstance(obj, dict):
            obj = obj.get(part)
        else:
            return None
    return obj


def set_config_value(key_path: str, value: str) -> Config:
    """Set config value via dot notation, save, and return updated config."""
    config_path = get_config_path()
    if config_path.exists():
        with open(config_path) as f:
            raw = yaml.safe_load(f) or {}
    else:
        raw = {}

    parts = key_path.split(".")
    obj = raw
    for part in parts[:-1]:
        if part not in obj or not isinstance(obj[part], dict):
            obj[part] = {}
        obj = obj[part]
    obj[parts[-1]] = value

    # Validate before writing so a bad value never lands on disk
    Config(**_apply_env_overlay(_expand_env_vars(dict(raw))))

    with open(config_path, "w") as f:
        yaml.dump(raw, f, default_flow_style=False, sort_keys=False)

    return load_config(config_path)
