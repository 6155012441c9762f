# ABOUTME: Loads tutoring-core settings from YAML with built-in defaults.
# ABOUTME: Covers BKT priors, engagement/response normalizers, cold-start values, and thresholds.

from __future__ import annotations

import os
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml
from loguru import logger

from .errors import ValidationError
from .schemas import DEFAULT_P_GUESS, DEFAULT_P_MASTERY, DEFAULT_P_SLIP, DEFAULT_P_TRANSIT

CONFIG_ENV_VAR = "TUTOR_CORE_CONFIG"


@dataclass(frozen=True)
class BKTConfig:
    p_mastery: float = DEFAULT_P_MASTERY
    p_transit: float = DEFAULT_P_TRANSIT
    p_guess: float = DEFAULT_P_GUESS
    p_slip: float = DEFAULT_P_SLIP
    epsilon: float = 1e-9  # guard for P(correct) at exactly 0 or 1


@dataclass(frozen=True)
class EngagementConfig:
    time_on_task_seconds: float = 300.0
    activity_count: float = 20.0
    help_requests: float = 5.0
    time_weight: float = 0.4
    activity_weight: float = 0.4
    help_weight: float = 0.2


@dataclass(frozen=True)
class ResponseConfig:
    time_spent_seconds: float = 120.0
    hint_requests: float = 3.0


@dataclass(frozen=True)
class DefaultsConfig:
    engagement: float = 0.5
    response_time: float = 0.5
    help_usage: float = 0.3


@dataclass(frozen=True)
class InterventionConfig:
    alert_threshold: float = 0.6


@dataclass(frozen=True)
class ContentConfig:
    default_language: str = "English"
    max_items: int = 5


@dataclass(frozen=True)
class TutorConfig:
    bkt: BKTConfig = field(default_factory=BKTConfig)
    engagement: EngagementConfig = field(default_factory=EngagementConfig)
    response: ResponseConfig = field(default_factory=ResponseConfig)
    defaults: DefaultsConfig = field(default_factory=DefaultsConfig)
    intervention: InterventionConfig = field(default_factory=InterventionConfig)
    content: ContentConfig = field(default_factory=ContentConfig)


def load_tutor_config(config_path: Optional[Path] = None) -> TutorConfig:
    """
    Load settings from a YAML file.

    Falls back to the path in ``TUTOR_CORE_CONFIG`` and then to built-in defaults.
    Sections and keys mirror the dataclasses above; unknown keys are rejected.
    """

    if config_path is None:
        env_path = os.environ.get(CONFIG_ENV_VAR)
        if not env_path:
            return TutorConfig()
        config_path = Path(env_path)

    config_path = Path(config_path)
    if not config_path.exists():
        raise ValidationError(f"Config file not found: {config_path}")

    with open(config_path) as f:
        raw = yaml.safe_load(f) or {}

    logger.debug("Loaded tutor config from {}", config_path)
    return config_from_mapping(raw)


def config_from_mapping(raw: Mapping[str, Any]) -> TutorConfig:
    if not isinstance(raw, Mapping):
        raise ValidationError("Tutor config must be a mapping of sections.")

    config = TutorConfig()
    sections = {f.name: f for f in fields(TutorConfig)}
    overrides: Dict[str, Any] = {}
    for section_name, section_values in raw.items():
        if section_name not in sections:
            raise ValidationError(f"Unknown config section '{section_name}'.")
        current = getattr(config, section_name)
        overrides[section_name] = _apply_section(section_name, current, section_values or {})
    return replace(config, **overrides)


def _apply_section(name: str, current: Any, values: Mapping[str, Any]) -> Any:
    if not isinstance(values, Mapping):
        raise ValidationError(f"Config section '{name}' must be a mapping.")
    allowed = {f.name: f for f in fields(current)}
    updates = {}
    for key, value in values.items():
        if key not in allowed:
            raise ValidationError(f"Unknown key '{key}' in config section '{name}'.")
        default = getattr(current, key)
        try:
            if isinstance(default, str):
                updates[key] = str(value)
            elif isinstance(default, int) and not isinstance(default, bool):
                updates[key] = int(value)
            else:
                updates[key] = float(value)
        except (TypeError, ValueError) as exc:
            raise ValidationError(f"Invalid value {value!r} for '{name}.{key}'.") from exc
    return replace(current, **updates)
