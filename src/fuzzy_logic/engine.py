# ABOUTME: Runs fuzzy inference from learner signals to difficulty, hint, and alert recommendations.
# ABOUTME: Stateless functions: fuzzify, apply rules, centroid-defuzzify, label, and describe.

from __future__ import annotations

import math
from functools import lru_cache
from typing import Dict, Mapping

import numpy as np
from loguru import logger

from src.common.errors import ValidationError
from src.common.schemas import AdaptiveRecommendation

from .membership import FuzzySet
from .rules import apply_rules
from .variables import INPUT_VARIABLES, sets_for

SAMPLE_POINTS = np.arange(101) / 100.0
DEGENERATE_CENTROID = 0.5

_INPUT_ALIASES = {
    "mastery": "mastery",
    "engagement": "engagement",
    "responseTime": "responseTime",
    "response_time": "responseTime",
    "helpUsage": "helpUsage",
    "help_usage": "helpUsage",
}


@lru_cache(maxsize=None)
def sampled_membership(fuzzy_set: FuzzySet) -> np.ndarray:
    """Membership of ``fuzzy_set`` at every sample point, computed once per set."""
    curve = np.array([fuzzy_set(float(x)) for x in SAMPLE_POINTS])
    curve.setflags(write=False)
    return curve


def fuzzify(variable: str, value: float) -> Dict[str, float]:
    """Membership degree of ``value`` in every set of ``variable``, in declaration order."""
    return {fuzzy_set.name: fuzzy_set(value) for fuzzy_set in sets_for(variable)}


def defuzzify(fuzzy_output: Mapping[str, float], variable: str) -> float:
    """
    Centroid of the aggregated output set over 101 evenly spaced points of [0, 1].

    Each set is clipped at its rule strength and the clipped sets are combined
    with max. When nothing fired the total height is zero and 0.5 is returned.
    """

    sets = {fuzzy_set.name: fuzzy_set for fuzzy_set in sets_for(variable)}
    heights = np.zeros_like(SAMPLE_POINTS)
    for name, strength in fuzzy_output.items():
        if strength <= 0:
            continue
        if name not in sets:
            raise ValidationError(f"Unknown set '{name}' for variable '{variable}'.")
        heights = np.maximum(heights, np.minimum(strength, sampled_membership(sets[name])))

    total = float(heights.sum())
    if total == 0:
        return DEGENERATE_CENTROID
    return float((SAMPLE_POINTS * heights).sum() / total)


def label(value: float, variable: str) -> str:
    """Set with the highest membership at ``value``; an exact tie keeps the earlier-declared set."""
    best_name = None
    best_membership = -1.0
    for fuzzy_set in sets_for(variable):
        membership = fuzzy_set(value)
        if membership > best_membership:
            best_name, best_membership = fuzzy_set.name, membership
    return best_name


def generate_recommendations(difficulty: float, hint_level: float, teacher_alert: float) -> Dict[str, str]:
    recommendations = {}

    if difficulty < 0.3:
        recommendations["difficulty"] = "Increase difficulty. Student is ready for more challenging content."
    elif difficulty > 0.7:
        recommendations["difficulty"] = "Decrease difficulty. Student needs more practice with simpler problems."
    else:
        recommendations["difficulty"] = "Maintain current difficulty level."

    if hint_level < 0.3:
        recommendations["hints"] = "Provide minimal hints. Student is performing well independently."
    elif hint_level > 0.7:
        recommendations["hints"] = "Provide detailed hints and step-by-step guidance."
    else:
        recommendations["hints"] = "Provide moderate hints that guide without giving away the solution."

    priority = alert_priority(teacher_alert)
    if priority == "high":
        recommendations["alert"] = (
            "HIGH PRIORITY: Teacher intervention recommended. Student may be struggling significantly."
        )
    elif priority == "medium":
        recommendations["alert"] = "MEDIUM PRIORITY: Monitor student progress closely."
    else:
        recommendations["alert"] = "LOW PRIORITY: Student is progressing well independently."

    return recommendations


def alert_priority(teacher_alert: float) -> str:
    if teacher_alert > 0.7:
        return "high"
    if teacher_alert > 0.4:
        return "medium"
    return "low"


def normalize_inputs(inputs: Mapping[str, float]) -> Dict[str, float]:
    """Accept camelCase or snake_case keys; every input must be a finite number in [0, 1]."""
    normalized: Dict[str, float] = {}
    for key, value in inputs.items():
        canonical = _INPUT_ALIASES.get(key)
        if canonical is None:
            raise ValidationError(f"Unknown fuzzy input '{key}'.")
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValidationError(f"Fuzzy input '{key}' must be numeric, got {value!r}.")
        if not math.isfinite(value) or value < 0.0 or value > 1.0:
            raise ValidationError(f"Fuzzy input '{key}' must lie in [0, 1], got {value}.")
        normalized[canonical] = float(value)

    missing = [name for name in INPUT_VARIABLES if name not in normalized]
    if missing:
        raise ValidationError(f"Missing fuzzy inputs: {', '.join(missing)}")
    return normalized


def process_inputs(inputs: Mapping[str, float]) -> AdaptiveRecommendation:
    """
    Full inference pass for {mastery, engagement, responseTime, helpUsage}.

    responseTime is 0 = fast .. 1 = slow; helpUsage is 0 = none .. 1 = excessive.
    """

    values = normalize_inputs(inputs)
    memberships = {variable: fuzzify(variable, values[variable]) for variable in INPUT_VARIABLES}
    outputs = apply_rules(memberships)

    difficulty = defuzzify(outputs["difficulty"], "difficulty")
    hint_level = defuzzify(outputs["hintLevel"], "hintLevel")
    teacher_alert = defuzzify(outputs["teacherAlert"], "teacherAlert")

    recommendation = AdaptiveRecommendation(
        difficulty_score=difficulty,
        difficulty_label=label(difficulty, "difficulty"),
        hint_level_score=hint_level,
        hint_level_label=label(hint_level, "hintLevel"),
        teacher_alert_score=teacher_alert,
        teacher_alert_label=label(teacher_alert, "teacherAlert"),
        recommendations=generate_recommendations(difficulty, hint_level, teacher_alert),
        alert_priority=alert_priority(teacher_alert),
    )
    logger.debug(
        "Fuzzy inference {} -> difficulty={:.3f} ({}) hints={:.3f} ({}) alert={:.3f} ({})",
        values,
        difficulty,
        recommendation.difficulty_label,
        hint_level,
        recommendation.hint_level_label,
        teacher_alert,
        recommendation.teacher_alert_label,
    )
    return recommendation
