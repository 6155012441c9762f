# ABOUTME: Declares the fixed linguistic variables used by the fuzzy decision engine.
# ABOUTME: Set order is significant: label ties resolve to the first declared set.

from __future__ import annotations

from typing import Dict, Tuple

from src.common.errors import ValidationError

from .membership import FuzzySet, trap, tri

INPUT_VARIABLES = ("mastery", "engagement", "responseTime", "helpUsage")
OUTPUT_VARIABLES = ("difficulty", "hintLevel", "teacherAlert")

LINGUISTIC_VARIABLES: Dict[str, Tuple[FuzzySet, ...]] = {
    "mastery": (
        trap("veryLow", 0, 0, 0.2, 0.3),
        tri("low", 0.2, 0.35, 0.5),
        tri("medium", 0.4, 0.55, 0.7),
        tri("high", 0.6, 0.75, 0.9),
        trap("veryHigh", 0.8, 0.9, 1, 1),
    ),
    "engagement": (
        trap("disengaged", 0, 0, 0.3, 0.4),
        tri("partiallyEngaged", 0.3, 0.5, 0.7),
        trap("fullyEngaged", 0.6, 0.8, 1, 1),
    ),
    "responseTime": (
        trap("fast", 0, 0, 0.3, 0.5),
        tri("medium", 0.3, 0.5, 0.7),
        trap("slow", 0.5, 0.7, 1, 1),
    ),
    "helpUsage": (
        trap("none", 0, 0, 0.2, 0.3),
        tri("some", 0.2, 0.5, 0.8),
        trap("excessive", 0.7, 0.8, 1, 1),
    ),
    # Output variables
    "difficulty": (
        trap("veryEasy", 0, 0, 0.2, 0.3),
        tri("easy", 0.2, 0.35, 0.5),
        tri("medium", 0.4, 0.6, 0.8),
        tri("hard", 0.7, 0.8, 0.9),
        trap("veryHard", 0.8, 0.9, 1, 1),
    ),
    "hintLevel": (
        trap("minimal", 0, 0, 0.3, 0.4),
        tri("moderate", 0.3, 0.5, 0.7),
        trap("detailed", 0.6, 0.7, 1, 1),
    ),
    "teacherAlert": (
        trap("none", 0, 0, 0.3, 0.4),
        tri("low", 0.3, 0.5, 0.7),
        trap("high", 0.6, 0.8, 1, 1),
    ),
}


def sets_for(variable: str) -> Tuple[FuzzySet, ...]:
    try:
        return LINGUISTIC_VARIABLES[variable]
    except KeyError:
        raise ValidationError(f"Unknown linguistic variable '{variable}'.") from None


def set_names(variable: str) -> Tuple[str, ...]:
    return tuple(fuzzy_set.name for fuzzy_set in sets_for(variable))
