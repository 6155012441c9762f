# ABOUTME: Implements the Bayesian Knowledge Tracing belief update as pure functions.
# ABOUTME: Guards the Bayes division so degenerate parameters never yield NaN or Inf.

from __future__ import annotations

import math
from typing import Mapping, Tuple

from src.common.errors import ValidationError

BKT_PARAM_NAMES = ("p_mastery", "p_transit", "p_guess", "p_slip")
DEFAULT_EPSILON = 1e-9


def clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    return max(low, min(high, value))


def validate_bkt_params(params: Mapping[str, float]) -> None:
    """Raise ValidationError unless every supplied BKT probability is a finite number in [0, 1]."""
    for name, value in params.items():
        if name not in BKT_PARAM_NAMES:
            raise ValidationError(f"Unknown BKT parameter '{name}'.")
        if value is None:
            continue
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValidationError(f"BKT parameter '{name}' must be numeric, got {value!r}.")
        if not math.isfinite(value) or value < 0.0 or value > 1.0:
            raise ValidationError(f"BKT parameter '{name}' must lie in [0, 1], got {value}.")


def probability_correct(p_mastery: float, p_guess: float, p_slip: float) -> float:
    """P(correct) = P(L)(1 - P(S)) + (1 - P(L))P(G)."""
    return p_mastery * (1 - p_slip) + (1 - p_mastery) * p_guess


def bkt_posterior(
    p_mastery: float,
    p_guess: float,
    p_slip: float,
    correct: bool,
    epsilon: float = DEFAULT_EPSILON,
) -> float:
    """
    Posterior P(L | observation) before the learning transition.

    P(correct) is clamped to [epsilon, 1 - epsilon] so neither branch divides by zero.
    """

    p_correct = clamp(probability_correct(p_mastery, p_guess, p_slip), epsilon, 1 - epsilon)
    if correct:
        posterior = p_mastery * (1 - p_slip) / p_correct
    else:
        posterior = p_mastery * p_slip / (1 - p_correct)
    return clamp(posterior)


def bkt_update(
    p_mastery: float,
    p_transit: float,
    p_guess: float,
    p_slip: float,
    correct: bool,
    epsilon: float = DEFAULT_EPSILON,
) -> Tuple[float, float]:
    """
    Apply one observation and the learning transition.

    Returns (posterior, new_mastery) where new_mastery = p' + (1 - p') * p_transit.
    """

    posterior = bkt_posterior(p_mastery, p_guess, p_slip, correct, epsilon=epsilon)
    new_mastery = clamp(posterior + (1 - posterior) * p_transit)
    return posterior, new_mastery
