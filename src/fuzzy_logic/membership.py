# ABOUTME: Provides triangular and trapezoidal membership functions on the unit interval.
# ABOUTME: Wraps them in FuzzySet records so linguistic variables stay plain lookup tables.

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple


def triangle(x: float, a: float, b: float, c: float) -> float:
    """0 for x <= a or x >= c, 1 at x == b, linear ramps in between."""
    if x <= a or x >= c:
        return 0.0
    if x == b:
        return 1.0
    if x < b:
        return (x - a) / (b - a)
    return (c - x) / (c - b)


def trapezoid(x: float, a: float, b: float, c: float, d: float) -> float:
    """
    0 for x <= a or x >= d, 1 on the plateau [b, c], linear ramps on the slopes.

    The feet are checked first, so shoulder sets such as (0, 0, 0.2, 0.3) or
    (0.8, 0.9, 1, 1) are 0 exactly at the domain edge.
    """

    if x <= a or x >= d:
        return 0.0
    if b <= x <= c:
        return 1.0
    if x < b:
        return (x - a) / (b - a)
    return (d - x) / (d - c)


@dataclass(frozen=True)
class FuzzySet:
    name: str
    shape: str
    points: Tuple[float, ...]

    def __call__(self, x: float) -> float:
        if self.shape == "triangle":
            return triangle(x, *self.points)
        if self.shape == "trapezoid":
            return trapezoid(x, *self.points)
        raise ValueError(f"Unsupported membership shape '{self.shape}'.")


def tri(name: str, a: float, b: float, c: float) -> FuzzySet:
    return FuzzySet(name, "triangle", (a, b, c))


def trap(name: str, a: float, b: float, c: float, d: float) -> FuzzySet:
    return FuzzySet(name, "trapezoid", (a, b, c, d))
