# ABOUTME: Exposes the fuzzy decision engine used for difficulty, hint, and alert decisions.
# ABOUTME: Re-exports membership functions, variable tables, rules, and inference entrypoints.

from .engine import defuzzify, fuzzify, label, process_inputs
from .membership import trapezoid, triangle
from .rules import RULES, apply_rules
from .variables import LINGUISTIC_VARIABLES

__all__ = [
    "LINGUISTIC_VARIABLES",
    "RULES",
    "apply_rules",
    "defuzzify",
    "fuzzify",
    "label",
    "process_inputs",
    "trapezoid",
    "triangle",
]
