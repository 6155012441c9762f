# ABOUTME: Encodes the pedagogical rule base of the fuzzy decision engine.
# ABOUTME: Antecedents combine with min (AND); consequents aggregate with max (OR).

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Mapping, Tuple

from .variables import OUTPUT_VARIABLES, set_names

Term = Tuple[str, str]  # (variable, fuzzy set)


@dataclass(frozen=True)
class FuzzyRule:
    antecedents: Tuple[Term, ...]
    consequent: Term
    description: str = ""

    def strength(self, memberships: Mapping[str, Mapping[str, float]]) -> float:
        return min(memberships[variable][name] for variable, name in self.antecedents)


RULES: Tuple[FuzzyRule, ...] = (
    FuzzyRule((("mastery", "veryLow"),), ("difficulty", "veryEasy"), "very low mastery -> very easy problems"),
    FuzzyRule((("mastery", "low"),), ("difficulty", "easy"), "low mastery -> easy problems"),
    FuzzyRule((("mastery", "medium"),), ("difficulty", "medium"), "medium mastery -> medium problems"),
    FuzzyRule((("mastery", "high"),), ("difficulty", "hard"), "high mastery -> hard problems"),
    FuzzyRule((("mastery", "veryHigh"),), ("difficulty", "veryHard"), "very high mastery -> very hard problems"),
    FuzzyRule((("engagement", "disengaged"),), ("hintLevel", "detailed"), "disengaged -> detailed hints"),
    FuzzyRule(
        (("engagement", "disengaged"), ("mastery", "low")),
        ("teacherAlert", "high"),
        "disengaged and low mastery -> alert teacher",
    ),
    FuzzyRule((("helpUsage", "excessive"),), ("hintLevel", "detailed"), "excessive help -> detailed hints"),
    FuzzyRule(
        (("responseTime", "slow"), ("mastery", "low")),
        ("hintLevel", "detailed"),
        "slow and low mastery -> detailed hints",
    ),
    FuzzyRule(
        (("mastery", "medium"), ("engagement", "partiallyEngaged")),
        ("hintLevel", "moderate"),
        "medium mastery, partially engaged -> moderate hints",
    ),
    FuzzyRule(
        (("mastery", "high"), ("engagement", "fullyEngaged")),
        ("hintLevel", "minimal"),
        "high mastery, fully engaged -> minimal hints",
    ),
    FuzzyRule(
        (("helpUsage", "excessive"), ("responseTime", "slow")),
        ("teacherAlert", "high"),
        "excessive help and slow -> alert teacher",
    ),
    FuzzyRule((("engagement", "fullyEngaged"),), ("teacherAlert", "none"), "fully engaged -> no alert"),
    FuzzyRule(
        (("mastery", "veryLow"), ("helpUsage", "none")),
        ("teacherAlert", "high"),
        "very low mastery without asking for help -> alert teacher",
    ),
)


def empty_outputs() -> Dict[str, Dict[str, float]]:
    return {variable: {name: 0.0 for name in set_names(variable)} for variable in OUTPUT_VARIABLES}


def apply_rules(memberships: Mapping[str, Mapping[str, float]]) -> Dict[str, Dict[str, float]]:
    """
    Fire every rule against fuzzified inputs.

    ``memberships`` maps input variable -> set -> degree. Returns output
    variable -> set -> activation, all sets present and unfired ones at 0.
    """

    outputs = empty_outputs()
    for rule in RULES:
        variable, name = rule.consequent
        outputs[variable][name] = max(outputs[variable][name], rule.strength(memberships))
    return outputs
