# ABOUTME: Tests fuzzification, rule evaluation, centroid defuzzification, and labelling.
# ABOUTME: Walks the main tutoring scenarios through the full inference pass.

import pytest

from src.adaptive.engagement import calculate_engagement
from src.common.errors import ValidationError
from src.common.schemas import EngagementMetrics
from src.fuzzy_logic.engine import (
    alert_priority,
    defuzzify,
    fuzzify,
    generate_recommendations,
    label,
    process_inputs,
)
from src.fuzzy_logic.membership import tri
from src.fuzzy_logic.rules import RULES, apply_rules
from src.fuzzy_logic.variables import LINGUISTIC_VARIABLES


def _inputs(mastery, engagement, response_time, help_usage):
    return {
        "mastery": mastery,
        "engagement": engagement,
        "responseTime": response_time,
        "helpUsage": help_usage,
    }


def test_fuzzify_returns_every_set():
    memberships = fuzzify("mastery", 0.3)
    assert list(memberships) == ["veryLow", "low", "medium", "high", "veryHigh"]
    assert memberships["veryLow"] == 0.0
    assert memberships["low"] == pytest.approx(2 / 3)
    assert memberships["medium"] == 0.0


def test_rule_base_has_fourteen_rules():
    assert len(RULES) == 14


def test_apply_rules_uses_min_and_max():
    memberships = {
        "mastery": fuzzify("mastery", 0.3),
        "engagement": fuzzify("engagement", 0.2),
        "responseTime": fuzzify("responseTime", 0.5),
        "helpUsage": fuzzify("helpUsage", 0.5),
    }
    outputs = apply_rules(memberships)

    assert outputs["difficulty"]["easy"] == pytest.approx(2 / 3)
    assert outputs["hintLevel"]["detailed"] == 1.0
    # disengaged (1.0) AND low mastery (0.667)
    assert outputs["teacherAlert"]["high"] == pytest.approx(2 / 3)
    assert outputs["teacherAlert"]["none"] == 0.0


def test_defuzzify_with_nothing_fired_returns_half():
    assert defuzzify({"none": 0.0, "low": 0.0, "high": 0.0}, "teacherAlert") == 0.5
    assert defuzzify({}, "difficulty") == 0.5


def test_defuzzify_single_shoulder_set():
    assert defuzzify({"veryEasy": 1.0}, "difficulty") == pytest.approx(3.165 / 24.5)


def test_defuzzify_symmetric_clipped_triangle_stays_centred():
    assert defuzzify({"easy": 0.4}, "difficulty") == pytest.approx(0.35)


def test_defuzzify_unknown_set_raises():
    with pytest.raises(ValidationError):
        defuzzify({"extreme": 1.0}, "difficulty")


def test_label_picks_highest_membership():
    assert label(0.35, "difficulty") == "easy"
    assert label(0.95, "difficulty") == "veryHard"
    assert label(0.5, "teacherAlert") == "low"


def test_label_ties_go_to_first_declared_set(monkeypatch):
    monkeypatch.setitem(
        LINGUISTIC_VARIABLES,
        "tieTest",
        (tri("first", 0, 0.5, 1), tri("second", 0, 0.5, 1)),
    )
    assert label(0.5, "tieTest") == "first"
    assert label(0.25, "tieTest") == "first"


def test_label_with_zero_memberships_returns_first_set(monkeypatch):
    monkeypatch.setitem(
        LINGUISTIC_VARIABLES,
        "narrow",
        (tri("left", 0.1, 0.2, 0.3), tri("right", 0.6, 0.7, 0.8)),
    )
    assert label(0.5, "narrow") == "left"


def test_struggling_disengaged_student():
    rec = process_inputs(_inputs(0.1, 0.2, 0.5, 0.3))

    assert rec.difficulty_label == "veryEasy"
    assert rec.difficulty_score == pytest.approx(3.165 / 24.5)
    assert rec.recommendations["difficulty"].startswith("Increase difficulty")
    assert rec.hint_level_label == "detailed"
    assert rec.hint_level_score == pytest.approx(28.335 / 34.5)
    # Neither alert rule fires: low(0.1) and none(0.3) are both 0.
    assert rec.teacher_alert_score == 0.5
    assert rec.teacher_alert_label == "low"
    assert rec.alert_priority == "medium"


def test_disengaged_low_mastery_alerts_teacher():
    rec = process_inputs(_inputs(0.3, 0.2, 0.5, 0.5))

    assert rec.teacher_alert_score > 0.7
    assert rec.teacher_alert_label == "high"
    assert rec.alert_priority == "high"
    assert rec.recommendations["alert"].startswith("HIGH PRIORITY")


def test_very_low_mastery_without_help_alerts_teacher():
    rec = process_inputs(_inputs(0.1, 0.5, 0.5, 0.1))

    assert rec.teacher_alert_score == pytest.approx(24.835 / 29.5, abs=1e-6)
    assert rec.teacher_alert_label == "high"


def test_engaged_high_mastery_student():
    rec = process_inputs(_inputs(0.75, 0.9, 0.2, 0.1))

    assert rec.difficulty_score == pytest.approx(0.8)
    assert rec.difficulty_label == "hard"
    assert rec.recommendations["difficulty"].startswith("Decrease difficulty")
    assert rec.hint_level_label == "minimal"
    assert rec.hint_level_score == pytest.approx(6.165 / 34.5)
    assert rec.teacher_alert_label == "none"
    assert rec.alert_priority == "low"
    assert "LOW PRIORITY" in rec.recommendation_text


def test_fully_disengaged_session_fires_no_hint_or_alert_rule():
    # Engagement clamps to exactly 0 here; disengaged(0) sits on the foot of its set.
    engagement = calculate_engagement(EngagementMetrics(30, 2, 3))
    assert engagement == 0.0

    rec = process_inputs(_inputs(0.35, engagement, 0.5, 0.3))

    assert rec.hint_level_score == 0.5
    assert rec.teacher_alert_score == 0.5
    assert rec.difficulty_label == "easy"


def test_edge_samples_carry_no_weight():
    assert defuzzify({"minimal": 1.0}, "hintLevel") == pytest.approx(6.165 / 34.5)
    assert defuzzify({"detailed": 1.0}, "hintLevel") == pytest.approx(28.335 / 34.5)


def test_snake_case_inputs_are_accepted():
    camel = process_inputs(_inputs(0.3, 0.5, 0.5, 0.3))
    snake = process_inputs({"mastery": 0.3, "engagement": 0.5, "response_time": 0.5, "help_usage": 0.3})
    assert camel == snake


@pytest.mark.parametrize(
    "inputs",
    [
        _inputs(1.2, 0.5, 0.5, 0.3),
        _inputs(0.3, -0.1, 0.5, 0.3),
        _inputs(0.3, 0.5, float("nan"), 0.3),
        _inputs(0.3, 0.5, 0.5, "high"),
        {"mastery": 0.3, "engagement": 0.5, "responseTime": 0.5},
        {**_inputs(0.3, 0.5, 0.5, 0.3), "mood": 0.2},
    ],
)
def test_invalid_inputs_raise(inputs):
    with pytest.raises(ValidationError):
        process_inputs(inputs)


def test_every_output_is_in_unit_interval():
    grid = [0.0, 0.25, 0.5, 0.75, 1.0]
    for m in grid:
        for e in grid:
            rec = process_inputs(_inputs(m, e, 0.5, 0.3))
            for score in (rec.difficulty_score, rec.hint_level_score, rec.teacher_alert_score):
                assert 0.0 <= score <= 1.0


def test_generate_recommendations_thresholds():
    recs = generate_recommendations(0.5, 0.5, 0.5)
    assert recs["difficulty"] == "Maintain current difficulty level."
    assert recs["hints"].startswith("Provide moderate hints")
    assert recs["alert"] == "MEDIUM PRIORITY: Monitor student progress closely."


@pytest.mark.parametrize("score, priority", [(0.71, "high"), (0.7, "medium"), (0.41, "medium"), (0.4, "low")])
def test_alert_priority_bands(score, priority):
    assert alert_priority(score) == priority
