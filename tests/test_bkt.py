# ABOUTME: Unit tests for the pure Bayesian Knowledge Tracing update.
# ABOUTME: Verifies the closed-form update, bounds, monotonicity, and division guards.

import math
import unittest

import pytest

from src.common.errors import ValidationError
from src.knowledge_tracing.bkt import bkt_posterior, bkt_update, probability_correct, validate_bkt_params


class TestBKTUpdate(unittest.TestCase):
    def test_correct_answer_matches_closed_form(self):
        posterior, mastery = bkt_update(0.3, 0.1, 0.2, 0.1, correct=True)
        self.assertAlmostEqual(posterior, 0.27 / 0.41)
        self.assertAlmostEqual(mastery, 0.27 / 0.41 + (1 - 0.27 / 0.41) * 0.1)

    def test_incorrect_answer_matches_closed_form(self):
        posterior, mastery = bkt_update(0.3, 0.1, 0.2, 0.1, correct=False)
        self.assertAlmostEqual(posterior, 0.03 / 0.59)
        self.assertAlmostEqual(mastery, 0.03 / 0.59 + (1 - 0.03 / 0.59) * 0.1)

    def test_probability_correct(self):
        self.assertAlmostEqual(probability_correct(0.3, 0.2, 0.1), 0.41)

    def test_twenty_correct_answers_reach_mastery(self):
        mastery = 0.3
        for _ in range(20):
            _, mastery = bkt_update(mastery, 0.1, 0.2, 0.1, correct=True)
        self.assertGreater(mastery, 0.95)
        self.assertLessEqual(mastery, 1.0)

    def test_certain_correct_never_divides_by_zero(self):
        # P(correct) == 1 makes the incorrect branch divide by zero without a guard.
        posterior, mastery = bkt_update(1.0, 0.1, 1.0, 0.0, correct=False)
        self.assertTrue(math.isfinite(posterior))
        self.assertTrue(0.0 <= mastery <= 1.0)

    def test_impossible_correct_never_divides_by_zero(self):
        # P(correct) == 0 when mastery and guess are both zero.
        posterior, mastery = bkt_update(0.0, 0.2, 0.0, 0.1, correct=True)
        self.assertEqual(posterior, 0.0)
        self.assertAlmostEqual(mastery, 0.2)

    def test_extreme_parameters_stay_bounded(self):
        for correct in (True, False):
            posterior, mastery = bkt_update(1.0, 1.0, 1.0, 1.0, correct=correct)
            self.assertTrue(0.0 <= posterior <= 1.0)
            self.assertTrue(0.0 <= mastery <= 1.0)


PARAM_GRID = [
    (0.01, 0.01, 0.01, 0.01),
    (0.3, 0.1, 0.2, 0.1),
    (0.5, 0.5, 0.5, 0.5),
    (0.9, 0.05, 0.3, 0.2),
    (0.99, 0.99, 0.99, 0.99),
    (0.2, 0.7, 0.6, 0.3),
]


@pytest.mark.parametrize("p_mastery,p_transit,p_guess,p_slip", PARAM_GRID)
@pytest.mark.parametrize("correct", [True, False])
def test_update_stays_in_unit_interval(p_mastery, p_transit, p_guess, p_slip, correct):
    posterior, mastery = bkt_update(p_mastery, p_transit, p_guess, p_slip, correct)
    assert 0.0 <= posterior <= 1.0
    assert 0.0 <= mastery <= 1.0


@pytest.mark.parametrize(
    "p_mastery,p_guess,p_slip",
    [(0.1, 0.2, 0.1), (0.5, 0.3, 0.3), (0.8, 0.25, 0.05), (0.3, 0.45, 0.45)],
)
def test_posterior_moves_toward_the_evidence(p_mastery, p_guess, p_slip):
    assert bkt_posterior(p_mastery, p_guess, p_slip, correct=True) >= p_mastery
    assert bkt_posterior(p_mastery, p_guess, p_slip, correct=False) <= p_mastery


def test_validate_rejects_out_of_range_parameters():
    with pytest.raises(ValidationError):
        validate_bkt_params({"p_slip": 1.2})
    with pytest.raises(ValidationError):
        validate_bkt_params({"p_guess": -0.1})
    with pytest.raises(ValidationError):
        validate_bkt_params({"p_mastery": float("nan")})
    with pytest.raises(ValidationError):
        validate_bkt_params({"p_learn": 0.2})


def test_validate_accepts_boundaries():
    validate_bkt_params({"p_mastery": 0.0, "p_transit": 1.0, "p_guess": None})


if __name__ == "__main__":
    unittest.main()
