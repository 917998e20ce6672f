"""
Tests for the metric normalizers.
"""
import math

import pytest

from scoring.normalizers import (
    LESS,
    METRIC_POLICIES,
    MORE,
    MetricPolicy,
    PolicyKind,
    in_range,
    is_legacy_bad_metric,
    leading_number,
    less_is_better,
    more_is_better,
    normalize,
    parse_number,
    peak_at,
    policy_for,
    score_choice,
    score_free_text,
)
from scoring.questions import QUESTIONS, NumericQuestion


class TestCurves:
    @pytest.mark.parametrize("x", [0, 0.5, 1, 2, 7, 100, 1e6])
    def test_more_plus_less_is_one(self, x):
        assert more_is_better(x) + less_is_better(x) == pytest.approx(1.0)

    def test_more_is_better_half_saturation(self):
        assert more_is_better(2) == pytest.approx(0.5)
        assert more_is_better(6, k=2) == pytest.approx(0.75)

    def test_more_is_better_non_positive_and_non_finite(self):
        assert more_is_better(0) == 0.0
        assert more_is_better(-3) == 0.0
        assert more_is_better(float("nan")) == 0.0
        assert more_is_better(float("inf")) == 0.0

    def test_less_is_better_at_zero_is_one(self):
        assert less_is_better(0) == 1.0

    def test_peak_at_target(self):
        assert peak_at(8, 8) == 1.0
        assert peak_at(4, 8) == pytest.approx(peak_at(12, 8))
        assert peak_at(4, 8) < 1.0

    def test_peak_at_non_finite(self):
        assert peak_at(float("nan"), 8) == 0.0

    def test_in_range_inside_band(self):
        assert in_range(4000, 3000, 5000) == 1.0
        assert in_range(3000, 3000, 5000) == 1.0
        assert in_range(5000, 3000, 5000) == 1.0

    def test_in_range_below_band_is_linear(self):
        assert in_range(1500, 3000, 5000) == pytest.approx(0.4)
        assert in_range(1000, 3000, 5000) < 1.0
        values = [in_range(x, 3000, 5000) for x in (2500, 2000, 1000, 500, 1)]
        assert values == sorted(values, reverse=True)

    def test_in_range_above_band(self):
        assert in_range(10000, 3000, 5000) == pytest.approx(0.4)

    def test_in_range_degenerate_inputs(self):
        assert in_range(0, 3000, 5000) == 0.0
        assert in_range(-10, 3000, 5000) == 0.0
        assert in_range(float("inf"), 3000, 5000) == 0.0


class TestParsing:
    def test_parse_number(self):
        assert parse_number("7") == 7.0
        assert parse_number(" 2.5 ") == 2.5
        assert parse_number(3) == 3.0
        assert parse_number("") == 0.0

    def test_parse_number_rejects_garbage(self):
        assert parse_number("abc") is None
        assert parse_number("nan") is None
        assert parse_number("inf") is None
        assert parse_number(True) is None

    def test_leading_number(self):
        assert leading_number("7 Excellent") == 7.0
        assert leading_number("3.5") == 3.5
        assert leading_number("Often") is None


class TestPolicies:
    def test_every_numeric_question_has_an_explicit_policy(self):
        numeric_ids = {
            q.id for questions in QUESTIONS.values() for q in questions if isinstance(q, NumericQuestion)
        }
        assert numeric_ids <= set(METRIC_POLICIES)

    def test_table_matches_legacy_classification(self):
        """Outside peak/range metrics the table agrees with the keyword rule."""
        for metric_id, policy in METRIC_POLICIES.items():
            if policy.kind in (PolicyKind.PEAK_AT_TARGET, PolicyKind.IN_RANGE):
                continue
            expected = LESS if is_legacy_bad_metric(metric_id) else MORE
            assert policy == expected, metric_id

    def test_er_fragment_quirk_is_preserved(self):
        assert policy_for("out_fitness_per_week") == LESS
        assert policy_for("gh_water_servings") == LESS
        assert policy_for("mh_er_visits_year") == LESS

    def test_special_policies(self):
        assert policy_for("sleep_hours").kind is PolicyKind.PEAK_AT_TARGET
        assert policy_for("sleep_hours").target == 8
        assert policy_for("in_lux") == MetricPolicy(PolicyKind.IN_RANGE, lo=3000, hi=5000)
        assert policy_for("out_lux").kind is PolicyKind.IN_RANGE

    def test_unknown_metric_falls_back_to_keywords(self):
        assert policy_for("new_alcohol_metric") == LESS
        assert policy_for("new_steps_metric") == MORE


class TestNormalize:
    def test_normalize_more(self):
        assert normalize("sport_hours_week", "2") == pytest.approx(0.5)

    def test_normalize_less(self):
        assert normalize("nd_alcohol_week", "2") == pytest.approx(0.5)
        assert normalize("nd_alcohol_week", "0") == 1.0

    def test_normalize_peak_and_range(self):
        assert normalize("sleep_hours", "8") == 1.0
        assert normalize("in_lux", "4000") == 1.0

    def test_normalize_malformed_is_zero(self):
        assert normalize("sport_hours_week", "lots") == 0.0
        assert normalize("sport_hours_week", "Infinity") == 0.0

    def test_normalize_with_explicit_policy(self):
        assert normalize("anything", "1", MetricPolicy(PolicyKind.MORE_IS_BETTER, k=1)) == pytest.approx(0.5)

    def test_normalize_stays_in_unit_interval(self):
        for metric_id in METRIC_POLICIES:
            for raw in ("-5", "0", "1", "8", "50", "1e9"):
                value = normalize(metric_id, raw)
                assert 0.0 <= value <= 1.0
                assert not math.isnan(value)


class TestChoicesAndText:
    def test_ordinal_labels(self):
        options = ["Rarely", "Occasionally", "Often", "Almost always"]
        assert score_choice("Rarely", options) == 0.0
        assert score_choice("Often", options) == pytest.approx(2 / 3)
        assert score_choice("Almost always", options) == 1.0

    def test_digit_led_labels(self):
        options = ["1 Very poor", "2", "3", "4", "5", "6", "7 Excellent"]
        assert score_choice("7 Excellent", options) == 1.0
        assert score_choice("1 Very poor", options) == pytest.approx(1 / 7)
        assert score_choice("3.5", options) == pytest.approx(0.5)

    def test_unmatched_and_missing_options(self):
        assert score_choice("Sometimes", ["Yes", "No"]) == 0.5
        assert score_choice("Yes", []) == 0.5
        assert score_choice("Yes", None) == 0.5

    def test_single_option_scores_one(self):
        assert score_choice("Only", ["Only"]) == 1.0

    def test_free_text(self):
        assert score_free_text("Walking") == 0.6
        assert score_free_text("   ") == 0.0
        assert score_free_text("") == 0.0
