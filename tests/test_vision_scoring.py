"""
Tests for vision wellness scoring.
"""
import pytest

from scoring.normalizers import in_range, less_is_better
from scoring.vision import (
    ACUITY_TOPIC,
    OSDI_TOPIC,
    PRESCRIPTION_TOPIC,
    SNELLEN,
    EyeValues,
    LineReading,
    Prescription,
    compare_letters,
    decode_spoken_letters,
    evaluate_vision,
    grade_acuity,
    line_to_decimal,
    score_osdi,
    score_prescription,
)


class TestPrescription:
    def test_empty_prescription_scores_zero(self):
        assert score_prescription(Prescription()) == 0.0

    def test_plano_lenses_and_typical_pd(self):
        rx = Prescription(od=EyeValues(sph="0", cyl="0"), os=EyeValues(sph="0", cyl="0"), pd="63")
        assert score_prescription(rx) == 1.0

    def test_sphere_needs_both_eyes(self):
        rx = Prescription(od=EyeValues(sph="-2"), pd="63")
        # Only PD counts.
        assert score_prescription(rx) == 1.0

    def test_mean_of_available_parts(self):
        rx = Prescription(od=EyeValues(sph="-1"), os=EyeValues(sph="-3"), pd="50")
        expected = ((less_is_better(1, 1) + less_is_better(3, 1)) / 2 + in_range(50, 60, 66)) / 2
        assert score_prescription(rx) == pytest.approx(expected)

    def test_unparseable_values_are_ignored(self):
        rx = Prescription(od=EyeValues(sph="abc"), os=EyeValues(sph="-1"))
        assert score_prescription(rx) == 0.0


class TestAcuity:
    def test_chart_has_eleven_lines(self):
        assert len(SNELLEN) == 11
        assert SNELLEN[0].label == "20/160"
        assert SNELLEN[-1].label == "20/16"

    @pytest.mark.parametrize("label,expected", [
        ("20/40", 0.5),
        ("20/20", 1.0),
        ("20/16", 1.0),
        ("20/200", 0.1),
        ("garbage", 0.0),
    ])
    def test_line_to_decimal(self, label, expected):
        assert line_to_decimal(label) == pytest.approx(expected)

    def test_compare_letters_is_positional(self):
        result = compare_letters("e k x", "EKA")
        assert (result.correct, result.total) == (2, 3)
        assert result.accuracy == pytest.approx(2 / 3)

    def test_compare_letters_empty_target(self):
        assert compare_letters("ABC", "").accuracy == 0.0

    def test_smallest_passed_line_wins(self):
        readings = [
            LineReading(line="20/40", letters="HUDKSCRONV"),
            LineReading(line="20/30", letters="OAHVZCKLDB"),  # 10/12 passes
            LineReading(line="20/20", letters="PKV"),  # fails
        ]
        result = grade_acuity(readings)
        assert result.best_line == "20/30"
        assert result.score == pytest.approx(20 / 30)
        assert result.letters_total == 10 + 12 + 19

    def test_no_passed_line_scores_zero(self):
        result = grade_acuity([LineReading(line="20/160", letters="XYZ")])
        assert result.best_line is None
        assert result.score == 0.0

    def test_unknown_lines_are_ignored(self):
        assert grade_acuity([LineReading(line="20/10", letters="ABC")]).letters_total == 0

    def test_spoken_transcript_is_decoded(self):
        result = grade_acuity([LineReading(line="20/160", transcript="echo kilo alpha")])
        assert result.best_line == "20/160"


class TestSpokenLetters:
    def test_nato_words(self):
        assert decode_spoken_letters("Kilo Sierra Romeo November Hotel") == "KSRNH"

    def test_homophones(self):
        assert decode_spoken_letters("see bee tea you why zed") == "CBTUYZ"

    def test_multi_word_letters(self):
        assert decode_spoken_letters("x-ray double u x ray") == "XWX"

    def test_unknown_tokens_kept_as_letters(self):
        assert decode_spoken_letters("ksr, n.") == "KSRN"


class TestOsdi:
    def test_no_answers(self):
        assert score_osdi([]) == 0.0
        assert score_osdi([None] * 12) == 0.0

    def test_best_and_worst(self):
        assert score_osdi([1] * 12) == 1.0
        assert score_osdi([8] * 12) == pytest.approx(1 / 8)

    def test_out_of_range_answers_are_clamped(self):
        assert score_osdi([0, 12]) == pytest.approx((1.0 + 1 / 8) / 2)

    def test_only_answered_items_count(self):
        assert score_osdi([1, None, None]) == 1.0


def test_evaluate_vision_rows():
    rx = Prescription(od=EyeValues(sph="0"), os=EyeValues(sph="0"))
    readings = [LineReading(line="20/20", letters=SNELLEN[9].letters)]
    scores = evaluate_vision(rx, readings, [1] * 12)
    assert scores.overall == pytest.approx(1.0)
    rows = scores.as_topic_rows()
    assert [r["topic"] for r in rows] == ["Vision Wellness", PRESCRIPTION_TOPIC, ACUITY_TOPIC, OSDI_TOPIC]


def test_evaluate_vision_averages_components():
    scores = evaluate_vision(Prescription(), [], [5])
    assert scores.overall == pytest.approx((0 + 0 + 0.5) / 3)
