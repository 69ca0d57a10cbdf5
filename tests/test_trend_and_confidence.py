"""
Tests for trend classification and confidence scoring
"""

import pytest

from fuel_runway.models import ConfidenceLevel, ConsumptionTrend
from fuel_runway.services.confidence_scorer import score_confidence
from fuel_runway.services.trend_classifier import classify_trend
from tests.conftest import make_readings


class TestClassifyTrend:
    """Half-window level comparison"""

    def test_fewer_than_three_readings_unknown(self):
        readings = make_readings([80.0, 60.0])

        assert classify_trend(readings, -20.0) == ConsumptionTrend.UNKNOWN

    def test_shallow_slope_is_stable(self):
        readings = make_readings([80.0, 60.0, 40.0, 20.0])

        assert classify_trend(readings, -0.4) == ConsumptionTrend.STABLE

    def test_level_dropping_faster_is_increasing(self):
        readings = make_readings([80.0, 75.0, 70.0, 65.0])

        # first half 77.5, second half 67.5
        assert classify_trend(readings, -5.0) == ConsumptionTrend.INCREASING

    def test_level_rising_across_halves_is_decreasing(self):
        readings = make_readings([40.0, 42.0, 50.0, 52.0])

        assert classify_trend(readings, 4.0) == ConsumptionTrend.DECREASING

    def test_small_delta_negative_slope_is_stable(self):
        readings = make_readings([50.0, 49.0, 48.0, 47.0])

        assert classify_trend(readings, -1.0) == ConsumptionTrend.STABLE

    def test_small_delta_positive_slope_is_unknown(self):
        readings = make_readings([47.0, 48.0, 49.0, 50.0])

        assert classify_trend(readings, 1.0) == ConsumptionTrend.UNKNOWN

    def test_odd_count_puts_middle_reading_in_second_half(self):
        # mid = 1: first half [80], second half [74, 73] -> delta -6.5
        readings = make_readings([80.0, 74.0, 73.0])

        assert classify_trend(readings, -3.5) == ConsumptionTrend.INCREASING

    def test_custom_level_accessor(self):
        readings = make_readings([0.0, 0.0, 0.0, 0.0], [800.0, 750.0, 700.0, 650.0])

        trend = classify_trend(readings, -5.0, lambda r: r.level_volume / 1000.0 * 100)

        assert trend == ConsumptionTrend.INCREASING


class TestScoreConfidence:

    @pytest.mark.parametrize(
        "points,r2,window,expected",
        [
            (7, 0.71, 7, ConfidenceLevel.HIGH),
            (30, 0.99, 14, ConfidenceLevel.HIGH),
            (7, 0.70, 7, ConfidenceLevel.MEDIUM),
            (7, 0.9, 6, ConfidenceLevel.MEDIUM),
            (5, 0.51, 1, ConfidenceLevel.MEDIUM),
            (5, 0.50, 7, ConfidenceLevel.LOW),
            (4, 1.0, 7, ConfidenceLevel.LOW),
            (0, 0.0, 7, ConfidenceLevel.LOW),
        ],
    )
    def test_levels(self, points, r2, window, expected):
        assert score_confidence(points, r2, window) == expected
