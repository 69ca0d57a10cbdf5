"""
Trend Classifier

Labels whether consumption is speeding up or slowing down by comparing the
mean level of the older half of the window with the newer half.
"""

from typing import Callable, Optional, Sequence

from fuel_runway.config import FORECAST
from fuel_runway.models.forecast_models import ConsumptionTrend, Reading


def percent_level(reading: Reading) -> float:
    return reading.level_percent if reading.level_percent is not None else 0.0


def classify_trend(
    readings: Sequence[Reading],
    slope: float,
    level_of: Optional[Callable[[Reading], float]] = None,
) -> ConsumptionTrend:
    """
    Classify the consumption trend of a filtered window.

    Args:
        readings: Refill-filtered readings
        slope: Signed regression slope in percent per day
        level_of: Maps a reading to its percent level (default: level_percent, None -> 0)

    Returns:
        ConsumptionTrend

    Rules, in order:
        fewer than 3 readings        -> unknown
        |slope| < 0.5 %/day          -> stable
        second-half mean - first < -5 -> increasing (level falling faster)
        second-half mean - first > 5  -> decreasing (level falling slower)
        otherwise                    -> stable if slope < 0 else unknown

    Examples:
        >>> from datetime import datetime
        >>> t = datetime(2025, 1, 1)
        >>> rs = [Reading(t, p) for p in (90, 85, 60, 50)]
        >>> classify_trend(rs, -12.0).value
        'increasing'
        >>> classify_trend(rs[:2], -12.0).value
        'unknown'
    """
    if len(readings) < FORECAST.MIN_READINGS:
        return ConsumptionTrend.UNKNOWN

    level_of = level_of or percent_level

    mid = len(readings) // 2
    first_half = readings[:mid]
    second_half = readings[mid:]
    first_half_avg = sum(level_of(r) for r in first_half) / len(first_half)
    second_half_avg = sum(level_of(r) for r in second_half) / len(second_half)
    delta = second_half_avg - first_half_avg

    if abs(slope) < FORECAST.STABLE_SLOPE_PCT_PER_DAY:
        return ConsumptionTrend.STABLE
    if delta < -FORECAST.TREND_HALF_DELTA_PCT:
        return ConsumptionTrend.INCREASING
    if delta > FORECAST.TREND_HALF_DELTA_PCT:
        return ConsumptionTrend.DECREASING

    # A rising level with a shallow slope is not a consumption trend
    return ConsumptionTrend.STABLE if slope < 0 else ConsumptionTrend.UNKNOWN
