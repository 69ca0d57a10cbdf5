"""Confidence Scorer - how far to trust a forecast."""

from fuel_runway.config import FORECAST
from fuel_runway.models.forecast_models import ConfidenceLevel


def score_confidence(data_points: int, r2: float, window_days: int) -> ConfidenceLevel:
    """
    Score a forecast from sample size, fit quality and window length.

    - HIGH: >= 7 points, R² > 0.7, window >= 7 days
    - MEDIUM: >= 5 points, R² > 0.5
    - LOW: everything else

    Examples:
        >>> score_confidence(7, 0.71, 7).value
        'high'
        >>> score_confidence(7, 0.71, 3).value
        'medium'
        >>> score_confidence(4, 1.0, 7).value
        'low'
    """
    if (
        data_points >= FORECAST.HIGH_CONFIDENCE_MIN_POINTS
        and r2 > FORECAST.HIGH_CONFIDENCE_MIN_R2
        and window_days >= FORECAST.HIGH_CONFIDENCE_MIN_WINDOW_DAYS
    ):
        return ConfidenceLevel.HIGH

    if (
        data_points >= FORECAST.MEDIUM_CONFIDENCE_MIN_POINTS
        and r2 > FORECAST.MEDIUM_CONFIDENCE_MIN_R2
    ):
        return ConfidenceLevel.MEDIUM

    return ConfidenceLevel.LOW
