"""Service layer: the forecasting pipeline stages and the single-tank service."""

from .confidence_scorer import score_confidence
from .domain_selector import is_domain_reliable, select_domain
from .forecast_engine import ForecastEngine
from .forecast_service import ForecastService
from .refill_filter import detect_refill_events, filter_refill_events
from .regression import build_regression_points, linear_regression
from .runway_calculator import calculate_runway, clamp_days_remaining, estimate_empty_date
from .trend_classifier import classify_trend

__all__ = [
    "ForecastEngine",
    "ForecastService",
    "build_regression_points",
    "calculate_runway",
    "clamp_days_remaining",
    "classify_trend",
    "detect_refill_events",
    "estimate_empty_date",
    "filter_refill_events",
    "is_domain_reliable",
    "linear_regression",
    "score_confidence",
    "select_domain",
]
