"""Pydantic models and value objects for the forecasting pipeline."""

from .forecast_models import (
    ConfidenceLevel,
    ConsumptionTrend,
    ForecastDomain,
    ForecastResult,
    Reading,
    RecalculationSummary,
    RegressionPoint,
    RegressionResult,
    RunwayEstimate,
    TankContext,
    TankForecast,
)

__all__ = [
    "ConfidenceLevel",
    "ConsumptionTrend",
    "ForecastDomain",
    "ForecastResult",
    "Reading",
    "RecalculationSummary",
    "RegressionPoint",
    "RegressionResult",
    "RunwayEstimate",
    "TankContext",
    "TankForecast",
]
