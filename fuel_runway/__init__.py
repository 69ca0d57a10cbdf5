"""
Fuel Runway - tank consumption and days-until-empty forecasting.

    from fuel_runway import ForecastEngine, Reading, TankContext

    result = ForecastEngine().run(readings, TankContext(capacity_volume=1000.0))
"""

from fuel_runway.exceptions import CollaboratorError, ForecastError, InvalidForecastRequest
from fuel_runway.models import (
    ConfidenceLevel,
    ConsumptionTrend,
    ForecastDomain,
    ForecastResult,
    Reading,
    RecalculationSummary,
    TankContext,
    TankForecast,
)
from fuel_runway.services import ForecastEngine, ForecastService

__version__ = "1.0.0"

__all__ = [
    "CollaboratorError",
    "ConfidenceLevel",
    "ConsumptionTrend",
    "ForecastDomain",
    "ForecastEngine",
    "ForecastError",
    "ForecastResult",
    "ForecastService",
    "InvalidForecastRequest",
    "Reading",
    "RecalculationSummary",
    "TankContext",
    "TankForecast",
]
