"""
Rate/Runway Calculator

Turns a regression slope into daily consumption (in both percent and
volume when capacity allows) and a days-until-empty runway.
"""

from datetime import date, datetime, timedelta
from typing import Optional

import structlog

from fuel_runway.config import FORECAST
from fuel_runway.models.forecast_models import (
    ForecastDomain,
    RegressionResult,
    RunwayEstimate,
)

logger = structlog.get_logger()


def clamp_days_remaining(days: float) -> float:
    """
    Clamp a runway to [0, MAX_DAYS_REMAINING].

    Examples:
        >>> clamp_days_remaining(900.0)
        365.0
        >>> clamp_days_remaining(-4.2)
        0.0
    """
    return min(max(days, 0.0), FORECAST.MAX_DAYS_REMAINING)


def calculate_runway(
    regression: RegressionResult,
    current_level: Optional[float],
    capacity_volume: Optional[float],
    domain: ForecastDomain,
) -> RunwayEstimate:
    """
    Compute consumption rates and days remaining.

    Args:
        regression: Fit over the primary domain
        current_level: Current level in the primary domain's units (None = unknown)
        capacity_volume: Tank capacity for cross-domain conversion
        domain: Primary domain the regression was run in

    Returns:
        RunwayEstimate; days_remaining is None when the rate is at or below
        RATE_EPSILON or no current level is known
    """
    if domain == ForecastDomain.NONE:
        return RunwayEstimate(None, None, None)

    rate = abs(regression.slope)
    has_capacity = capacity_volume is not None and capacity_volume > 0

    if domain == ForecastDomain.PERCENT:
        percent_rate: Optional[float] = rate
        volume_rate = rate / 100 * capacity_volume if has_capacity else None
    else:
        volume_rate = rate
        percent_rate = rate / capacity_volume * 100 if has_capacity else None

    days_remaining: Optional[float] = None
    if rate > FORECAST.RATE_EPSILON and current_level is not None:
        days_remaining = clamp_days_remaining(current_level / rate)

    logger.debug(
        "Runway calculated",
        domain=domain.value,
        rate=round(rate, 4),
        current_level=current_level,
        days_remaining=days_remaining,
    )

    return RunwayEstimate(
        daily_consumption_percent=percent_rate,
        daily_consumption_volume=volume_rate,
        days_remaining=days_remaining,
    )


def estimate_empty_date(
    days_remaining: Optional[float], now: datetime
) -> Optional[date]:
    """
    Calendar date the tank runs dry.

    None when there is no runway or the runway hit the clamp (a clamped
    value is a floor, not a prediction).

    Examples:
        >>> estimate_empty_date(13.0, datetime(2025, 3, 1, 8, 0))
        datetime.date(2025, 3, 14)
        >>> estimate_empty_date(365.0, datetime(2025, 3, 1)) is None
        True
    """
    if days_remaining is None or days_remaining >= FORECAST.MAX_DAYS_REMAINING:
        return None
    return (now + timedelta(days=days_remaining)).date()
