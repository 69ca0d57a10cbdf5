"""
Domain Reliability Selector

Field devices do not always report both levels. Some report percent as 0
while the volume channel is fine, others never send volume at all. This
module decides which unit space the regression can trust.
"""

from typing import Optional, Sequence

import structlog

from fuel_runway.config import FORECAST
from fuel_runway.models.forecast_models import ForecastDomain, Reading

logger = structlog.get_logger()


def is_domain_reliable(
    readings: Sequence[Reading],
    domain: ForecastDomain,
    min_ratio: float = FORECAST.RELIABILITY_RATIO,
) -> bool:
    """
    True when at least `min_ratio` of readings carry a non-null, non-zero
    value in `domain`.

    Examples:
        >>> from datetime import datetime
        >>> t = datetime(2025, 1, 1)
        >>> rs = [Reading(t, 0.0, 500.0), Reading(t, 0.0, 490.0), Reading(t, 50.0)]
        >>> is_domain_reliable(rs, ForecastDomain.PERCENT)
        False
        >>> is_domain_reliable(rs, ForecastDomain.VOLUME)
        True
    """
    if not readings or domain == ForecastDomain.NONE:
        return False

    valid_count = 0
    for reading in readings:
        value = reading.value_in(domain)
        if value is not None and value != 0:
            valid_count += 1

    return valid_count / len(readings) >= min_ratio


def select_domain(
    readings: Sequence[Reading],
    capacity_volume: Optional[float] = None,
) -> ForecastDomain:
    """
    Pick the primary rate domain for a reading window.

    Percent wins whenever it is reliable. Volume is a fallback only when
    percent is unreliable, volume is reliable, and a positive capacity is
    known (needed to report the rate back in percent).

    Args:
        readings: Refill-filtered readings
        capacity_volume: Tank capacity; None or <= 0 disables the volume fallback

    Returns:
        ForecastDomain.PERCENT, ForecastDomain.VOLUME or ForecastDomain.NONE
    """
    if is_domain_reliable(readings, ForecastDomain.PERCENT):
        return ForecastDomain.PERCENT

    has_capacity = capacity_volume is not None and capacity_volume > 0
    if has_capacity and is_domain_reliable(readings, ForecastDomain.VOLUME):
        logger.debug(
            "Percent data unreliable, using volume domain",
            readings=len(readings),
        )
        return ForecastDomain.VOLUME

    logger.debug("No reliable consumption domain", readings=len(readings))
    return ForecastDomain.NONE
