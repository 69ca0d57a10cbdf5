"""
Least-Squares Regression Engine

Ordinary least squares of level against time (days since the first reading
of the window). The slope is the signed rate in the domain's units per day;
R² says how much of the variance the straight line explains.

Degenerate inputs (no time spread, flat level, fewer than two points) give
slope 0 and R² 0 rather than raising.
"""

from typing import List, Sequence

from fuel_runway.config import FORECAST
from fuel_runway.models.forecast_models import (
    ForecastDomain,
    Reading,
    RegressionPoint,
    RegressionResult,
)

SECONDS_PER_DAY = 86400.0


def build_regression_points(
    readings: Sequence[Reading], domain: ForecastDomain
) -> List[RegressionPoint]:
    """
    Convert a reading window into (days, value) points.

    x is measured from the first reading of the window even when that
    reading has no value in `domain`; readings without a value are skipped.

    Examples:
        >>> from datetime import datetime, timedelta
        >>> t0 = datetime(2025, 1, 1)
        >>> rs = [Reading(t0, 80.0), Reading(t0 + timedelta(hours=12), None),
        ...       Reading(t0 + timedelta(days=1), 75.0)]
        >>> [(p.x, p.y) for p in build_regression_points(rs, ForecastDomain.PERCENT)]
        [(0.0, 80.0), (1.0, 75.0)]
    """
    if not readings:
        return []

    first_time = readings[0].timestamp
    points: List[RegressionPoint] = []

    for reading in readings:
        value = reading.value_in(domain)
        if value is None:
            continue
        days = (reading.timestamp - first_time).total_seconds() / SECONDS_PER_DAY
        points.append(RegressionPoint(x=days, y=float(value)))

    return points


def linear_regression(points: Sequence[RegressionPoint]) -> RegressionResult:
    """
    Fit y = a + slope * x by ordinary least squares.

        slope = Sxy / Sxx
        r2    = Sxy² / (Sxx * Syy)

    Args:
        points: Regression points

    Returns:
        RegressionResult(slope, r2); (0, 0) when fewer than two points,
        slope 0 when Sxx == 0, r2 0 when Sxx == 0 or Syy == 0

    Examples:
        >>> pts = [RegressionPoint(float(x), y) for x, y in enumerate([80, 75, 70, 65])]
        >>> linear_regression(pts)
        RegressionResult(slope=-5.0, r2=1.0)
    """
    if len(points) < FORECAST.MIN_REGRESSION_POINTS:
        return RegressionResult(slope=0.0, r2=0.0)

    n = len(points)
    mean_x = sum(p.x for p in points) / n
    mean_y = sum(p.y for p in points) / n

    sxy = 0.0
    sxx = 0.0
    syy = 0.0
    for p in points:
        dx = p.x - mean_x
        dy = p.y - mean_y
        sxy += dx * dy
        sxx += dx * dx
        syy += dy * dy

    if sxx == 0:
        return RegressionResult(slope=0.0, r2=0.0)

    slope = sxy / sxx
    r2 = 0.0 if syy == 0 else (sxy * sxy) / (sxx * syy)

    # Guard against 1.0000000000000002
    r2 = min(max(r2, 0.0), 1.0)

    return RegressionResult(slope=slope, r2=r2)
