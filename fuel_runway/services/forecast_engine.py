"""
Forecast Engine

Composes the pipeline stages into one forecast:

    readings -> refill filter -> domain selection -> regression
             -> runway -> trend -> confidence -> ForecastResult

Every stage is a free function in its own module; this class only wires
them together and decides when to short-circuit to the empty result. It
holds no state, does no I/O and is safe to call from many threads at once.

The same engine serves every tank subsystem (AgBot, SmartFill); the
subsystem differences live in the repositories' column mapping and the
tank's refill threshold.

Example Usage:
    engine = ForecastEngine()
    result = engine.run(
        readings=readings,
        context=TankContext(capacity_volume=1000.0, current_level_percent=65.0),
        window_days=7,
    )
    print(result.days_remaining, result.trend, result.confidence)
"""

from datetime import datetime, timezone
from typing import Callable, Optional, Sequence

import structlog

from fuel_runway.config import FORECAST
from fuel_runway.exceptions import InvalidForecastRequest
from fuel_runway.models.forecast_models import (
    ForecastDomain,
    ForecastResult,
    Reading,
    RegressionResult,
    TankContext,
)
from fuel_runway.services.confidence_scorer import score_confidence
from fuel_runway.services.domain_selector import select_domain
from fuel_runway.services.refill_filter import filter_refill_events
from fuel_runway.services.regression import build_regression_points, linear_regression
from fuel_runway.services.runway_calculator import calculate_runway, estimate_empty_date
from fuel_runway.services.trend_classifier import classify_trend, percent_level

logger = structlog.get_logger()


def validate_request(window_days: int, refill_threshold: Optional[float]) -> None:
    """Raise InvalidForecastRequest for arguments no forecast can honor."""
    if window_days <= 0:
        raise InvalidForecastRequest(f"window_days must be positive, got {window_days}")
    if refill_threshold is not None and refill_threshold < 0:
        raise InvalidForecastRequest(
            f"refill_threshold must be non-negative, got {refill_threshold}"
        )


class ForecastEngine:
    """Stateless runway forecasting pipeline."""

    VERSION = "1.0.0"

    def run(
        self,
        readings: Sequence[Reading],
        context: TankContext,
        window_days: int = FORECAST.DEFAULT_WINDOW_DAYS,
        refill_threshold: Optional[float] = None,
        now: Optional[datetime] = None,
    ) -> ForecastResult:
        """
        Forecast a tank's runway from its reading window.

        Args:
            readings: Readings ordered ascending by timestamp
            context: Tank capacity, current level and refill threshold
            window_days: Analysis window that was requested (feeds confidence)
            refill_threshold: Overrides context.refill_jump_threshold_percent
            now: Reference time for estimated_empty_date (default: current UTC time)

        Returns:
            ForecastResult; the empty result when fewer than 3 readings
            survive filtering or no domain is reliable
        """
        validate_request(window_days, refill_threshold)

        if len(readings) < FORECAST.MIN_READINGS:
            return ForecastResult.empty(len(readings))

        threshold = (
            refill_threshold
            if refill_threshold is not None
            else context.refill_jump_threshold_percent
        )
        filtered = filter_refill_events(readings, threshold)

        if len(filtered) < FORECAST.MIN_READINGS:
            return ForecastResult.empty(len(filtered))

        capacity = context.capacity_volume if context.has_capacity else None
        domain = select_domain(filtered, capacity)

        if domain == ForecastDomain.NONE:
            return ForecastResult.empty(len(filtered))

        regression = linear_regression(build_regression_points(filtered, domain))
        current_level = self._resolve_current_level(filtered, context, domain)
        runway = calculate_runway(regression, current_level, capacity, domain)

        trend = classify_trend(
            filtered,
            self._slope_in_percent(regression, domain, capacity),
            self._level_accessor(domain, capacity),
        )
        confidence = score_confidence(len(filtered), regression.r2, window_days)

        now = now or datetime.now(timezone.utc)
        result = ForecastResult(
            daily_consumption_volume=self._round(runway.daily_consumption_volume),
            daily_consumption_percent=self._round(runway.daily_consumption_percent),
            days_remaining=runway.days_remaining,
            estimated_empty_date=estimate_empty_date(runway.days_remaining, now),
            trend=trend,
            confidence=confidence,
            data_points=len(filtered),
            domain=domain,
            r_squared=regression.r2,
        )

        logger.debug(
            "Forecast calculated",
            domain=domain.value,
            slope=round(regression.slope, 4),
            r2=round(regression.r2, 4),
            data_points=result.data_points,
            days_remaining=result.days_remaining,
            trend=trend.value,
            confidence=confidence.value,
        )

        return result

    def _resolve_current_level(
        self,
        readings: Sequence[Reading],
        context: TankContext,
        domain: ForecastDomain,
    ) -> Optional[float]:
        """
        Current level in the primary domain's units.

        Percent: the tank's reported current level, else the newest reading.
        Volume: the newest reading's volume, else the reported percent
        converted through capacity.
        """
        latest = next(
            (
                r.value_in(domain)
                for r in reversed(readings)
                if r.value_in(domain) is not None
            ),
            None,
        )

        if domain == ForecastDomain.PERCENT:
            if context.current_level_percent is not None:
                return context.current_level_percent
            return latest

        if latest is not None:
            return latest
        if context.current_level_percent is not None and context.has_capacity:
            return context.current_level_percent / 100 * context.capacity_volume
        return None

    @staticmethod
    def _slope_in_percent(
        regression: RegressionResult,
        domain: ForecastDomain,
        capacity: Optional[float],
    ) -> float:
        if domain == ForecastDomain.VOLUME and capacity:
            return regression.slope / capacity * 100
        return regression.slope

    @staticmethod
    def _level_accessor(
        domain: ForecastDomain, capacity: Optional[float]
    ) -> Callable[[Reading], float]:
        if domain == ForecastDomain.VOLUME and capacity:
            return lambda r: (r.level_volume or 0.0) / capacity * 100
        return percent_level

    @staticmethod
    def _round(value: Optional[float]) -> Optional[float]:
        if value is None:
            return None
        return round(value, FORECAST.ROUND_DECIMALS)
