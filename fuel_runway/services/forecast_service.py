"""
Forecast Service

Single-tank entry point: fetches the tank's context and reading window from
the collaborators, then runs the ForecastEngine.

Collaborators are duck-typed:

    reading_source.fetch_readings(tank_id, window_days) -> List[Reading]
    tank_source.fetch_tank_context(tank_id) -> Optional[TankContext]

Collaborator failures are re-raised as CollaboratorError with the original
exception chained; data-quality problems come back as the empty result.
"""

from datetime import datetime, timezone
from typing import Any, Callable, List, Optional

import structlog

from fuel_runway.config import FORECAST
from fuel_runway.exceptions import CollaboratorError
from fuel_runway.models.forecast_models import ForecastResult, Reading, TankContext
from fuel_runway.services.forecast_engine import ForecastEngine, validate_request
from fuel_runway.services.refill_filter import detect_refill_events

logger = structlog.get_logger()


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ForecastService:
    """
    Forecast one tank from its stored history.

    Example Usage:
        service = ForecastService(readings_repo, tank_repo)
        result = service.forecast("tank-42", window_days=14)
    """

    def __init__(
        self,
        reading_source: Any,
        tank_source: Any,
        engine: Optional[ForecastEngine] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        Args:
            reading_source: Provides fetch_readings(tank_id, window_days)
            tank_source: Provides fetch_tank_context(tank_id)
            engine: Optional ForecastEngine (will create if None)
            clock: Returns "now" for estimated_empty_date (default: UTC now)
        """
        self.reading_source = reading_source
        self.tank_source = tank_source
        self.engine = engine or ForecastEngine()
        self.clock = clock or _utc_now

    def forecast(
        self,
        tank_id: str,
        window_days: int = FORECAST.DEFAULT_WINDOW_DAYS,
        refill_threshold: Optional[float] = None,
    ) -> ForecastResult:
        """
        Forecast the runway of a single tank.

        Args:
            tank_id: Tank identifier
            window_days: Days of history to analyze
            refill_threshold: Refill jump threshold in percent points
                (None = the tank's own threshold, 10.0 unless configured)

        Returns:
            ForecastResult

        Raises:
            InvalidForecastRequest: window_days <= 0 or negative threshold
            CollaboratorError: context or reading fetch failed
        """
        validate_request(window_days, refill_threshold)

        context = self._fetch_context(tank_id)
        readings = self._fetch_readings(tank_id, window_days)

        result = self.engine.run(
            readings,
            context,
            window_days=window_days,
            refill_threshold=refill_threshold,
            now=self.clock(),
        )

        logger.info(
            "Tank forecast complete",
            tank_id=tank_id,
            readings=len(readings),
            data_points=result.data_points,
            days_remaining=result.display_days_remaining,
            confidence=result.confidence.value,
        )
        return result

    def detect_refill_events(
        self,
        tank_id: str,
        days: int = FORECAST.DEFAULT_WINDOW_DAYS,
        threshold: Optional[float] = None,
    ) -> List[Reading]:
        """
        List the refill readings in a tank's recent history.

        Args:
            tank_id: Tank identifier
            days: Days of history to scan
            threshold: Minimum rise in percent points (None = tank's threshold)

        Returns:
            Readings that mark a refill, oldest first
        """
        validate_request(days, threshold)

        if threshold is None:
            threshold = self._fetch_context(tank_id).refill_jump_threshold_percent

        readings = self._fetch_readings(tank_id, days)
        refills = detect_refill_events(readings, threshold)

        logger.debug(
            "Refill events detected",
            tank_id=tank_id,
            refills=len(refills),
            threshold=threshold,
        )
        return refills

    def _fetch_context(self, tank_id: str) -> TankContext:
        try:
            context = self.tank_source.fetch_tank_context(tank_id)
        except Exception as e:
            raise CollaboratorError(tank_id, "fetch_tank_context", str(e)) from e

        if context is None:
            raise CollaboratorError(tank_id, "fetch_tank_context", "tank not found")
        return context

    def _fetch_readings(self, tank_id: str, window_days: int) -> List[Reading]:
        try:
            return list(self.reading_source.fetch_readings(tank_id, window_days))
        except Exception as e:
            raise CollaboratorError(tank_id, "fetch_readings", str(e)) from e
