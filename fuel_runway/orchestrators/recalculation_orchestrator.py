"""
Recalculation Orchestrator

Batch side of the runway engine: forecasts every active tank of a tank
system and writes the result back onto the tank row.

Per-tank work runs on a bounded ThreadPoolExecutor. The worker count comes
from the database pool size, since each tank holds a connection while it
fetches its context and readings. One tank failing (fetch, bad data,
persist) is logged and counted; it never stops the batch.

Collaborators (duck-typed):

    forecast_service.forecast(tank_id, window_days, refill_threshold) -> ForecastResult
    tank_source.list_tank_ids(customer_id=None) -> List[str]
    sink.persist(tank_id, ForecastResult) -> None
"""

from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional
import logging
import threading

from fuel_runway.config import DATABASE, FORECAST
from fuel_runway.models.forecast_models import RecalculationSummary, TankForecast

logger = logging.getLogger(__name__)


@dataclass
class OrchestratorConfig:
    """Configuration for RecalculationOrchestrator."""

    window_days: int = FORECAST.DEFAULT_WINDOW_DAYS
    max_workers: int = field(default_factory=lambda: DATABASE.POOL_SIZE)
    refill_threshold: Optional[float] = None


class RecalculationOrchestrator:
    """
    Recalculate and persist runway forecasts for many tanks.

    Example Usage:
        orchestrator = RecalculationOrchestrator(service, tank_repo, tank_repo)
        summary = orchestrator.recalculate_all(window_days=7)
        print(summary.to_dict())  # {"processed": 120, "updated": 118, "failed": 2}
    """

    VERSION = "1.0.0"

    def __init__(
        self,
        forecast_service: Any,
        tank_source: Any,
        sink: Any,
        config: Optional[OrchestratorConfig] = None,
    ):
        """
        Args:
            forecast_service: Provides forecast(tank_id, window_days, refill_threshold)
            tank_source: Provides list_tank_ids(customer_id=None)
            sink: Provides persist(tank_id, result)
            config: Optional OrchestratorConfig (will use defaults if None)
        """
        self.forecast_service = forecast_service
        self.tank_source = tank_source
        self.sink = sink
        self.config = config or OrchestratorConfig()

        if self.config.max_workers < 1:
            raise ValueError(f"max_workers must be >= 1, got {self.config.max_workers}")

        logger.info(
            f"RecalculationOrchestrator v{self.VERSION} initialized "
            f"(workers={self.config.max_workers})"
        )

    def recalculate_all(
        self,
        window_days: Optional[int] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> RecalculationSummary:
        """
        Recalculate every tank the tank source lists.

        Args:
            window_days: Days of history per tank (None = config default)
            cancel_event: Once set, tanks that have not started yet are skipped

        Returns:
            RecalculationSummary (all zeros if the tank list cannot be read)
        """
        try:
            tank_ids = self.tank_source.list_tank_ids()
        except Exception as e:
            logger.error(f"Could not list tanks for recalculation: {e}", exc_info=True)
            return RecalculationSummary()

        return self.recalculate_tanks(tank_ids, window_days, cancel_event)

    def recalculate_tanks(
        self,
        tank_ids: Iterable[str],
        window_days: Optional[int] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> RecalculationSummary:
        """
        Recalculate and persist an explicit list of tanks.

        Args:
            tank_ids: Tanks to process
            window_days: Days of history per tank (None = config default)
            cancel_event: Once set, tanks that have not started yet are skipped

        Returns:
            RecalculationSummary with processed/updated/failed counts
        """
        window = window_days if window_days is not None else self.config.window_days
        summary = RecalculationSummary()
        skipped = 0

        with ThreadPoolExecutor(
            max_workers=self.config.max_workers, thread_name_prefix="TankWorker"
        ) as executor:
            futures: Dict[Future, str] = {}

            for tank_id in tank_ids:
                if cancel_event is not None and cancel_event.is_set():
                    break
                future = executor.submit(self._recalculate_one, tank_id, window, cancel_event)
                futures[future] = tank_id

            for future in as_completed(futures):
                tank_id = futures[future]
                try:
                    started = future.result()
                except Exception as e:
                    logger.error(f"[{tank_id}] Recalculation failed: {e}", exc_info=True)
                    summary.processed += 1
                    summary.failed += 1
                    continue

                if started:
                    summary.processed += 1
                    summary.updated += 1
                else:
                    skipped += 1

        if cancel_event is not None and cancel_event.is_set():
            logger.warning(
                f"Recalculation cancelled after {summary.processed} tanks "
                f"({skipped} queued tanks skipped)"
            )

        logger.info(
            f"Recalculation done: {summary.processed} processed, "
            f"{summary.updated} updated, {summary.failed} failed"
        )
        return summary

    def forecast_for_customer(
        self,
        customer_id: str,
        window_days: Optional[int] = None,
    ) -> List[TankForecast]:
        """
        Forecast a customer's active tanks without persisting anything.

        Tanks whose forecast fails are logged and left out of the list.

        Args:
            customer_id: Customer whose tanks to forecast
            window_days: Days of history per tank (None = config default)

        Returns:
            List of TankForecast, in tank-list order (empty if the
            customer's tanks cannot be listed)
        """
        window = window_days if window_days is not None else self.config.window_days

        try:
            tank_ids = self.tank_source.list_tank_ids(customer_id=customer_id)
        except Exception as e:
            logger.error(f"Could not list tanks for customer {customer_id}: {e}", exc_info=True)
            return []

        forecasts: List[TankForecast] = []
        with ThreadPoolExecutor(
            max_workers=self.config.max_workers, thread_name_prefix="TankWorker"
        ) as executor:
            futures = [
                (tank_id, executor.submit(self._forecast_one, tank_id, window))
                for tank_id in tank_ids
            ]

            for tank_id, future in futures:
                try:
                    forecasts.append(TankForecast(tank_id=tank_id, result=future.result()))
                except Exception as e:
                    logger.error(f"[{tank_id}] Forecast failed: {e}", exc_info=True)

        logger.info(
            f"Customer {customer_id}: {len(forecasts)}/{len(futures)} tanks forecast"
        )
        return forecasts

    def _forecast_one(self, tank_id: str, window_days: int):
        return self.forecast_service.forecast(
            tank_id,
            window_days=window_days,
            refill_threshold=self.config.refill_threshold,
        )

    def _recalculate_one(
        self,
        tank_id: str,
        window_days: int,
        cancel_event: Optional[threading.Event] = None,
    ) -> bool:
        """Forecast and persist one tank. False if cancelled before starting."""
        if cancel_event is not None and cancel_event.is_set():
            return False

        result = self._forecast_one(tank_id, window_days)
        self.sink.persist(tank_id, result)
        logger.debug(
            f"[{tank_id}] {result.display_days_remaining} days remaining "
            f"({result.confidence.value} confidence)"
        )
        return True
