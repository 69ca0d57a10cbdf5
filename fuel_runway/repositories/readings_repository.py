"""
Readings Repository - Database access for tank level history

Table and column names come from the tank system profile (AgBot and
SmartFill store the same facts under different names).
"""

from datetime import datetime, timedelta
from typing import Any, Callable, List, Mapping, Optional
import logging

from sqlalchemy import text
from sqlalchemy.engine import Engine

from fuel_runway.config import TankSystemProfile
from fuel_runway.database_pool import utc_now_naive
from fuel_runway.models.forecast_models import Reading

logger = logging.getLogger(__name__)


def _optional_float(value: Any) -> Optional[float]:
    return float(value) if value is not None else None


class ReadingsRepository:
    """Repository for reading-window access."""

    def __init__(
        self,
        engine: Engine,
        profile: TankSystemProfile,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.engine = engine
        self.profile = profile
        self.clock = clock or utc_now_naive
        logger.info(f"ReadingsRepository initialized for {profile.name} ({profile.readings_table})")

    def fetch_readings(self, tank_id: str, window_days: int) -> List[Reading]:
        """Get readings for the last window_days, oldest first."""
        p = self.profile
        refill_select = (
            f", {p.refill_flag_column} AS is_refill" if p.refill_flag_column else ""
        )
        query = text(f"""
            SELECT
                {p.reading_time_column} AS reading_at,
                {p.percent_column} AS level_percent,
                {p.volume_column} AS level_volume
                {refill_select}
            FROM {p.readings_table}
            WHERE {p.reading_tank_column} = :tank_id
              AND {p.reading_time_column} >= :cutoff
            ORDER BY {p.reading_time_column} ASC
        """)
        cutoff = self.clock() - timedelta(days=window_days)

        with self.engine.connect() as conn:
            rows = conn.execute(query, {"tank_id": tank_id, "cutoff": cutoff}).mappings().all()

        readings = [self._row_to_reading(row) for row in rows]
        logger.debug(f"Fetched {len(readings)} readings for {p.name} tank {tank_id}")
        return readings

    @staticmethod
    def _row_to_reading(row: Mapping[str, Any]) -> Reading:
        return Reading(
            timestamp=row["reading_at"],
            level_percent=_optional_float(row["level_percent"]),
            level_volume=_optional_float(row["level_volume"]),
            is_refill=bool(row.get("is_refill") or False),
        )
