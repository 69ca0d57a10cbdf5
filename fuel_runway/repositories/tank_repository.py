"""
Tank Repository - Database access for tank facts and forecast persistence

Serves as both the tank context source and the persistence sink for the
batch orchestrator. persist() is an UPDATE keyed by tank id, so running it
twice with the same result leaves the row unchanged apart from updated_at.
"""

from typing import Any, Dict, List, Optional
import logging

from sqlalchemy import text
from sqlalchemy.engine import Engine

from fuel_runway.config import TankSystemProfile
from fuel_runway.database_pool import get_connection, utc_now_naive
from fuel_runway.models.forecast_models import ForecastResult, TankContext

logger = logging.getLogger(__name__)


class TankRepository:
    """Repository for tank rows."""

    def __init__(self, engine: Engine, profile: TankSystemProfile):
        self.engine = engine
        self.profile = profile
        logger.info(f"TankRepository initialized for {profile.name} ({profile.tanks_table})")

    def fetch_tank_context(self, tank_id: str) -> Optional[TankContext]:
        """Get capacity and current level for a tank (None if unknown)."""
        p = self.profile
        query = text(f"""
            SELECT
                {p.capacity_column} AS capacity_volume,
                {p.current_level_column} AS current_level_percent
            FROM {p.tanks_table}
            WHERE {p.tank_id_column} = :tank_id
            LIMIT 1
        """)

        with self.engine.connect() as conn:
            row = conn.execute(query, {"tank_id": tank_id}).mappings().first()

        if row is None:
            logger.warning(f"Tank {tank_id} not found in {p.tanks_table}")
            return None

        capacity = row["capacity_volume"]
        current = row["current_level_percent"]
        return TankContext(
            capacity_volume=float(capacity) if capacity is not None else None,
            current_level_percent=float(current) if current is not None else None,
            refill_jump_threshold_percent=p.refill_threshold_pct,
        )

    def list_tank_ids(self, customer_id: Optional[str] = None) -> List[str]:
        """Get ids of active tanks, optionally for one customer."""
        p = self.profile
        conditions = []
        params: Dict[str, Any] = {}

        if p.active_column:
            conditions.append(f"{p.active_column} = :active")
            params["active"] = True

        if customer_id is not None:
            if not p.customer_column:
                raise ValueError(f"Tank system '{p.name}' has no customer column")
            conditions.append(f"{p.customer_column} = :customer_id")
            params["customer_id"] = customer_id

        where = f"WHERE {' AND '.join(conditions)}" if conditions else ""
        query = text(f"""
            SELECT {p.tank_id_column} AS tank_id
            FROM {p.tanks_table}
            {where}
            ORDER BY {p.tank_id_column}
        """)

        with self.engine.connect() as conn:
            rows = conn.execute(query, params).mappings().all()

        tank_ids = [str(row["tank_id"]) for row in rows]
        logger.debug(f"Found {len(tank_ids)} active {p.name} tanks")
        return tank_ids

    def persist(self, tank_id: str, result: ForecastResult) -> None:
        """Write a forecast onto the tank row."""
        p = self.profile
        assignments = [
            f"{p.consumption_column} = :daily_consumption",
            f"{p.days_remaining_column} = :days_remaining",
            f"{p.updated_at_column} = :updated_at",
        ]
        params: Dict[str, Any] = {
            "tank_id": tank_id,
            "daily_consumption": result.daily_consumption_volume,
            "days_remaining": result.display_days_remaining,
            "updated_at": utc_now_naive(),
        }

        if p.empty_date_column:
            assignments.append(f"{p.empty_date_column} = :empty_date")
            params["empty_date"] = result.estimated_empty_date
        if p.trend_column:
            assignments.append(f"{p.trend_column} = :trend")
            params["trend"] = result.trend.value
        if p.confidence_column:
            assignments.append(f"{p.confidence_column} = :confidence")
            params["confidence"] = result.confidence.value

        query = text(f"""
            UPDATE {p.tanks_table}
            SET {', '.join(assignments)}
            WHERE {p.tank_id_column} = :tank_id
        """)

        with get_connection(self.engine) as conn:
            conn.execute(query, params)

        logger.debug(f"Persisted forecast for {p.name} tank {tank_id}")
