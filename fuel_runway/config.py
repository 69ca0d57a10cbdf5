"""
Fuel Runway Configuration

Centralized constants for the forecasting pipeline, database connection
settings, and the per-subsystem tank profiles (AgBot, SmartFill).

Database settings come from the environment; a .env file next to the
project root is loaded first. Tank system profiles can be overridden with
a tank_systems.yaml file.
"""

import logging
import os
import re
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from dotenv import load_dotenv

env_path = Path(__file__).resolve().parent.parent / ".env"
if env_path.exists():
    load_dotenv(env_path)

logger = logging.getLogger(__name__)

_IDENTIFIER_RE = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_.]*$")


@dataclass(frozen=True)
class ForecastConfig:
    """Forecasting pipeline constants"""

    # Analysis window (days back from now)
    DEFAULT_WINDOW_DAYS: int = 7

    # A rise above this many percent points between consecutive readings is a refill
    REFILL_THRESHOLD_PCT: float = 10.0

    # Minimum readings after refill filtering to emit a forecast
    MIN_READINGS: int = 3

    # Minimum points for a regression
    MIN_REGRESSION_POINTS: int = 2

    # Share of readings that must carry a non-zero value for a domain to be trusted
    RELIABILITY_RATIO: float = 0.5

    # Rates at or below this (units/day) are treated as no consumption
    RATE_EPSILON: float = 0.1

    # Runway clamp (days)
    MAX_DAYS_REMAINING: float = 365.0

    # Trend classification
    STABLE_SLOPE_PCT_PER_DAY: float = 0.5
    TREND_HALF_DELTA_PCT: float = 5.0

    # Confidence thresholds
    HIGH_CONFIDENCE_MIN_POINTS: int = 7
    HIGH_CONFIDENCE_MIN_R2: float = 0.7
    HIGH_CONFIDENCE_MIN_WINDOW_DAYS: int = 7
    MEDIUM_CONFIDENCE_MIN_POINTS: int = 5
    MEDIUM_CONFIDENCE_MIN_R2: float = 0.5

    # Published consumption figures are rounded to this many decimals
    ROUND_DECIMALS: int = 2


@dataclass(frozen=True)
class DatabaseConfig:
    """MySQL database configuration"""

    HOST: str = os.getenv("RUNWAY_DB_HOST", "localhost")
    PORT: int = int(os.getenv("RUNWAY_DB_PORT", "3306"))
    USER: str = os.getenv("RUNWAY_DB_USER", "fuel_admin")
    PASSWORD: str = os.getenv("RUNWAY_DB_PASSWORD", "")  # Required - set via environment
    DATABASE: str = os.getenv("RUNWAY_DB_NAME", "fuel_monitoring")
    CHARSET: str = "utf8mb4"

    # Connection pool settings; the batch worker pool is sized from POOL_SIZE
    POOL_SIZE: int = int(os.getenv("RUNWAY_DB_POOL_SIZE", "8"))
    MAX_OVERFLOW: int = 4
    POOL_RECYCLE: int = 1800  # 30 min in seconds
    POOL_TIMEOUT: int = 30

    @property
    def url(self) -> str:
        return (
            f"mysql+pymysql://{self.USER}:{self.PASSWORD}@"
            f"{self.HOST}:{self.PORT}/{self.DATABASE}"
            f"?charset={self.CHARSET}"
        )


@dataclass(frozen=True)
class TankSystemProfile:
    """
    Table/column mapping for one tank-monitoring subsystem.

    The engine is the same for every subsystem; only where readings live
    and what the columns are called differs.
    """

    name: str

    # Readings table
    readings_table: str
    reading_tank_column: str
    reading_time_column: str
    percent_column: str
    volume_column: str

    # Tanks table
    tanks_table: str
    tank_id_column: str
    capacity_column: str
    current_level_column: str
    consumption_column: str
    days_remaining_column: str
    updated_at_column: str = "updated_at"

    # Optional columns (None = subsystem does not have them)
    refill_flag_column: Optional[str] = None
    customer_column: Optional[str] = None
    active_column: Optional[str] = None
    empty_date_column: Optional[str] = None
    trend_column: Optional[str] = None
    confidence_column: Optional[str] = None

    refill_threshold_pct: float = 10.0

    def __post_init__(self):
        for f in fields(self):
            value = getattr(self, f.name)
            if f.name in ("name", "refill_threshold_pct") or value is None:
                continue
            if not _IDENTIFIER_RE.match(value):
                raise ValueError(
                    f"Invalid identifier '{value}' for {self.name}.{f.name}. "
                    f"Only alphanumeric, underscore, and dot allowed."
                )


# No active filter: offline assets are still recalculated so their runway
# does not go stale.
AGBOT_PROFILE = TankSystemProfile(
    name="agbot",
    readings_table="ta_agbot_readings",
    reading_tank_column="asset_id",
    reading_time_column="reading_at",
    percent_column="level_percent",
    volume_column="level_liters",
    tanks_table="ta_agbot_assets",
    tank_id_column="id",
    capacity_column="capacity_liters",
    current_level_column="current_level_percent",
    consumption_column="daily_consumption_liters",
    days_remaining_column="days_remaining",
)

SMARTFILL_PROFILE = TankSystemProfile(
    name="smartfill",
    readings_table="ta_smartfill_readings",
    reading_tank_column="tank_id",
    reading_time_column="reading_at",
    percent_column="volume_percent",
    volume_column="volume",
    tanks_table="ta_smartfill_tanks",
    tank_id_column="id",
    capacity_column="capacity",
    current_level_column="current_volume_percent",
    consumption_column="avg_daily_consumption",
    days_remaining_column="days_remaining",
    refill_flag_column="is_refill",
    customer_column="customer_id",
    active_column="is_active",
    empty_date_column="estimated_empty_date",
    trend_column="consumption_trend",
)

DEFAULT_TANK_SYSTEMS: Dict[str, TankSystemProfile] = {
    AGBOT_PROFILE.name: AGBOT_PROFILE,
    SMARTFILL_PROFILE.name: SMARTFILL_PROFILE,
}


def load_tank_systems(
    path: Optional[Union[str, Path]] = None,
) -> Dict[str, TankSystemProfile]:
    """
    Load tank system profiles, applying overrides from tank_systems.yaml.

    YAML layout:

        systems:
          smartfill:
            refill_threshold_pct: 15.0
          my_new_system:
            readings_table: ...
            ...

    Entries naming a built-in profile override only the keys given;
    new names must supply every required field.

    Args:
        path: YAML file path (default: RUNWAY_TANK_SYSTEMS env or ./tank_systems.yaml)

    Returns:
        Dict of profile name -> TankSystemProfile
    """
    systems = dict(DEFAULT_TANK_SYSTEMS)

    if path is None:
        path = os.getenv("RUNWAY_TANK_SYSTEMS", "tank_systems.yaml")
    yaml_path = Path(path)
    if not yaml_path.exists():
        logger.debug(f"No tank systems file at {yaml_path}, using built-in profiles")
        return systems

    with open(yaml_path, "r", encoding="utf-8") as f:
        raw: Dict[str, Any] = yaml.safe_load(f) or {}

    for name, overrides in (raw.get("systems") or {}).items():
        overrides = dict(overrides or {})
        overrides.pop("name", None)
        if name in systems:
            systems[name] = replace(systems[name], **overrides)
        else:
            systems[name] = TankSystemProfile(name=name, **overrides)

    logger.info(f"Loaded {len(systems)} tank system profiles from {yaml_path}")
    return systems


FORECAST = ForecastConfig()
DATABASE = DatabaseConfig()
