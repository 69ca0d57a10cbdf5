"""
Forecast Data Models
====================

Value objects flowing through the runway forecasting pipeline:
readings in, regression/runway intermediates, ForecastResult out.

Reading-side types are frozen dataclasses (cheap to build by the thousand
from DB rows). ForecastResult is a frozen Pydantic model so it validates
its own invariants and serializes cleanly for persistence.

Author: Fleet Analytics Team
Version: 1.0.0
"""

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


# ══════════════════════════════════════════════════════════════════════════════
# ENUMS
# ══════════════════════════════════════════════════════════════════════════════


class ForecastDomain(str, Enum):
    """Unit space the regression runs in"""
    PERCENT = "percent"
    VOLUME = "volume"
    NONE = "none"


class ConsumptionTrend(str, Enum):
    """Direction of the consumption rate over the analysis window"""
    INCREASING = "increasing"  # Level falling faster in the recent half
    DECREASING = "decreasing"  # Level falling slower in the recent half
    STABLE = "stable"
    UNKNOWN = "unknown"


class ConfidenceLevel(str, Enum):
    """Qualitative trust label for a forecast"""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


# ══════════════════════════════════════════════════════════════════════════════
# INPUTS
# ══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class Reading:
    """
    A single tank level sample.

    Either level may be missing depending on what the field device reports.
    is_refill is set by ingestion when the device itself flagged a delivery.
    """
    timestamp: datetime
    level_percent: Optional[float] = None
    level_volume: Optional[float] = None
    is_refill: bool = False

    def value_in(self, domain: ForecastDomain) -> Optional[float]:
        """Return this reading's value in the given domain (None if absent)."""
        if domain == ForecastDomain.PERCENT:
            return self.level_percent
        if domain == ForecastDomain.VOLUME:
            return self.level_volume
        return None


@dataclass(frozen=True)
class TankContext:
    """Static/slow-changing tank facts needed to interpret readings"""
    capacity_volume: Optional[float] = None
    current_level_percent: Optional[float] = None
    refill_jump_threshold_percent: float = 10.0

    @property
    def has_capacity(self) -> bool:
        """True when capacity allows percent <-> volume conversion."""
        return self.capacity_volume is not None and self.capacity_volume > 0


# ══════════════════════════════════════════════════════════════════════════════
# INTERMEDIATES
# ══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class RegressionPoint:
    x: float  # Days since first reading of the filtered window
    y: float  # Percent or volume


@dataclass(frozen=True)
class RegressionResult:
    slope: float  # Units per day, negative = consuming
    r2: float  # 0.0-1.0


@dataclass(frozen=True)
class RunwayEstimate:
    """Consumption rates in both domains plus the clamped runway"""
    daily_consumption_percent: Optional[float]
    daily_consumption_volume: Optional[float]
    days_remaining: Optional[float]


# ══════════════════════════════════════════════════════════════════════════════
# OUTPUTS
# ══════════════════════════════════════════════════════════════════════════════


class ForecastResult(BaseModel):
    """
    Immutable forecast for one tank.

    The empty result (all numerics None, trend unknown, confidence low)
    means "insufficient data", not a failure.
    """

    daily_consumption_volume: Optional[float] = None
    daily_consumption_percent: Optional[float] = None
    days_remaining: Optional[float] = Field(default=None, ge=0, le=365)
    estimated_empty_date: Optional[date] = None
    trend: ConsumptionTrend = ConsumptionTrend.UNKNOWN
    confidence: ConfidenceLevel = ConfidenceLevel.LOW
    data_points: int = Field(default=0, ge=0)
    domain: ForecastDomain = ForecastDomain.NONE
    r_squared: Optional[float] = Field(default=None, ge=0, le=1)

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "daily_consumption_volume": 50.0,
                "daily_consumption_percent": 5.0,
                "days_remaining": 13.0,
                "estimated_empty_date": "2025-12-31",
                "trend": "stable",
                "confidence": "low",
                "data_points": 4,
                "domain": "percent",
                "r_squared": 1.0,
            }
        },
    )

    @classmethod
    def empty(cls, data_points: int = 0) -> "ForecastResult":
        """Canonical insufficient-data result."""
        return cls(data_points=data_points)

    @property
    def is_empty(self) -> bool:
        return self.domain == ForecastDomain.NONE

    @property
    def display_days_remaining(self) -> Optional[int]:
        """Days remaining rounded to a whole day for display/persistence."""
        if self.days_remaining is None:
            return None
        return int(round(self.days_remaining))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization / persistence"""
        return {
            "daily_consumption_volume": self.daily_consumption_volume,
            "daily_consumption_percent": self.daily_consumption_percent,
            "days_remaining": self.display_days_remaining,
            "estimated_empty_date": (
                self.estimated_empty_date.isoformat()
                if self.estimated_empty_date
                else None
            ),
            "trend": self.trend.value,
            "confidence": self.confidence.value,
            "data_points": self.data_points,
            "domain": self.domain.value,
            "r_squared": round(self.r_squared, 4) if self.r_squared is not None else None,
        }


@dataclass
class RecalculationSummary:
    """Counts from a batch recalculation run"""
    processed: int = 0
    updated: int = 0
    failed: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {
            "processed": self.processed,
            "updated": self.updated,
            "failed": self.failed,
        }


@dataclass(frozen=True)
class TankForecast:
    """A forecast tagged with the tank it belongs to"""
    tank_id: str
    result: ForecastResult

    def to_dict(self) -> Dict[str, Any]:
        return {"tank_id": self.tank_id, **self.result.to_dict()}
