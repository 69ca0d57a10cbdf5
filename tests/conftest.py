"""
Pytest Configuration for Fuel Runway Tests

Reading windows are built relative to a fixed base time so that forecasts
(including estimated_empty_date) are reproducible.
"""

from datetime import datetime, timedelta, timezone
from typing import Iterable, Optional, Sequence
from unittest.mock import MagicMock

import pytest

from fuel_runway.models import Reading, TankContext

BASE_TIME = datetime(2025, 6, 1, 6, 0, 0)
FIXED_NOW = datetime(2025, 6, 4, 6, 0, 0, tzinfo=timezone.utc)


def make_readings(
    percents: Sequence[Optional[float]],
    volumes: Optional[Sequence[Optional[float]]] = None,
    step: timedelta = timedelta(days=1),
    start: datetime = BASE_TIME,
    refill_flags: Iterable[int] = (),
):
    """Build an ascending reading window, one reading per `step`."""
    flagged = set(refill_flags)
    volumes = volumes if volumes is not None else [None] * len(percents)
    return [
        Reading(
            timestamp=start + step * i,
            level_percent=pct,
            level_volume=vol,
            is_refill=i in flagged,
        )
        for i, (pct, vol) in enumerate(zip(percents, volumes))
    ]


@pytest.fixture
def exact_fit_readings():
    """Four daily readings falling exactly 5 %/day"""
    return make_readings([80.0, 75.0, 70.0, 65.0])


@pytest.fixture
def tank_context():
    """1000 L tank currently at 65%"""
    return TankContext(capacity_volume=1000.0, current_level_percent=65.0)


@pytest.fixture
def mock_reading_source(exact_fit_readings):
    """Reading source returning the exact-fit window"""
    source = MagicMock()
    source.fetch_readings.return_value = exact_fit_readings
    return source


@pytest.fixture
def mock_tank_source(tank_context):
    """Tank source with three tanks, all sharing tank_context"""
    source = MagicMock()
    source.fetch_tank_context.return_value = tank_context
    source.list_tank_ids.return_value = ["T1", "T2", "T3"]
    return source


@pytest.fixture
def mock_engine():
    """SQLAlchemy engine whose connections return no rows"""
    engine = MagicMock()
    conn = MagicMock()
    engine.connect.return_value.__enter__.return_value = conn
    conn.execute.return_value.mappings.return_value.all.return_value = []
    conn.execute.return_value.mappings.return_value.first.return_value = None
    return engine
