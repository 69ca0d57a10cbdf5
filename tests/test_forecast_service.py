"""
Tests for the single-tank ForecastService
"""

from unittest.mock import MagicMock

import pytest

from fuel_runway.exceptions import CollaboratorError, ForecastError, InvalidForecastRequest
from fuel_runway.models import TankContext
from fuel_runway.services.forecast_service import ForecastService
from tests.conftest import FIXED_NOW, make_readings


@pytest.fixture
def service(mock_reading_source, mock_tank_source):
    return ForecastService(mock_reading_source, mock_tank_source, clock=lambda: FIXED_NOW)


class TestForecast:

    def test_forecast_uses_collaborators(self, service, mock_reading_source, mock_tank_source):
        result = service.forecast("T1", window_days=14)

        mock_tank_source.fetch_tank_context.assert_called_once_with("T1")
        mock_reading_source.fetch_readings.assert_called_once_with("T1", 14)
        assert result.days_remaining == pytest.approx(13.0)
        assert result.daily_consumption_volume == 50.0

    def test_clock_feeds_empty_date(self, service):
        result = service.forecast("T1")

        assert result.estimated_empty_date.isoformat() == "2025-06-17"

    def test_insufficient_data_is_not_an_error(self, service, mock_reading_source):
        mock_reading_source.fetch_readings.return_value = make_readings([50.0])

        result = service.forecast("T1")

        assert result.is_empty
        assert result.data_points == 1

    def test_invalid_window_rejected_before_fetch(self, service, mock_reading_source):
        with pytest.raises(InvalidForecastRequest):
            service.forecast("T1", window_days=0)

        mock_reading_source.fetch_readings.assert_not_called()


class TestCollaboratorFailures:
    """Source failures propagate wrapped, with the cause chained"""

    def test_reading_fetch_failure(self, service, mock_reading_source):
        boom = ConnectionError("MySQL server has gone away")
        mock_reading_source.fetch_readings.side_effect = boom

        with pytest.raises(CollaboratorError) as exc_info:
            service.forecast("T2")

        assert exc_info.value.tank_id == "T2"
        assert exc_info.value.operation == "fetch_readings"
        assert exc_info.value.__cause__ is boom
        assert isinstance(exc_info.value, ForecastError)

    def test_context_fetch_failure(self, service, mock_tank_source):
        mock_tank_source.fetch_tank_context.side_effect = RuntimeError("timeout")

        with pytest.raises(CollaboratorError, match="fetch_tank_context failed for tank T3"):
            service.forecast("T3")

    def test_unknown_tank(self, service, mock_tank_source):
        mock_tank_source.fetch_tank_context.return_value = None

        with pytest.raises(CollaboratorError, match="tank not found"):
            service.forecast("missing")


class TestDetectRefillEvents:

    def test_uses_tank_threshold_by_default(self):
        readings = MagicMock()
        readings.fetch_readings.return_value = make_readings([40.0, 47.0, 45.0, 60.0])
        tanks = MagicMock()
        tanks.fetch_tank_context.return_value = TankContext(refill_jump_threshold_percent=5.0)
        service = ForecastService(readings, tanks)

        refills = service.detect_refill_events("T1", days=30)

        assert [r.level_percent for r in refills] == [47.0, 60.0]
        readings.fetch_readings.assert_called_once_with("T1", 30)

    def test_explicit_threshold_skips_context(self, service, mock_tank_source, mock_reading_source):
        mock_reading_source.fetch_readings.return_value = make_readings([40.0, 47.0, 45.0, 60.0])

        refills = service.detect_refill_events("T1", threshold=10.0)

        assert [r.level_percent for r in refills] == [60.0]
        mock_tank_source.fetch_tank_context.assert_not_called()
