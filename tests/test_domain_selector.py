"""
Tests for domain reliability and selection
"""

import pytest

from fuel_runway.models import ForecastDomain
from fuel_runway.services.domain_selector import is_domain_reliable, select_domain
from tests.conftest import make_readings


class TestIsDomainReliable:
    """At least half the readings must carry a non-zero value"""

    def test_exactly_half_is_reliable(self):
        readings = make_readings([50.0, 49.0, 0.0, None])

        assert is_domain_reliable(readings, ForecastDomain.PERCENT) is True

    def test_under_half_is_unreliable(self):
        readings = make_readings([50.0, 0.0, 0.0, None])

        assert is_domain_reliable(readings, ForecastDomain.PERCENT) is False

    def test_empty_window_is_unreliable(self):
        assert is_domain_reliable([], ForecastDomain.PERCENT) is False

    def test_none_domain_is_never_reliable(self):
        readings = make_readings([50.0, 49.0, 48.0])

        assert is_domain_reliable(readings, ForecastDomain.NONE) is False


class TestSelectDomain:
    """Percent first, volume as fallback with capacity"""

    def test_percent_preferred_when_both_reliable(self):
        readings = make_readings([50.0, 49.0, 48.0], [500.0, 490.0, 480.0])

        assert select_domain(readings, 1000.0) == ForecastDomain.PERCENT

    def test_volume_fallback_when_percent_zero(self):
        readings = make_readings([0.0, 0.0, 0.0], [500.0, 490.0, 480.0])

        assert select_domain(readings, 1000.0) == ForecastDomain.VOLUME

    @pytest.mark.parametrize("capacity", [None, 0.0, -100.0])
    def test_volume_needs_positive_capacity(self, capacity):
        readings = make_readings([0.0, 0.0, 0.0], [500.0, 490.0, 480.0])

        assert select_domain(readings, capacity) == ForecastDomain.NONE

    def test_nothing_reliable(self):
        readings = make_readings([None, 0.0, None], [None, None, 0.0])

        assert select_domain(readings, 1000.0) == ForecastDomain.NONE
