"""
Tests for the statistics aggregator.

Tests cover:
- count/avg/min/max/latest over matching readings
- readings of other pollutants are ignored
- repeated pollutant names inside one measurement all contribute
- empty result when nothing matches
"""

from datetime import datetime, timedelta, timezone

import pytest

from backend.models import MeasurementCreate
from backend.statistics import aggregate

START = datetime(2024, 1, 1, tzinfo=timezone.utc)


def measurement(hours, *readings):
    return MeasurementCreate(
        station_id="s1",
        measurement_time=START + timedelta(hours=hours),
        pollutants=[{"pollutant": name, "value": value, "unit": "µg/m³"} for name, value in readings],
    )


class TestAggregate:
    """Test suite for aggregate()."""

    def test_basic_statistics(self):
        measurements = [
            measurement(0, ("PM2.5", 10)),
            measurement(2, ("PM2.5", 30), ("PM10", 100)),
            measurement(1, ("PM2.5", 20)),
        ]

        stats = aggregate(measurements, "PM2.5")

        assert stats.count == 3
        assert stats.avg == pytest.approx(20)
        assert stats.min == 10
        assert stats.max == 30
        assert stats.latest == START + timedelta(hours=2)

    def test_other_pollutants_ignored(self):
        measurements = [measurement(0, ("PM10", 100)), measurement(1, ("PM2.5", 5), ("PM10", 300))]

        stats = aggregate(measurements, "PM10")

        assert stats.count == 2
        assert stats.max == 300

    def test_latest_only_from_contributing_measurements(self):
        measurements = [measurement(0, ("PM2.5", 5)), measurement(5, ("NO2", 40))]

        assert aggregate(measurements, "PM2.5").latest == START

    def test_repeated_pollutant_counts_twice(self):
        """Both PM2.5 readings of the same measurement contribute."""
        stats = aggregate([measurement(0, ("PM2.5", 10), ("PM2.5", 20))], "PM2.5")

        assert stats.count == 2
        assert stats.avg == pytest.approx(15)

    def test_no_match_returns_none(self):
        assert aggregate([measurement(0, ("PM10", 100))], "PM2.5") is None

    def test_empty_input_returns_none(self):
        assert aggregate([], "PM2.5") is None
