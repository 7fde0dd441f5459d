"""
Tests for threshold evaluation.

Tests cover:
- Equivalence classes: below warning, warning, alert, emergency
- Boundary value analysis: values exactly at each bound are not exceedances of it
- Edge cases: pollutants without limits, empty input, mixed readings keep input order
"""

import pytest

from backend.models import PollutantReading
from backend.thresholds import THRESHOLDS, classify, evaluate


def reading(pollutant, value, unit="µg/m³"):
    return PollutantReading(pollutant=pollutant, value=value, unit=unit)


class TestEvaluate:
    """Test suite for evaluate()."""

    # ==================== Equivalence Classes ====================

    def test_pm25_emergency(self):
        """PM2.5 = 80 is above the emergency bound 75."""
        result = evaluate([reading("PM2.5", 80)])

        assert len(result) == 1
        assert result[0].pollutant == "PM2.5"
        assert result[0].value == 80
        assert result[0].severity == "emergency"
        assert result[0].threshold == 75
        assert isinstance(result[0].threshold, int)
        assert result[0].ratio == "1.07"

    def test_pm25_warning(self):
        """PM2.5 = 30 is above warning (25) but not alert (35)."""
        result = evaluate([reading("PM2.5", 30)])

        assert len(result) == 1
        assert result[0].severity == "warning"
        assert result[0].threshold == 25
        assert result[0].ratio == "1.20"

    def test_pm10_alert(self):
        result = evaluate([reading("PM10", 100)])

        assert [(e.severity, e.threshold, e.ratio) for e in result] == [("alert", 75, "1.33")]

    def test_aqi_emergency(self):
        result = evaluate([reading("Air Quality Index", 151, unit="AQI")])

        assert result[0].severity == "emergency"
        assert result[0].threshold == 150
        assert result[0].ratio == "1.01"

    def test_below_warning_no_exceedance(self):
        assert evaluate([reading("PM2.5", 10)]) == []

    # ==================== Boundary Value Analysis ====================

    @pytest.mark.parametrize("pollutant", sorted(THRESHOLDS))
    @pytest.mark.parametrize("severity", ["warning", "alert", "emergency"])
    def test_value_at_bound_is_not_that_tier(self, pollutant, severity):
        """Comparisons are strict: a value equal to a bound does not reach that tier."""
        bound = THRESHOLDS[pollutant][severity]
        assert classify(pollutant, bound) != severity

    def test_just_above_warning(self):
        assert classify("PM2.5", 25.01) == "warning"

    def test_at_warning_bound(self):
        assert classify("PM2.5", 25) is None

    def test_at_emergency_bound_is_alert(self):
        assert classify("PM10", 150) == "alert"

    # ==================== Edge Cases ====================

    def test_pollutant_without_thresholds(self):
        """CO has no limits, so even huge values never produce exceedances."""
        assert evaluate([reading("CO", 9999, unit="mg/m³")]) == []

    def test_empty_input(self):
        assert evaluate([]) == []

    def test_order_follows_input(self):
        readings = [
            reading("PM10", 60),
            reading("Temperature", 40, unit="°C"),
            reading("PM2.5", 80),
        ]

        result = evaluate(readings)

        assert [(e.pollutant, e.severity) for e in result] == [("PM10", "warning"), ("PM2.5", "emergency")]

    def test_accepts_plain_dicts(self):
        result = evaluate([{"pollutant": "PM2.5", "value": 36}])

        assert result[0].severity == "alert"
        assert result[0].threshold == 35
