"""
Tests for the measurement form reducers.
"""

from datetime import datetime, timezone

import pytest

from frontend.form_state import FormState, change_field, load_for_edit, reset_form, submit_form

STORED = {
    "id": "664f1c2e8a1b2c3d4e5f6789",
    "station_id": "station-1",
    "measurement_time": "2024-05-01T12:34:56Z",
    "pollutants": [
        {"pollutant": "PM10", "value": 41.5, "unit": "µg/m³"},
        {"pollutant": "NO2", "value": 20, "unit": "µg/m³"},
    ],
}


class TestChangeField:

    def test_returns_new_state(self):
        state = reset_form()

        changed = change_field(state, "station_id", "station-7")

        assert changed.station_id == "station-7"
        assert state.station_id == ""

    def test_none_clears_field(self):
        state = change_field(reset_form(), "pollutant", "PM2.5")

        assert change_field(state, "pollutant", None).pollutant == ""

    def test_unknown_field(self):
        with pytest.raises(KeyError):
            change_field(reset_form(), "editing_id", "x")


class TestLoadForEdit:

    def test_first_reading_is_shown(self):
        state = load_for_edit(STORED)

        assert state == FormState(station_id="station-1", measurement_time="2024-05-01T12:34", pollutant="PM10",
                                  value="41.5", unit="µg/m³", editing_id=STORED["id"])
        assert state.is_editing

    def test_offset_time_is_shown_in_utc(self):
        state = load_for_edit({**STORED, "measurement_time": "2024-05-01T15:00:00+03:00"})

        assert state.measurement_time == "2024-05-01T12:00"

    def test_without_readings(self):
        state = load_for_edit({**STORED, "pollutants": []})

        assert (state.pollutant, state.value, state.unit) == ("", "", "")


class TestSubmit:

    def test_create(self):
        state = reset_form()
        for name, value in {"station_id": "station-1", "measurement_time": "2024-05-01T12:00",
                            "pollutant": "PM2.5", "value": "12.5", "unit": "µg/m³"}.items():
            state = change_field(state, name, value)

        submission = submit_form(state)

        assert submission.method == "POST"
        assert submission.measurement_id is None
        assert submission.payload == {
            "station_id": "station-1",
            "measurement_time": "2024-05-01T12:00",
            "pollutants": [{"pollutant": "PM2.5", "value": "12.5", "unit": "µg/m³"}],
        }

    def test_update(self):
        submission = submit_form(load_for_edit(STORED))

        assert submission.method == "PUT"
        assert submission.measurement_id == STORED["id"]
        assert len(submission.payload["pollutants"]) == 1

    def test_empty_time_means_now(self):
        now = datetime(2024, 6, 1, 8, 30, tzinfo=timezone.utc)

        submission = submit_form(reset_form(), now=now)

        assert submission.payload["measurement_time"] == now.isoformat()

    def test_empty_value_is_sent_as_null(self):
        submission = submit_form(reset_form())

        assert submission.payload["pollutants"][0]["value"] is None
