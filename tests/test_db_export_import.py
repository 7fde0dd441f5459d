"""
Tests for the JSON export and import tools.
"""

import json

from backend.database import all_measurements, insert_measurement
from backend.db_export import export_to_json
from backend.db_import import import_from_json
from backend.documents import MeasurementDocument
from conftest import make_measurement


def test_export_writes_iso_timestamps(tmp_path, stations):
    insert_measurement(make_measurement(minutes=5))
    insert_measurement(make_measurement(minutes=0))
    output = tmp_path / "export.json"

    assert export_to_json(str(output)) == 2

    data = json.loads(output.read_text(encoding="utf-8"))
    assert [d["measurement_time"] for d in data] == ["2024-05-01T12:00:00+00:00", "2024-05-01T12:05:00+00:00"]
    assert data[0]["pollutants"][0]["unit"] == "µg/m³"


def test_import_restores_export(tmp_path, stations):
    insert_measurement(make_measurement(minutes=0))
    insert_measurement(make_measurement(minutes=1))
    output = tmp_path / "export.json"
    export_to_json(str(output))
    MeasurementDocument.objects.delete()

    assert import_from_json(str(output)) == 2
    assert len(all_measurements()) == 2

    # every record is now a duplicate
    assert import_from_json(str(output)) == 0


def test_import_skips_invalid_records(tmp_path, stations):
    output = tmp_path / "import.json"
    output.write_text(json.dumps([
        {"station_id": "station-1", "measurement_time": "2024-05-01T12:00:00Z",
         "pollutants": [{"pollutant": "PM2.5", "value": 1, "unit": "µg/m³"}]},
        {"station_id": "station-1", "measurement_time": "2024-05-01T12:01:00Z",
         "pollutants": [{"pollutant": "Radon", "value": 1, "unit": "µg/m³"}]},
        {"station_id": "", "measurement_time": "2024-05-01T12:02:00Z"},
    ]), encoding="utf-8")

    assert import_from_json(str(output)) == 1


def test_import_skips_unregistered_stations(tmp_path, stations):
    output = tmp_path / "import.json"
    output.write_text(json.dumps([
        {"station_id": "ghost", "measurement_time": "2024-05-01T12:00:00Z",
         "pollutants": [{"pollutant": "PM2.5", "value": 1, "unit": "µg/m³"}]},
        {"station_id": "station-2", "measurement_time": "2024-05-01T12:00:00Z",
         "pollutants": [{"pollutant": "PM2.5", "value": 1, "unit": "µg/m³"}]},
    ]), encoding="utf-8")

    assert import_from_json(str(output)) == 1
    assert [m.station_id for m in all_measurements()] == ["station-2"]
