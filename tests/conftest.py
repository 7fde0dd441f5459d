"""
Pytest configuration for the air-quality measurement tests.

Every test that touches the store gets a fresh in-memory MongoDB (mongomock)
behind mongoengine; the FastAPI app is driven through TestClient without
running its lifespan, so no real database is contacted.
"""

from datetime import datetime, timedelta, timezone

import mongomock
import pytest
from fastapi.testclient import TestClient

from backend.database import close_db, connect_db, create_station, insert_measurement
from backend.documents import MeasurementDocument, StationDocument
from backend.main import app

BASE_TIME = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def make_measurement(station_id="station-1", minutes=0, pollutants=None, **extra):
    """Build a measurement payload BASE_TIME + minutes, one PM2.5 reading by default."""
    data = {
        "station_id": station_id,
        "measurement_time": BASE_TIME + timedelta(minutes=minutes),
        "pollutants": pollutants if pollutants is not None else [
            {"pollutant": "PM2.5", "value": 12.5, "unit": "µg/m³"}
        ],
    }
    data.update(extra)
    return data


@pytest.fixture
def db():
    """Fresh mongomock-backed connection for one test."""
    connect_db(mongo_client_class=mongomock.MongoClient)
    yield
    MeasurementDocument.drop_collection()
    StationDocument.drop_collection()
    close_db()


@pytest.fixture
def stations(db):
    """Two registered stations."""
    return [
        create_station({"station_id": "station-1", "name": "City Centre", "city": "Kyiv"}),
        create_station({"station_id": "station-2", "name": "Riverside", "city": "Kyiv"}),
    ]


@pytest.fixture
def measurement(stations):
    """One stored measurement of station-1 at BASE_TIME."""
    return insert_measurement(make_measurement())


@pytest.fixture
def client(db):
    return TestClient(app)
