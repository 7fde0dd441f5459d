# file: backend/routes.py

"""
REST endpoints for air-quality measurements and the station registry.

GET    /api/airquality                      - paginated, filtered list
GET    /api/airquality/latest               - latest measurement of every station
GET    /api/airquality/latest/{station_id}  - latest measurement of one station
GET    /api/airquality/statistics           - count/avg/min/max/latest of one pollutant
GET    /api/airquality/{id}                 - one measurement
POST   /api/airquality                      - create (station must exist), returns exceedances
PUT    /api/airquality/{id}                 - partial or full update
DELETE /api/airquality/{id}                 - delete, returns the removed record

GET    /api/stations                        - registered stations
GET    /api/stations/{station_id}           - one station
POST   /api/stations                        - register a station

Every response uses the envelope {success, data?, error?, pagination?, exceedances?};
errors are rendered by the handlers in backend.main.
"""

import logging
import math
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Query, status

from backend import database
from backend.documents import MeasurementDocument
from backend.errors import NotFoundError
from backend.models import (
    MeasurementCreate,
    MeasurementListResponse,
    MeasurementOut,
    MeasurementResponse,
    MeasurementUpdate,
    PaginatedMeasurementResponse,
    Pagination,
    Pollutant,
    StationCreate,
    StationListResponse,
    StationOut,
    StationResponse,
    StatisticsResponse,
)
from backend.thresholds import evaluate

router = APIRouter(prefix="/api/airquality", tags=["airquality"])
stations_router = APIRouter(prefix="/api/stations", tags=["stations"])


def to_out(measurement: MeasurementDocument) -> MeasurementOut:
    return MeasurementOut.model_validate(measurement.to_record())


def _require_station(station_id: str) -> None:
    if database.find_station(station_id) is None:
        raise NotFoundError("Station not found")


# ==============================
# Measurements
# ==============================

@router.get("", response_model=PaginatedMeasurementResponse)
def list_measurements(
    station_id: Optional[str] = Query(None, description="Exact station identifier"),
    start_date: Optional[datetime] = Query(None, description="Inclusive lower bound of measurement_time"),
    end_date: Optional[datetime] = Query(None, description="Inclusive upper bound of measurement_time"),
    pollutant: Optional[Pollutant] = Query(None, description="Only measurements containing this pollutant"),
    page: int = Query(1, ge=1, description="1-based page number"),
    limit: int = Query(100, ge=1, description="Page size"),
):
    """Fetch measurements newest first with optional filters."""
    logging.info(f"Listing measurements: station={station_id}, pollutant={pollutant}, page={page}, limit={limit}")
    items, total = database.list_measurements(
        station_id=station_id,
        start=start_date,
        end=end_date,
        pollutant=pollutant.value if pollutant else None,
        page=page,
        limit=limit,
    )
    return PaginatedMeasurementResponse(
        data=[to_out(item) for item in items],
        pagination=Pagination(page=page, limit=limit, total=total, pages=math.ceil(total / limit)),
    )


@router.get("/latest", response_model=MeasurementListResponse)
def latest_measurements():
    """Fetch the most recent measurement of every station."""
    return MeasurementListResponse(data=[to_out(item) for item in database.latest_per_station()])


@router.get("/latest/{station_id}", response_model=MeasurementResponse)
def latest_station_measurement(station_id: str):
    """Fetch the most recent measurement of a single station."""
    return MeasurementResponse(data=to_out(database.latest_for_station(station_id)))


@router.get("/statistics", response_model=StatisticsResponse)
def measurement_statistics(
    station_id: str = Query(..., description="Station identifier"),
    start_date: datetime = Query(..., description="Inclusive start of the window"),
    end_date: datetime = Query(..., description="Inclusive end of the window"),
    pollutant: Pollutant = Query(..., description="Pollutant to aggregate"),
):
    """Count, mean, minimum, maximum and latest time of one pollutant; data is null when nothing matches."""
    statistics = database.get_statistics(station_id, start_date, end_date, pollutant.value)
    return StatisticsResponse(data=statistics)


@router.get("/{measurement_id}", response_model=MeasurementResponse)
def get_measurement(measurement_id: str):
    return MeasurementResponse(data=to_out(database.find_measurement(measurement_id)))


@router.post("", response_model=MeasurementResponse, status_code=status.HTTP_201_CREATED)
def create_measurement(measurement: MeasurementCreate):
    """Store a measurement of a registered station and report threshold exceedances."""
    _require_station(measurement.station_id)
    stored = database.insert_measurement(measurement.model_dump())
    exceedances = evaluate(stored.pollutants)
    if exceedances:
        logging.info(f"Measurement {stored.pk} exceeds thresholds for {[e.pollutant for e in exceedances]}")
    return MeasurementResponse(data=to_out(stored), exceedances=exceedances or None)


@router.put("/{measurement_id}", response_model=MeasurementResponse)
def update_measurement(measurement_id: str, changes: MeasurementUpdate):
    """Replace the fields present in the body and re-validate the whole measurement."""
    fields = changes.model_dump(exclude_unset=True)
    database.find_measurement(measurement_id)
    if fields.get("station_id"):
        _require_station(fields["station_id"])
    return MeasurementResponse(data=to_out(database.update_measurement(measurement_id, fields)))


@router.delete("/{measurement_id}", response_model=MeasurementResponse)
def delete_measurement(measurement_id: str):
    return MeasurementResponse(data=to_out(database.delete_measurement(measurement_id)))


# ==============================
# Stations
# ==============================

@stations_router.get("", response_model=StationListResponse)
def list_stations():
    return StationListResponse(data=[StationOut.model_validate(s.to_record()) for s in database.list_stations()])


@stations_router.get("/{station_id}", response_model=StationResponse)
def get_station(station_id: str):
    station = database.find_station(station_id)
    if station is None:
        raise NotFoundError("Station not found")
    return StationResponse(data=StationOut.model_validate(station.to_record()))


@stations_router.post("", response_model=StationResponse, status_code=status.HTTP_201_CREATED)
def create_station(station: StationCreate):
    stored = database.create_station(station.model_dump())
    return StationResponse(data=StationOut.model_validate(stored.to_record()))
