# file: backend/database.py

import os
import logging
from contextlib import contextmanager
from datetime import datetime
from typing import Any, Dict, Iterator, List, Optional, Tuple

from bson import ObjectId
from dotenv import load_dotenv
from mongoengine import connect, disconnect
from mongoengine.errors import FieldDoesNotExist, NotUniqueError
from mongoengine.errors import ValidationError as DocumentValidationError
from pymongo.errors import PyMongoError

from backend.documents import MeasurementDocument, MetadataDocument, PollutantDocument, StationDocument
from backend.errors import NotFoundError, StoreError, ValidationError
from backend.models import Statistics
from backend.statistics import aggregate
from backend.utils import as_utc, normalize_timestamp

load_dotenv()

MONGODB_URI = os.getenv("MONGODB_URI", "mongodb://localhost:27017")
MONGODB_DB = os.getenv("MONGODB_DB", "air_quality")

if not MONGODB_URI or not MONGODB_DB:
    raise ValueError("Missing required MongoDB environment variables")


def connect_db(**kwargs: Any) -> None:
    """Open the process-wide MongoDB connection and make sure the indexes exist."""
    connect(db=MONGODB_DB, host=MONGODB_URI, **kwargs)
    try:
        MeasurementDocument.ensure_indexes()
        StationDocument.ensure_indexes()
    except PyMongoError as e:
        logging.error(f"Error creating MongoDB indexes: {e}")
        raise StoreError("Database is unavailable") from e
    logging.info(f"Connected to MongoDB database '{MONGODB_DB}'")


def close_db() -> None:
    disconnect()
    logging.info("MongoDB connection closed")


@contextmanager
def store_errors(action: str) -> Iterator[None]:
    """Translate driver and document errors into the service's error taxonomy."""
    try:
        yield
    except NotUniqueError as e:
        raise ValidationError("A record with the same key already exists") from e
    except FieldDoesNotExist as e:
        raise ValidationError(str(e)) from e
    except DocumentValidationError as e:
        raise ValidationError(str(e)) from e
    except PyMongoError as e:
        logging.error(f"Error while {action}: {e}")
        raise StoreError(f"Database error while {action}") from e


# ==============================
# Stations
# ==============================

def find_station(station_id: str) -> Optional[StationDocument]:
    """Look up a station by its station_id, None when it is not registered."""
    with store_errors("fetching station"):
        return StationDocument.objects(station_id=station_id).first()


def create_station(data: Dict[str, Any]) -> StationDocument:
    with store_errors("saving station"):
        station = StationDocument(**{k: v for k, v in data.items() if v is not None})
        station.validate()
        if StationDocument.objects(station_id=station.station_id).first() is not None:
            raise ValidationError(f"Station {station.station_id} already exists")
        station.save()
    logging.info(f"Registered station {station.station_id}")
    return station


def list_stations() -> List[StationDocument]:
    with store_errors("listing stations"):
        return list(StationDocument.objects.order_by("station_id"))


# ==============================
# Measurements
# ==============================

def _build_pollutants(readings: List[Dict[str, Any]]) -> List[PollutantDocument]:
    return [PollutantDocument(**{k: v for k, v in reading.items() if v is not None}) for reading in readings]


def _merge_metadata(current: Optional[MetadataDocument], changes: Optional[Dict[str, Any]]) -> MetadataDocument:
    """Set the given metadata fields on the stored metadata; omitted fields keep their values."""
    metadata = current if current is not None else MetadataDocument()
    for key, value in (changes or {}).items():
        if value is None:
            continue
        if key not in metadata._fields:
            raise ValidationError(f"Unknown metadata field: {key}")
        setattr(metadata, key, normalize_timestamp(value) if key == "import_time" else value)
    return metadata


def _apply_changes(measurement: MeasurementDocument, changes: Dict[str, Any]) -> None:
    for field, value in changes.items():
        if field == "pollutants":
            measurement.pollutants = _build_pollutants(value or [])
        elif field == "metadata":
            measurement.metadata = _merge_metadata(measurement.metadata, value)
        elif field == "measurement_time":
            measurement.measurement_time = normalize_timestamp(value)
        elif field == "station_id":
            measurement.station_id = value
        else:
            raise ValidationError(f"Unknown measurement field: {field}")


def _ensure_unique(measurement: MeasurementDocument) -> None:
    duplicates = MeasurementDocument.objects(
        station_id=measurement.station_id,
        measurement_time=measurement.measurement_time,
    )
    if measurement.pk is not None:
        duplicates = duplicates.filter(pk__ne=measurement.pk)
    if duplicates.first() is not None:
        raise ValidationError(
            f"Measurement for station {measurement.station_id} at "
            f"{as_utc(measurement.measurement_time).isoformat()} already exists"
        )


def _save(measurement: MeasurementDocument, changes: Dict[str, Any], action: str) -> MeasurementDocument:
    with store_errors(action):
        _apply_changes(measurement, changes)
        measurement.validate()
        _ensure_unique(measurement)
        measurement.save()
    return measurement


def insert_measurement(data: Dict[str, Any]) -> MeasurementDocument:
    """Validate and persist a new measurement.

    Raises ValidationError when an enum, a value, a required field or the
    (station_id, measurement_time) uniqueness constraint is violated.
    """
    measurement = MeasurementDocument()
    _save(measurement, {
        "station_id": data.get("station_id"),
        "measurement_time": data.get("measurement_time"),
        "pollutants": data.get("pollutants") or [],
        "metadata": data.get("metadata"),
    }, "saving measurement")
    logging.info(f"Saved measurement {measurement.pk} for station {measurement.station_id}")
    return measurement


def find_measurement(measurement_id: str) -> MeasurementDocument:
    if not ObjectId.is_valid(measurement_id):
        raise NotFoundError("Measurement not found")
    with store_errors("fetching measurement"):
        measurement = MeasurementDocument.objects(pk=measurement_id).first()
    if measurement is None:
        raise NotFoundError("Measurement not found")
    return measurement


def _measurement_filter(station_id: Optional[str] = None,
                        start: Optional[datetime] = None,
                        end: Optional[datetime] = None,
                        pollutant: Optional[str] = None) -> Dict[str, Any]:
    query: Dict[str, Any] = {}
    if station_id:
        query["station_id"] = station_id
    if start is not None:
        query["measurement_time__gte"] = normalize_timestamp(start)
    if end is not None:
        query["measurement_time__lte"] = normalize_timestamp(end)
    if pollutant:
        query["pollutants__pollutant"] = pollutant
    return query


def list_measurements(station_id: Optional[str] = None,
                      start: Optional[datetime] = None,
                      end: Optional[datetime] = None,
                      pollutant: Optional[str] = None,
                      page: int = 1,
                      limit: int = 100) -> Tuple[List[MeasurementDocument], int]:
    """Return one page of matching measurements, newest first, and the total match count."""
    if page < 1 or limit < 1:
        raise ValidationError("page and limit must be positive integers")
    query = _measurement_filter(station_id, start, end, pollutant)
    with store_errors("listing measurements"):
        matching = MeasurementDocument.objects(**query)
        total = matching.count()
        items = list(matching.order_by("-measurement_time").skip((page - 1) * limit).limit(limit))
    return items, total


def latest_per_station() -> List[MeasurementDocument]:
    """Return the most recent measurement of every station."""
    with store_errors("fetching latest measurements"):
        station_ids = sorted(MeasurementDocument.objects.distinct("station_id"))
        return [
            MeasurementDocument.objects(station_id=station_id).order_by("-measurement_time").first()
            for station_id in station_ids
        ]


def latest_for_station(station_id: str) -> MeasurementDocument:
    with store_errors("fetching latest measurement"):
        measurement = MeasurementDocument.objects(station_id=station_id).order_by("-measurement_time").first()
    if measurement is None:
        raise NotFoundError(f"No measurements for station {station_id}")
    return measurement


def update_measurement(measurement_id: str, changes: Dict[str, Any]) -> MeasurementDocument:
    """Replace the given fields of a measurement and re-validate the merged record.

    Nothing is written unless the merged record passes validation.
    """
    measurement = find_measurement(measurement_id)
    _save(measurement, changes, "updating measurement")
    logging.info(f"Updated measurement {measurement_id}")
    return measurement


def delete_measurement(measurement_id: str) -> MeasurementDocument:
    measurement = find_measurement(measurement_id)
    with store_errors("deleting measurement"):
        measurement.delete()
    logging.info(f"Deleted measurement {measurement_id}")
    return measurement


def get_statistics(station_id: str, start: datetime, end: datetime, pollutant: str) -> Optional[Statistics]:
    """Aggregate one pollutant of one station over [start, end], None when nothing matches."""
    query = _measurement_filter(station_id, start, end, pollutant)
    with store_errors("computing statistics"):
        measurements = list(MeasurementDocument.objects(**query).order_by("measurement_time"))
    statistics = aggregate(measurements, pollutant)
    if statistics is None:
        return None
    return statistics.model_copy(update={"latest": as_utc(statistics.latest)})


def all_measurements() -> List[MeasurementDocument]:
    with store_errors("reading measurements"):
        return list(MeasurementDocument.objects.order_by("measurement_time", "station_id"))
