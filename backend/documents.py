# file: backend/documents.py

"""
MongoEngine documents backing the measurement store.

- StationDocument: a monitoring station, referenced by measurements through station_id.
- PollutantDocument: one reading embedded in a measurement, never stored on its own.
- MetadataDocument: provenance of a measurement (source, import time, raw payload).
- MeasurementDocument: one timestamped observation of a station.

At most one measurement exists per (station_id, measurement_time); the unique
index enforces it and the store checks it before every write.
All datetimes are stored as naive UTC.
"""

import math
from datetime import datetime
from typing import Any, Dict

from mongoengine import (
    DateTimeField,
    Document,
    DynamicField,
    EmbeddedDocument,
    EmbeddedDocumentField,
    FloatField,
    ListField,
    StringField,
)

from backend.models import AveragingPeriod, Pollutant, QualityFlag, Unit, enum_values
from backend.utils import as_utc, get_current_time, normalize_timestamp


def _now() -> datetime:
    return normalize_timestamp(get_current_time())


class FiniteFloatField(FloatField):
    """FloatField rejecting NaN and infinities."""

    def validate(self, value):
        super().validate(value)
        if not math.isfinite(float(value)):
            self.error("Value must be a valid number")


class PollutantDocument(EmbeddedDocument):
    pollutant = StringField(required=True, choices=enum_values(Pollutant))
    value = FiniteFloatField(required=True)
    unit = StringField(required=True, choices=enum_values(Unit))
    averaging_period = StringField(default=AveragingPeriod.TWO_MINUTES.value, choices=enum_values(AveragingPeriod))
    quality_flag = StringField(default=QualityFlag.PRELIMINARY.value, choices=enum_values(QualityFlag))

    def to_record(self) -> Dict[str, Any]:
        return {
            "pollutant": self.pollutant,
            "value": self.value,
            "unit": self.unit,
            "averaging_period": self.averaging_period,
            "quality_flag": self.quality_flag,
        }


class MetadataDocument(EmbeddedDocument):
    source = StringField(default="SaveEcoBot")
    import_time = DateTimeField(default=_now)
    original_data = DynamicField()
    processing_notes = StringField()

    def to_record(self) -> Dict[str, Any]:
        return {
            "source": self.source,
            "import_time": as_utc(self.import_time),
            "original_data": self.original_data,
            "processing_notes": self.processing_notes,
        }


class MeasurementDocument(Document):
    station_id = StringField(required=True)
    measurement_time = DateTimeField(required=True)
    pollutants = ListField(EmbeddedDocumentField(PollutantDocument))
    metadata = EmbeddedDocumentField(MetadataDocument, default=MetadataDocument)
    created_at = DateTimeField()
    updated_at = DateTimeField()

    meta = {
        "collection": "airquality",
        "indexes": [
            {"fields": ["station_id", "-measurement_time"]},
            {"fields": ["-measurement_time"]},
            {"fields": ["pollutants.pollutant", "-measurement_time"]},
            {"fields": ["station_id", "measurement_time"], "unique": True},
        ],
    }

    def save(self, *args, **kwargs):
        now = _now()
        if self.created_at is None:
            self.created_at = now
        self.updated_at = now
        return super().save(*args, **kwargs)

    def to_record(self) -> Dict[str, Any]:
        metadata = self.metadata or MetadataDocument()
        return {
            "id": str(self.pk),
            "station_id": self.station_id,
            "measurement_time": as_utc(self.measurement_time),
            "pollutants": [reading.to_record() for reading in self.pollutants],
            "metadata": metadata.to_record(),
            "created_at": as_utc(self.created_at),
            "updated_at": as_utc(self.updated_at),
        }

    def __repr__(self) -> str:  # pragma: no cover
        return f"MeasurementDocument(station={self.station_id}, time={self.measurement_time}, readings={len(self.pollutants)})"


class StationDocument(Document):
    station_id = StringField(required=True, unique=True)
    name = StringField(required=True)
    city = StringField()
    latitude = FloatField(min_value=-90, max_value=90)
    longitude = FloatField(min_value=-180, max_value=180)
    created_at = DateTimeField(default=_now)

    meta = {"collection": "stations"}

    def to_record(self) -> Dict[str, Any]:
        return {
            "station_id": self.station_id,
            "name": self.name,
            "city": self.city,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "created_at": as_utc(self.created_at),
        }
