#file: backend/models.py

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_serializer


class Pollutant(str, Enum):
    PM25 = "PM2.5"
    PM10 = "PM10"
    TEMPERATURE = "Temperature"
    HUMIDITY = "Humidity"
    PRESSURE = "Pressure"
    AQI = "Air Quality Index"
    NO2 = "NO2"
    SO2 = "SO2"
    CO = "CO"
    O3 = "O3"


class Unit(str, Enum):
    UG_M3 = "µg/m³"
    CELSIUS = "°C"
    PERCENT = "%"
    HPA = "hPa"
    AQI = "AQI"
    MG_M3 = "mg/m³"
    PPM = "ppm"


class AveragingPeriod(str, Enum):
    ONE_MINUTE = "1 minute"
    TWO_MINUTES = "2 minutes"
    FIVE_MINUTES = "5 minutes"
    FIFTEEN_MINUTES = "15 minutes"
    ONE_HOUR = "1 hour"
    ONE_DAY = "24 hours"


class QualityFlag(str, Enum):
    VALID = "valid"
    INVALID = "invalid"
    ESTIMATED = "estimated"
    PRELIMINARY = "preliminary"


def enum_values(enum_cls) -> List[str]:
    return [member.value for member in enum_cls]


class PollutantReading(BaseModel):
    model_config = ConfigDict(use_enum_values=True, validate_default=True)

    pollutant: Pollutant = Field(..., description="Measured quantity")
    value: float = Field(..., allow_inf_nan=False, description="Finite measured value")
    unit: Unit = Field(..., description="Unit of the value")
    averaging_period: AveragingPeriod = Field(AveragingPeriod.TWO_MINUTES, description="Averaging window")
    quality_flag: QualityFlag = Field(QualityFlag.PRELIMINARY, description="Data quality flag")


class MeasurementMetadata(BaseModel):
    source: str = Field("SaveEcoBot", description="Origin of the measurement")
    import_time: Optional[datetime] = Field(None, description="When the record entered the system, defaults to creation time")
    original_data: Any = Field(None, description="Raw payload as received from the source")
    processing_notes: Optional[str] = None


class MeasurementCreate(BaseModel):
    station_id: str = Field(..., min_length=1, description="Identifier of an existing station")
    measurement_time: datetime = Field(..., description="Observation time, naive values are UTC")
    pollutants: List[PollutantReading] = Field(default_factory=list)
    metadata: MeasurementMetadata = Field(default_factory=MeasurementMetadata)


class MeasurementUpdate(BaseModel):
    """Partial measurement; only the fields present in the request body are replaced."""
    station_id: Optional[str] = Field(None, min_length=1)
    measurement_time: Optional[datetime] = None
    pollutants: Optional[List[PollutantReading]] = None
    metadata: Optional[MeasurementMetadata] = None


class MeasurementOut(BaseModel):
    id: str
    station_id: str
    measurement_time: datetime
    pollutants: List[PollutantReading]
    metadata: MeasurementMetadata
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class Exceedance(BaseModel):
    pollutant: str
    value: float
    threshold: int
    severity: str
    ratio: str


class Statistics(BaseModel):
    count: int
    avg: float
    min: float
    max: float
    latest: datetime


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    pages: int


class StationCreate(BaseModel):
    station_id: str = Field(..., min_length=1, description="Unique identifier of the station")
    name: str = Field(..., min_length=1)
    city: Optional[str] = None
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)


class StationOut(StationCreate):
    created_at: Optional[datetime] = None


# Response envelopes: {success, data?, error?, pagination?, exceedances?}

class ErrorResponse(BaseModel):
    success: bool = False
    error: str


class MeasurementResponse(BaseModel):
    success: bool = True
    data: MeasurementOut
    exceedances: Optional[List[Exceedance]] = None

    @model_serializer(mode="wrap")
    def _omit_missing_exceedances(self, handler) -> Dict[str, Any]:
        data = handler(self)
        if data.get("exceedances") is None:
            data.pop("exceedances", None)
        return data


class MeasurementListResponse(BaseModel):
    success: bool = True
    data: List[MeasurementOut]


class PaginatedMeasurementResponse(MeasurementListResponse):
    pagination: Pagination


class StatisticsResponse(BaseModel):
    success: bool = True
    data: Optional[Statistics] = None


class StationResponse(BaseModel):
    success: bool = True
    data: StationOut


class StationListResponse(BaseModel):
    success: bool = True
    data: List[StationOut]
