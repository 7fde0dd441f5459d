# file: backend/statistics.py

from typing import Any, Iterable, Optional

from backend.models import Statistics


def aggregate(measurements: Iterable[Any], pollutant: str) -> Optional[Statistics]:
    """Summarise the readings of one pollutant across measurements.

    Every reading named ``pollutant`` counts, including repeated readings
    inside a single measurement. ``latest`` is the newest measurement_time
    among the measurements that contributed. Returns None when nothing matches.
    """
    values = []
    latest = None
    for measurement in measurements:
        matching = [
            reading.value
            for reading in measurement.pollutants
            if getattr(reading.pollutant, "value", reading.pollutant) == pollutant
        ]
        if not matching:
            continue
        values.extend(matching)
        if latest is None or measurement.measurement_time > latest:
            latest = measurement.measurement_time

    if not values:
        return None
    return Statistics(
        count=len(values),
        avg=sum(values) / len(values),
        min=min(values),
        max=max(values),
        latest=latest,
    )
