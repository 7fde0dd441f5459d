# file: backend/thresholds.py

"""
Threshold evaluation for pollutant readings.

Only PM2.5, PM10 and the Air Quality Index have limits. A reading is classified
with the highest tier whose bound it strictly exceeds, so a value above the
emergency bound is an emergency and nothing else.
"""

from typing import Any, Dict, Iterable, List

from backend.models import Exceedance

THRESHOLDS: Dict[str, Dict[str, int]] = {
    "PM2.5": {"warning": 25, "alert": 35, "emergency": 75},
    "PM10": {"warning": 50, "alert": 75, "emergency": 150},
    "Air Quality Index": {"warning": 50, "alert": 100, "emergency": 150},
}

SEVERITIES = ("emergency", "alert", "warning")


def _field(reading: Any, name: str) -> Any:
    if isinstance(reading, dict):
        return reading.get(name)
    return getattr(reading, name)


def classify(pollutant: str, value: float) -> str | None:
    """Return the severity of a single value, None when no bound is exceeded."""
    limits = THRESHOLDS.get(pollutant)
    if limits is None:
        return None
    for severity in SEVERITIES:
        if value > limits[severity]:
            return severity
    return None


def evaluate(pollutants: Iterable[Any]) -> List[Exceedance]:
    """Compute the exceedances of a measurement's readings, in reading order.

    Readings may be pydantic models, documents or plain dicts with
    ``pollutant`` and ``value``.
    """
    exceedances = []
    for reading in pollutants:
        name = _field(reading, "pollutant")
        name = getattr(name, "value", name)
        value = _field(reading, "value")
        severity = classify(name, value)
        if severity is None:
            continue
        threshold = THRESHOLDS[name][severity]
        exceedances.append(Exceedance(
            pollutant=name,
            value=value,
            threshold=threshold,
            severity=severity,
            ratio=f"{value / threshold:.2f}",
        ))
    return exceedances
