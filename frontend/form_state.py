#file: frontend/form_state.py

"""
Form state of the measurement editor.

The state is an immutable value; every user action is a pure function that
takes the current state and returns the next one (or, for submit, the request
to send). The Streamlit page keeps the current value in ``st.session_state``.
"""

from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Any, Dict, Optional

FORM_FIELDS = ("station_id", "measurement_time", "pollutant", "value", "unit")


@dataclass(frozen=True)
class FormState:
    station_id: str = ""
    measurement_time: str = ""
    pollutant: str = ""
    value: str = ""
    unit: str = ""
    editing_id: Optional[str] = None

    @property
    def is_editing(self) -> bool:
        return self.editing_id is not None


@dataclass(frozen=True)
class Submission:
    """Request produced by submitting the form."""
    method: str
    measurement_id: Optional[str]
    payload: Dict[str, Any]


def reset_form() -> FormState:
    return FormState()


def change_field(state: FormState, name: str, value: Any) -> FormState:
    if name not in FORM_FIELDS:
        raise KeyError(f"Unknown form field: {name}")
    return replace(state, **{name: "" if value is None else str(value)})


def load_for_edit(measurement: Dict[str, Any]) -> FormState:
    """Fill the form from a stored measurement, showing its first reading."""
    readings = measurement.get("pollutants") or []
    reading = readings[0] if readings else {}
    value = reading.get("value")
    return FormState(
        station_id=measurement.get("station_id") or "",
        measurement_time=_minutes(measurement.get("measurement_time")),
        pollutant=reading.get("pollutant") or "",
        value="" if value is None else str(value),
        unit=reading.get("unit") or "",
        editing_id=measurement.get("id"),
    )


def submit_form(state: FormState, now: Optional[datetime] = None) -> Submission:
    """Build the create or update request for the current form.

    The payload carries exactly one pollutant reading. An empty time means "now".
    """
    measurement_time = state.measurement_time or (now or datetime.now(timezone.utc)).isoformat()
    payload = {
        "station_id": state.station_id,
        "measurement_time": measurement_time,
        "pollutants": [
            {
                "pollutant": state.pollutant,
                "value": None if state.value == "" else state.value,
                "unit": state.unit,
            }
        ],
    }
    if state.is_editing:
        return Submission(method="PUT", measurement_id=state.editing_id, payload=payload)
    return Submission(method="POST", measurement_id=None, payload=payload)


def _minutes(timestamp: Optional[str]) -> str:
    # YYYY-MM-DDTHH:MM in UTC
    if not timestamp:
        return ""
    parsed = datetime.fromisoformat(timestamp.replace("Z", "+00:00"))
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc)
    return parsed.strftime("%Y-%m-%dT%H:%M")
