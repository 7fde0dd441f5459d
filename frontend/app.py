#file: frontend/app.py

import os
import sys

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

import asyncio
from datetime import datetime, timedelta, timezone

import streamlit as st

st.set_page_config(page_title="Air quality measurements", page_icon="🌍", layout="wide")

from backend.models import Pollutant, Unit, enum_values
from frontend.data_fetch import (ApiError, delete_measurement, fetch_latest, fetch_measurements, fetch_stations,
                                 fetch_statistics, send_submission)
from frontend.form_state import change_field, load_for_edit, reset_form, submit_form
from frontend.ui_elements import display_chart, display_exceedances, display_statistics
from frontend.utils import describe_readings, get_station_names_and_dict, readings_series

POLLUTANTS = enum_values(Pollutant)
UNITS = enum_values(Unit)

if "form" not in st.session_state:
    st.session_state["form"] = reset_form()
if "pending_delete" not in st.session_state:
    st.session_state["pending_delete"] = None

st.title("Air quality measurements")

# Initial load: a failure replaces the page
try:
    measurements = asyncio.run(fetch_latest())
except ApiError as e:
    st.error(f"Error: {e}")
    st.stop()

display_exceedances(st.session_state.pop("exceedances", None))


def _option_index(options, value):
    return options.index(value) if value in options else None


# ==============================
# Create / update form
# ==============================
form = st.session_state["form"]
st.subheader("Edit measurement" if form.is_editing else "Add measurement")

with st.form("measurement_form"):
    col1, col2 = st.columns(2)
    with col1:
        station_id = st.text_input("Station ID", value=form.station_id)
        measurement_time = st.text_input("Measurement time (UTC, YYYY-MM-DDTHH:MM, empty = now)",
                                         value=form.measurement_time)
    with col2:
        pollutant = st.selectbox("Pollutant", POLLUTANTS, index=_option_index(POLLUTANTS, form.pollutant),
                                 placeholder="e.g. PM2.5")
        value = st.text_input("Value", value=form.value)
        unit = st.selectbox("Unit", UNITS, index=_option_index(UNITS, form.unit), placeholder="e.g. µg/m³")
    submitted = st.form_submit_button("Update Measurement" if form.is_editing else "Add Measurement")

if form.is_editing and st.button("Cancel"):
    st.session_state["form"] = reset_form()
    st.rerun()

if submitted:
    for name, field_value in {"station_id": station_id, "measurement_time": measurement_time,
                              "pollutant": pollutant, "value": value, "unit": unit}.items():
        form = change_field(form, name, field_value)
    try:
        envelope = asyncio.run(send_submission(submit_form(form)))
    except ApiError as e:
        st.session_state["form"] = form
        st.error(f"Error: {e}")
    else:
        st.session_state["form"] = reset_form()
        st.session_state["exceedances"] = envelope.get("exceedances")
        st.rerun()

# ==============================
# Table
# ==============================
st.subheader("Latest measurements per station")

if not measurements:
    st.info("No measurements yet.")

header = st.columns([2, 3, 4, 2])
for column, title in zip(header, ["Station ID", "Time", "Pollutants", "Actions"]):
    column.markdown(f"**{title}**")

for m in measurements:
    col1, col2, col3, col4 = st.columns([2, 3, 4, 2])
    col1.write(m["station_id"])
    col2.write(datetime.fromisoformat(m["measurement_time"].replace("Z", "+00:00")).strftime("%Y-%m-%d %H:%M:%S %Z"))
    col3.text(describe_readings(m.get("pollutants")))
    with col4:
        if st.button("Edit", key=f"edit-{m['id']}"):
            st.session_state["form"] = load_for_edit(m)
            st.rerun()
        if st.button("Delete", key=f"delete-{m['id']}"):
            st.session_state["pending_delete"] = m["id"]

pending_delete = st.session_state["pending_delete"]
if pending_delete:
    st.warning("Delete this record?")
    confirm, cancel = st.columns(2)
    if confirm.button("Yes, delete"):
        try:
            asyncio.run(delete_measurement(pending_delete))
        except ApiError as e:
            st.error(f"Delete failed: {e}")
        else:
            st.session_state["pending_delete"] = None
            st.rerun()
    if cancel.button("Keep"):
        st.session_state["pending_delete"] = None
        st.rerun()

# ==============================
# History
# ==============================
st.subheader("History")

try:
    stations = asyncio.run(fetch_stations())
except ApiError as e:
    st.error(f"Error: {e}")
    st.stop()

if not stations:
    st.info("No stations registered.")
    st.stop()

station_names, station_dict = get_station_names_and_dict(stations)
col1, col2, col3 = st.columns([3, 2, 3])
with col1:
    selected_station = st.selectbox("Station", station_names)
with col2:
    selected_pollutant = st.selectbox("Pollutant ", POLLUTANTS)
with col3:
    today = datetime.now(timezone.utc).date()
    date_range = st.date_input("Date range", (today - timedelta(days=7), today), key="date_range")

if isinstance(date_range, tuple) and len(date_range) == 2:
    start_date, end_date = date_range
else:
    start_date, end_date = today - timedelta(days=7), today
start = datetime.combine(start_date, datetime.min.time()).isoformat()
end = datetime.combine(end_date, datetime.max.time()).isoformat()

try:
    history, _ = asyncio.run(fetch_measurements(station_id=station_dict[selected_station], pollutant=selected_pollutant,
                                                start_date=start, end_date=end, limit=1000))
    statistics = asyncio.run(fetch_statistics(station_dict[selected_station], selected_pollutant, start, end))
except ApiError as e:
    st.error(f"Error: {e}")
    st.stop()

series = readings_series(history, selected_pollutant)
if series.empty:
    st.warning("No data for the selected station.")
else:
    display_chart(series, selected_pollutant)
display_statistics(statistics, series["unit"].iloc[0] if not series.empty else "")
