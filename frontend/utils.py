#file: frontend/utils.py

import pandas as pd


def describe_readings(pollutants) :
    """One line per reading, e.g. 'PM2.5: 12.5 µg/m³'."""
    return "\n".join(f"{p.get('pollutant')}: {p.get('value')} {p.get('unit')}" for p in pollutants or [])


def readings_series(measurements, pollutant) :
    """Flatten the readings of one pollutant into a time series DataFrame."""
    rows = [
        {"station_id" : m["station_id"], "measurement_time" : m["measurement_time"], "value" : p["value"], "unit" : p["unit"]}
        for m in measurements
        for p in m.get("pollutants") or []
        if p.get("pollutant") == pollutant
    ]
    if not rows :
        return pd.DataFrame(columns = ["station_id", "measurement_time", "value", "unit"])

    df = pd.DataFrame(rows)
    df["measurement_time"] = pd.to_datetime(df["measurement_time"], utc = True)
    return df.sort_values(by = "measurement_time")


def get_station_names_and_dict(stations) :
    """Generate station labels and a label -> station_id mapping."""
    station_dict = {f"{s['name']} ({s['station_id']})" : s["station_id"] for s in stations}
    station_names = sorted(station_dict)
    return station_names, station_dict
