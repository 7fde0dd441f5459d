#file: frontend/ui_elements.py

import streamlit as st
import plotly.express as px

SEVERITY_ICONS = {"warning" : "🟡", "alert" : "🟠", "emergency" : "🔴"}


def display_chart(series_df, pollutant) :
    """Display a line chart of one pollutant over time."""
    unit = series_df["unit"].iloc[0] if not series_df.empty else ""
    fig = px.line(
        series_df,
        x = "measurement_time",
        y = "value",
        color = "station_id",
        markers = True,
        title = pollutant,
        labels = {
            "station_id" : "Station",
            "measurement_time" : "Time",
            "value" : f"{pollutant} [{unit}]"
        }
    )
    fig.update_layout(
        legend=dict(
            orientation="h",
            yanchor="top",
            y=-0.2,
            xanchor="center",
            x=0.5
        )
    )
    st.plotly_chart(fig)


def display_statistics(statistics, unit = "") :
    """Display count/avg/min/max metrics, or a note when nothing matched."""
    if not statistics :
        st.info("No readings in the selected range.")
        return
    col1, col2, col3, col4 = st.columns(4)
    col1.metric("Count", statistics["count"])
    col2.metric("Average", f"{statistics['avg']:.2f} {unit}")
    col3.metric("Min", f"{statistics['min']:.2f} {unit}")
    col4.metric("Max", f"{statistics['max']:.2f} {unit}")
    st.caption(f"Latest measurement: {statistics['latest']}")


def display_exceedances(exceedances) :
    """Warn about threshold exceedances returned after a create."""
    for e in exceedances or [] :
        icon = SEVERITY_ICONS.get(e["severity"], "")
        st.warning(f"{icon} {e['pollutant']} = {e['value']} exceeds the {e['severity']} threshold "
                   f"{e['threshold']} ({e['ratio']}x)")
