"""Chart helpers for the Streamlit dashboard."""

from __future__ import annotations

import altair as alt
import pandas as pd

from bikeflow.temporal import NO_FILTER, WINDOW_MINUTES


def hourly_histogram(hourly: pd.DataFrame, title: str, time_filter: int = NO_FILTER) -> alt.Chart:
    if hourly.empty:
        return alt.Chart(pd.DataFrame({"hour": [], "trips": []}))
    data = hourly.copy()
    if time_filter == NO_FILTER:
        data["in_window"] = True
    else:
        # Hours that overlap the selected window, on the same linear clock.
        start = data["hour"] * 60
        data["in_window"] = (start + 59 >= time_filter - WINDOW_MINUTES) & (start <= time_filter + WINDOW_MINUTES)
    return (
        alt.Chart(data)
        .mark_bar()
        .encode(
            x=alt.X("hour:O", title="Hour of day"),
            y=alt.Y("trips:Q", title="Trips"),
            color=alt.condition("datum.in_window", alt.value("#1f77b4"), alt.value("#c7c7c7")),
        )
        .properties(height=240, title=title)
    )
